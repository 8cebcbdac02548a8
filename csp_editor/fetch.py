"""Retrieve a Content-Security-Policy header from a URL."""

from __future__ import annotations

import httpx
import structlog

from csp_editor.config.loader import EditorSettings, get_settings
from csp_editor.console import EditorIO
from csp_editor.errors import PolicyFetchError
from csp_editor.policy import Directives, parse_csp

logger = structlog.get_logger()


def _build_client(settings: EditorSettings) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout),
        follow_redirects=settings.follow_redirects,
        headers={"User-Agent": settings.user_agent},
    )


async def _request_policy(client: httpx.AsyncClient, url: str, header_name: str) -> str | None:
    """GET *url* and return the raw header value, or None if the header is absent."""
    try:
        resp = await client.get(url)
    except httpx.TimeoutException:
        raise PolicyFetchError(url, "request timed out")
    except httpx.ConnectError as exc:
        raise PolicyFetchError(url, f"could not connect ({exc})")
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise PolicyFetchError(url, str(exc) or exc.__class__.__name__)

    logger.debug("csp_response_received", url=url, status=resp.status_code)
    # httpx.Headers lookups are case-insensitive
    return resp.headers.get(header_name) or None


async def fetch_policy_header(
    url: str,
    *,
    settings: EditorSettings | None = None,
    client: httpx.AsyncClient | None = None,
    io: EditorIO | None = None,
) -> str | None:
    """Fetch the policy header for *url*.

    Never raises for network problems: a missing header and a failed request
    both return None, with a diagnostic logged and, when *io* is given, shown
    to the user.
    """
    settings = settings or get_settings()
    try:
        if client is not None:
            csp = await _request_policy(client, url, settings.header_name)
        else:
            async with _build_client(settings) as owned:
                csp = await _request_policy(owned, url, settings.header_name)
    except PolicyFetchError as exc:
        logger.warning("csp_fetch_failed", url=url, error=exc.reason)
        if io is not None:
            io.emit(f"Error fetching the URL: {exc.reason}", style="red")
        return None

    if csp is None:
        logger.info("csp_header_missing", url=url, header=settings.header_name)
        if io is not None:
            io.emit(f"No Content Security Policy found for {url}", style="yellow")
        return None

    logger.info("csp_fetched", url=url, length=len(csp))
    return csp


async def load_initial_directives(
    url: str,
    *,
    settings: EditorSettings | None = None,
    client: httpx.AsyncClient | None = None,
    io: EditorIO | None = None,
) -> Directives:
    """Fetch and parse the policy for *url*; empty when none could be retrieved."""
    csp = await fetch_policy_header(url, settings=settings, client=client, io=io)
    if csp is None:
        return {}
    return parse_csp(csp)
