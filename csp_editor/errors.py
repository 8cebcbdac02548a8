"""Exception types raised inside the editor."""

from __future__ import annotations


class CSPEditorError(Exception):
    """Base class for editor errors."""


class PolicyFetchError(CSPEditorError):
    """The policy header could not be retrieved from the target URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class MissingURLError(CSPEditorError):
    """No target URL (or inline policy) was supplied on the command line."""
