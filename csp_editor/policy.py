"""Pure-function CSP (Content-Security-Policy) utilities."""

from __future__ import annotations

Directives = dict[str, list[str]]


def split_tokens(text: str) -> list[str]:
    """Split a line of text on whitespace, dropping empty tokens."""
    return text.split()


def parse_csp(csp_string: str) -> Directives:
    """Parse a CSP string into {directive: [values]} dict.

    Clauses that are empty after stripping are skipped. A repeated directive
    keeps its first position but takes the values of its last occurrence.

    Example:
        >>> parse_csp("default-src 'self'; script-src 'self' https:")
        {"default-src": ["'self'"], "script-src": ["'self'", "https:"]}
    """
    result: Directives = {}
    if not csp_string or not csp_string.strip():
        return result
    for part in csp_string.split(";"):
        part = part.strip()
        if not part:
            continue
        directive, *values = split_tokens(part)
        result[directive] = values
    return result


def build_csp(directives: Directives) -> str:
    """Build a CSP string from {directive: [values]} dict.

    A directive without values is rendered as its bare name.

    Example:
        >>> build_csp({"default-src": ["'self'"], "upgrade-insecure-requests": []})
        "default-src 'self'; upgrade-insecure-requests"
    """
    parts = []
    for directive, values in directives.items():
        if values:
            parts.append(f"{directive} {' '.join(values)}")
        else:
            parts.append(directive)
    return "; ".join(parts)
