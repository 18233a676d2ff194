# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL helpers for request building."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

SECURE_SCHEMES = frozenset({"https"})


@dataclass(frozen=True)
class UrlInfo:
    """Parsed absolute URL; scheme and host are mandatory."""

    scheme: str
    host: str
    port: int | None
    path: str
    query: str
    fragment: str
    complete: str

    @classmethod
    def parse(cls, url: str) -> UrlInfo:
        raw = str(url or "").strip()
        try:
            parts = urlsplit(raw)
            port = parts.port
        except ValueError as exc:
            raise ValueError(f"Malformed URL: {raw!r}") from exc
        if not parts.scheme or not parts.hostname:
            raise ValueError("Cannot create request without URL scheme and host")
        scheme = parts.scheme.lower()
        complete = urlunsplit((scheme, parts.netloc, parts.path or "/", parts.query, ""))
        return cls(
            scheme=scheme,
            host=parts.hostname,
            port=port,
            path=parts.path or "/",
            query=parts.query,
            fragment=parts.fragment,
            complete=complete,
        )

    @property
    def is_secure(self) -> bool:
        return self.scheme in SECURE_SCHEMES


def append_query(url: UrlInfo, encoded_query: str) -> str:
    """
    Append an already-encoded query string to ``url.complete``.

    Keys that collide with the existing query are kept alongside it, not replaced.
    """
    if not encoded_query:
        return url.complete
    separator = "&" if url.query else "?"
    return f"{url.complete}{separator}{encoded_query}"


__all__ = ["SECURE_SCHEMES", "UrlInfo", "append_query"]
