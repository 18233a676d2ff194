# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header containers and normalization utilities.

HTTP header field names are case-insensitive (RFC 9110). ``Headers`` keeps the
caller's spelling for the wire while matching names case-insensitively, and
validates names/values against a ``HeadersPolicy``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


@dataclass(frozen=True)
class HeadersPolicy:
    """Validation limits applied when a header container is built or written (0 disables a limit)."""

    max_count: int = 100
    max_value_length: int = 8192
    trim_values: bool = True


def _coerce_headers_mapping(headers: Any) -> Mapping[object, object] | None:
    """
    Best-effort coercion of "dict-like" header containers into a Mapping.

    Accepts plain dicts, httpx.Headers, ``Headers`` and iterables of pairs.
    """
    if not headers:
        return None
    if isinstance(headers, Mapping):
        return headers

    items = getattr(headers, "items", None)
    if callable(items):
        try:
            return dict(items())
        except (TypeError, ValueError):
            pass

    try:
        return dict(headers)
    except (TypeError, ValueError):
        return None


class Headers:
    """Ordered, case-insensitive header container."""

    def __init__(self, initial: Any = None, policy: HeadersPolicy | None = None):
        self.policy = policy or HeadersPolicy()
        self._items: dict[str, tuple[str, str]] = {}
        if initial is None:
            return
        if isinstance(initial, Headers):
            pairs = list(initial.items())
        elif isinstance(initial, Mapping):
            pairs = list(initial.items())
        else:
            try:
                pairs = [(name, value) for name, value in initial]
            except (TypeError, ValueError) as exc:
                raise ValueError("Headers must be a mapping or an iterable of name/value pairs") from exc

        for name, value in pairs:
            if self.has(str(name)):
                raise ValueError(f"Duplicate header name: {name!r}")
            self.set(name, value)

    def _check(self, name: Any, value: Any) -> tuple[str, str]:
        if not isinstance(name, str) or not _TOKEN_RE.match(name):
            raise ValueError(f"Invalid header name: {name!r}")
        text = "" if value is None else str(value)
        if self.policy.trim_values:
            text = text.strip()
        if "\r" in text or "\n" in text or "\x00" in text:
            raise ValueError(f"Invalid characters in value of header {name!r}")
        if self.policy.max_value_length and len(text) > self.policy.max_value_length:
            raise ValueError(f"Value of header {name!r} exceeds {self.policy.max_value_length} characters")
        return name, text

    def set(self, name: str, value: Any) -> None:
        name, text = self._check(name, value)
        key = name.lower()
        if key not in self._items and self.policy.max_count and len(self._items) >= self.policy.max_count:
            raise ValueError(f"Too many headers (limit {self.policy.max_count})")
        self._items[key] = (name, text)

    def setdefault(self, name: str, value: Any) -> str:
        if not self.has(name):
            self.set(name, value)
        return self.get(name) or ""

    def get(self, name: str, default: str | None = None) -> str | None:
        entry = self._items.get(str(name).lower())
        return entry[1] if entry else default

    def has(self, name: str) -> bool:
        return str(name).lower() in self._items

    def remove(self, name: str) -> None:
        self._items.pop(str(name).lower(), None)

    def count(self) -> int:
        return len(self._items)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._items.values()))

    def to_dict(self) -> dict[str, str]:
        return dict(self._items.values())

    def copy(self) -> Headers:
        clone = Headers(policy=self.policy)
        clone._items = dict(self._items)
        return clone

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return normalize_headers(self.to_dict()) == normalize_headers(other.to_dict())
        if isinstance(other, Mapping):
            return normalize_headers(self.to_dict()) == normalize_headers(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self.to_dict()!r})"


def normalize_headers(headers: Mapping[object, object] | None) -> dict[str, str]:
    """Return a lowercase-keyed copy of a header mapping."""
    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return {}
    out: dict[str, str] = {}
    for key, value in coerced.items():
        if key is None:
            continue
        name = str(key).strip().lower()
        if not name:
            continue
        out[name] = "" if value is None else str(value)
    return out


def header_value(headers: Any, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default
    if isinstance(headers, Headers):
        value = headers.get(name)
        return default if value is None else value.strip()

    coerced = _coerce_headers_mapping(headers)
    if not coerced:
        return default

    lower = str(name).lower()
    for key, value in coerced.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


__all__ = ["Headers", "HeadersPolicy", "header_value", "normalize_headers"]
