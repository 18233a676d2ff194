# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Content-type codecs.

A codec converts between structured payloads and wire bytes for a content type.
Three operations make up the contract: ``header_for``, ``encode`` and ``decode``.
Tags the codec cannot handle yield the ``UNSUPPORTED`` sentinel instead of raising,
so callers can branch to a fallback (raw body passthrough, error) without unwinding.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, Final, Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlencode

from ..errors import ConfigurationError


class _Unsupported:
    """Sentinel returned when a codec has no rule for a content type."""

    _instance: _Unsupported | None = None

    def __new__(cls) -> _Unsupported:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSUPPORTED"


UNSUPPORTED: Final = _Unsupported()


class ContentType(str, Enum):
    JSON = "application/json"
    FORM = "application/x-www-form-urlencoded"
    TEXT = "text/plain"
    HTML = "text/html"
    XML = "application/xml"
    OCTET_STREAM = "application/octet-stream"
    MULTIPART = "multipart/form-data"

    @classmethod
    def find(cls, value: str | None) -> ContentType | None:
        """Map a Content-Type header value to a member, ignoring parameters and case."""
        if not value:
            return None
        mime = str(value).split(";", 1)[0].strip().lower()
        if not mime:
            return None
        for member in cls:
            if member.value == mime:
                return member
        if mime == "text/xml":
            return cls.XML
        if mime.endswith("+json"):
            return cls.JSON
        return None


@runtime_checkable
class ContentCodec(Protocol):
    """Three-operation codec contract used by the request executor."""

    default_content_type: ContentType

    def header_for(self, content_type: ContentType | None) -> str | None: ...

    def encode(self, payload: Mapping[str, Any], content_type: ContentType | None) -> bytes | _Unsupported: ...

    def decode(self, data: bytes, content_type: ContentType | None) -> Any: ...


class BaseCodec:
    """Built-in codec handling JSON and form-url-encoded bodies."""

    default_content_type = ContentType.JSON

    def header_for(self, content_type: ContentType | None) -> str | None:
        if content_type is ContentType.JSON:
            return "application/json; charset=utf-8"
        if content_type is ContentType.FORM:
            return "application/x-www-form-urlencoded; charset=utf-8"
        return None

    def encode(self, payload: Mapping[str, Any], content_type: ContentType | None) -> bytes | _Unsupported:
        data = dict(payload)
        if content_type is ContentType.JSON:
            return json.dumps(data, ensure_ascii=False, allow_nan=False, separators=(",", ":")).encode("utf-8")
        if content_type is ContentType.FORM:
            return encode_form(data).encode("ascii")
        return UNSUPPORTED

    def decode(self, data: bytes, content_type: ContentType | None) -> Any:
        """Decode a body; malformed input for a supported type raises ValueError."""
        if content_type is ContentType.JSON:
            return json.loads(data.decode("utf-8"), parse_constant=_reject_constant)
        if content_type is ContentType.FORM:
            text = data.decode("utf-8")
            return dict(parse_qsl(text, keep_blank_values=True))
        return UNSUPPORTED


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _form_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "1" if value else "0"
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return [_form_value(item) for item in value]
    return value


def encode_form(data: Mapping[str, Any]) -> str:
    """Percent-encode key/value pairs in mapping order; sequences expand to repeated keys."""
    return urlencode([(key, _form_value(value)) for key, value in data.items()], doseq=True)


def is_codec(candidate: Any) -> bool:
    """Return True when ``candidate`` honours the three-operation codec contract."""
    if candidate is None or isinstance(candidate, (str, bytes)):
        return False
    for name in ("header_for", "encode", "decode"):
        if not callable(getattr(candidate, name, None)):
            return False
    return isinstance(getattr(candidate, "default_content_type", None), ContentType)


_REGISTRY: dict[str, ContentCodec] = {"base": BaseCodec()}


def register_codec(name: str, codec: Any) -> None:
    """Register a codec instance (or a zero-argument codec class) under ``name``."""
    if isinstance(codec, type):
        codec = codec()
    if not name or not is_codec(codec):
        raise ConfigurationError(f"Invalid codec registration: {name!r}")
    _REGISTRY[name] = codec


def get_codec(name: str) -> ContentCodec:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise ConfigurationError(f"Unknown codec: {name!r}") from None


def registered_codecs() -> list[str]:
    return sorted(_REGISTRY)


__all__ = [
    "UNSUPPORTED",
    "BaseCodec",
    "ContentCodec",
    "ContentType",
    "encode_form",
    "get_codec",
    "is_codec",
    "register_codec",
    "registered_codecs",
]
