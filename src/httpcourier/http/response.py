# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Assemble structured responses from raw transport results."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..config import ClientConfig
from ..errors import ResponseError
from .codec import UNSUPPORTED, ContentType
from .headers import Headers, header_value
from .models import RawResponse, Response
from .payload import Payload

_STATUS_RE = re.compile(r"^\s*(\d{3})\b")


def coerce_status_code(value: Any) -> int:
    """Accept int status codes and numeric strings (``"404"``, ``"404 Not Found"``)."""
    if isinstance(value, bool):
        raise ResponseError("Could not retrieve HTTP response code")
    if isinstance(value, int):
        return value
    if isinstance(value, (str, bytes)):
        text = value.decode("ascii", errors="replace") if isinstance(value, bytes) else value
        match = _STATUS_RE.match(text)
        if match:
            return int(match.group(1))
    raise ResponseError("Could not retrieve HTTP response code")


def announced_content_type(raw: RawResponse) -> str | None:
    announced = raw.content_type or header_value(raw.headers, "Content-Type")
    return announced.strip() if announced and announced.strip() else None


def resolve_response_content_type(announced: str | None, config: ClientConfig, status_code: int) -> ContentType | None:
    """
    Resolve the content type used to decode a response body.

    The announced value wins; without one the configured default is used; without
    either the response cannot be interpreted. An announced but unknown MIME type
    resolves to None (body is passed through undecoded).
    """
    if announced:
        return ContentType.find(announced)
    if config.response_content_type is not None:
        return config.response_content_type
    raise ResponseError("Response has no content type", status_code=status_code)


def assemble_response(raw: RawResponse, config: ClientConfig) -> Response:
    """Map a successful raw exchange to a ``Response`` or fail with ResponseError."""
    status_code = coerce_status_code(raw.status_code)
    announced = announced_content_type(raw)
    content_type = resolve_response_content_type(announced, config, status_code)

    body: bytes | None = raw.content or b""
    decoded: Any = UNSUPPORTED
    if content_type is not None and body:
        try:
            decoded = config.codec.decode(body, content_type)
        except Exception as exc:  # noqa: BLE001
            raise ResponseError(
                f"Failed to decode {content_type.value} response: {type(exc).__name__}: {exc}",
                status_code=status_code,
            ) from exc

    try:
        headers = Headers(raw.headers, policy=config.response_headers_policy)
        if isinstance(decoded, Mapping):
            payload = Payload(decoded, policy=config.response_payload_policy)
            body = None
        else:
            payload = Payload(policy=config.response_payload_policy)
        return Response(headers=headers, payload=payload, body=body, status_code=status_code)
    except Exception as exc:  # noqa: BLE001
        raise ResponseError(f"{type(exc).__name__}: {exc}", status_code=status_code) from exc


__all__ = [
    "announced_content_type",
    "assemble_response",
    "coerce_status_code",
    "resolve_response_content_type",
]
