# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport directive and response data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from .headers import Headers
from .payload import Payload

if TYPE_CHECKING:
    from ..config import ProtocolVersion
    from ..security.trust import CredentialEncoding


class VerifyHost(str, Enum):
    """Hostname verification strictness requested from the transport."""

    NONE = "none"
    RELAXED = "relaxed"
    STRICT = "strict"


@dataclass(frozen=True)
class CredentialDirective:
    """Client certificate or key material handed to the transport (path or blob)."""

    encoding: CredentialEncoding
    path: str | None = None
    blob: bytes | None = field(default=None, repr=False)
    password: str | None = field(default=None, repr=False)


@dataclass
class TransportDirectives:
    """Flat set of options a transport needs to perform one exchange."""

    method: str
    url: str
    protocol_version: ProtocolVersion | None = None
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    user_agent: str | None = None
    timeout: float = 0.0
    connect_timeout: float = 0.0
    proxy_url: str | None = None
    proxy_auth: tuple[str, str] | None = field(default=None, repr=False)
    verify_peer: bool = True
    verify_host: VerifyHost = VerifyHost.STRICT
    ca_file: str | None = None
    ca_path: str | None = None
    client_certificate: CredentialDirective | None = None
    client_key: CredentialDirective | None = None


@dataclass
class RawResponse:
    """What a transport hands back: either the raw exchange or a failure description."""

    ok: bool
    status_code: int | str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    content_type: str | None = None
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    error_code: int | None = None
    exception: BaseException | None = field(default=None, repr=False)
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Response:
    """Assembled response: decoded payload, or raw body when nothing was decoded."""

    headers: Headers
    payload: Payload
    body: bytes | None
    status_code: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    @property
    def text(self) -> str:
        return (self.body or b"").decode("utf-8", errors="replace")

    def header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name, default)

    def to_mapping(self) -> Mapping[str, Any]:
        """Plain-dict rendering used by the CLI."""
        return {
            "status_code": self.status_code,
            "headers": self.headers.to_dict(),
            "payload": self.payload.to_dict(),
            "body": None if self.body is None else self.text,
        }


__all__ = [
    "CredentialDirective",
    "RawResponse",
    "Response",
    "TransportDirectives",
    "VerifyHost",
]
