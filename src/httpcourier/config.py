# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Client configuration snapshots.

A ``ClientConfig`` is never mutated. New snapshots are derived from a previous one
with ``resolve_config(previous, **overrides)``: every override that is ``None`` is
inherited from ``previous`` (or from the hard-coded defaults when there is no
previous snapshot). Zero and empty values are explicit overrides, so
``timeout=0`` means "no timeout", not "inherit".
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import ConfigurationError
from .http.codec import BaseCodec, ContentCodec, ContentType, get_codec, is_codec
from .http.headers import HeadersPolicy
from .http.payload import PayloadPolicy
from .version import __version__

if TYPE_CHECKING:
    from .http.auth import AuthPolicy
    from .http.proxy import ProxyConfig
    from .security.policy import TlsTrustPolicy

DEFAULT_USER_AGENT = f"httpcourier/{__version__}"


class ProtocolVersion(str, Enum):
    HTTP_1_0 = "1.0"
    HTTP_1_1 = "1.1"
    HTTP_2 = "2"
    HTTP_3 = "3"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: str | ProtocolVersion) -> ProtocolVersion:
        if isinstance(value, ProtocolVersion):
            return value
        text = str(value).strip().lower()
        if text.startswith("http/"):
            text = text[5:]
        aliases = {"1": "1.0", "2.0": "2", "3.0": "3"}
        try:
            return cls(aliases.get(text, text))
        except ValueError:
            raise ConfigurationError(f"Unsupported HTTP protocol version: {value!r}") from None


@dataclass(frozen=True)
class ClientConfig:
    """Immutable configuration snapshot shared by every request a client sends."""

    protocol_version: ProtocolVersion = ProtocolVersion.AUTO
    request_content_type: ContentType | None = None
    response_content_type: ContentType | None = None
    tls_policy: TlsTrustPolicy | None = None
    auth_policy: AuthPolicy | None = None
    proxy: ProxyConfig | None = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 0.0
    connect_timeout: float = 0.0
    codec: ContentCodec = field(default_factory=BaseCodec)
    request_headers_policy: HeadersPolicy = field(default_factory=HeadersPolicy)
    response_headers_policy: HeadersPolicy = field(default_factory=lambda: HeadersPolicy(max_value_length=0))
    request_payload_policy: PayloadPolicy = field(default_factory=PayloadPolicy)
    response_payload_policy: PayloadPolicy = field(default_factory=PayloadPolicy)

    def derive(self, **overrides: Any) -> ClientConfig:
        """Return a new snapshot with ``overrides`` applied on top of this one."""
        return resolve_config(self, **overrides)


_FIELD_NAMES = frozenset(f.name for f in fields(ClientConfig))


def _resolve_codec(value: Any) -> ContentCodec:
    if isinstance(value, str):
        return get_codec(value)
    if isinstance(value, type):
        try:
            value = value()
        except TypeError as exc:
            raise ConfigurationError(f"Codec class {value.__name__} cannot be instantiated") from exc
    if not is_codec(value):
        raise ConfigurationError(f"Invalid codec: {value!r} does not implement header_for/encode/decode")
    return value


def _resolve_timeout(name: str, value: Any) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number of seconds, got {value!r}") from None
    if seconds < 0:
        raise ConfigurationError(f"{name} must be >= 0 (0 disables the limit)")
    return seconds


def _resolve_content_type(name: str, value: Any) -> ContentType:
    if isinstance(value, ContentType):
        return value
    found = ContentType.find(str(value))
    if found is None:
        raise ConfigurationError(f"Unsupported {name}: {value!r}")
    return found


def resolve_config(previous: ClientConfig | None = None, **overrides: Any) -> ClientConfig:
    """
    Derive a configuration snapshot.

    For each field: ``overrides[field]`` if it is not None, else ``previous.field``,
    else the hard-coded default. ``previous`` is never modified.
    """
    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        raise ConfigurationError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")

    filtered = {key: value for key, value in overrides.items() if value is not None}
    if "codec" in filtered:
        filtered["codec"] = _resolve_codec(filtered["codec"])
    if "protocol_version" in filtered:
        filtered["protocol_version"] = ProtocolVersion.parse(filtered["protocol_version"])
    for name in ("timeout", "connect_timeout"):
        if name in filtered:
            filtered[name] = _resolve_timeout(name, filtered[name])
    for name in ("request_content_type", "response_content_type"):
        if name in filtered:
            filtered[name] = _resolve_content_type(name, filtered[name])
    if "user_agent" in filtered:
        filtered["user_agent"] = str(filtered["user_agent"])

    base = previous if previous is not None else ClientConfig()
    return replace(base, **filtered) if filtered else base


def _float_env(name: str) -> float | None:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else None
    except ValueError:
        return None


def _version_env(name: str) -> ProtocolVersion | None:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return ProtocolVersion.parse(value)
    except ConfigurationError:
        return None


def env_overrides() -> dict[str, Any]:
    """Read configuration overrides from environment variables (evaluated at call time)."""
    timeout = _float_env("HTTPCOURIER_TIMEOUT")
    connect_timeout = _float_env("HTTPCOURIER_CONNECT_TIMEOUT")
    return {
        "timeout": timeout if timeout is not None and timeout >= 0 else None,
        "connect_timeout": connect_timeout if connect_timeout is not None and connect_timeout >= 0 else None,
        "user_agent": os.getenv("HTTPCOURIER_USER_AGENT") or None,
        "protocol_version": _version_env("HTTPCOURIER_HTTP_VERSION"),
        "codec": os.getenv("HTTPCOURIER_CODEC") or None,
    }


def load_client_config(previous: ClientConfig | None = None) -> ClientConfig:
    """Layer environment overrides onto ``previous`` (or the hard-coded defaults)."""
    return resolve_config(previous, **env_overrides())


__all__ = [
    "DEFAULT_USER_AGENT",
    "ClientConfig",
    "ProtocolVersion",
    "env_overrides",
    "load_client_config",
    "resolve_config",
]
