# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Proxy route configuration."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import ConfigurationError
from .models import TransportDirectives

_PROXY_SCHEMES = frozenset({"http", "https", "socks5", "socks5h"})


@dataclass(frozen=True)
class ProxyConfig:
    host: str
    port: int | None = None
    username: str | None = None
    password: str | None = field(default=None, repr=False)
    scheme: str = "http"

    def __post_init__(self) -> None:
        if not self.host or "/" in self.host:
            raise ConfigurationError(f"Invalid proxy host: {self.host!r}")
        if self.port is not None and not 1 <= int(self.port) <= 65535:
            raise ConfigurationError(f"Invalid port for proxy server: {self.port}")
        if self.password and not self.username:
            raise ConfigurationError("Proxy password given without a username")
        if self.scheme.lower() not in _PROXY_SCHEMES:
            raise ConfigurationError(f"Unsupported proxy scheme: {self.scheme!r}")
        object.__setattr__(self, "scheme", self.scheme.lower())

    @classmethod
    def parse(cls, value: str, username: str | None = None, password: str | None = None) -> ProxyConfig:
        """Build from ``host:port`` or ``scheme://host:port``."""
        scheme = "http"
        rest = value.strip()
        if "://" in rest:
            scheme, rest = rest.split("://", 1)
        host, _, port = rest.rstrip("/").rpartition(":")
        if not host:
            return cls(host=port, username=username, password=password, scheme=scheme)
        try:
            return cls(host=host, port=int(port), username=username, password=password, scheme=scheme)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid proxy address: {value!r}") from exc

    @property
    def url(self) -> str:
        port = f":{self.port}" if self.port else ""
        return f"{self.scheme}://{self.host}{port}"

    def apply_to(self, directives: TransportDirectives) -> None:
        directives.proxy_url = self.url
        if self.username:
            directives.proxy_auth = (self.username, self.password or "")


__all__ = ["ProxyConfig"]
