# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level client facade."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import ClientConfig, load_client_config, resolve_config
from .http.headers import Headers
from .http.models import Response
from .http.payload import Payload
from .http.request import RequestContext
from .http.transport import TransportFactory


class HttpClient:
    """
    Convenience wrapper holding the current configuration snapshot.

    ``change_config`` swaps in a snapshot derived from the current one; snapshots
    already handed to in-flight requests are never modified, so a client can be
    shared between threads as long as reconfiguration is not raced against sends.
    """

    def __init__(self, config: ClientConfig | None = None, transport_factory: TransportFactory | None = None):
        self.config = config if config is not None else load_client_config()
        self.transport_factory = transport_factory

    def change_config(self, **overrides: Any) -> HttpClient:
        self.config = resolve_config(self.config, **overrides)
        return self

    def request(
        self,
        method: str,
        url: str,
        headers: Headers | Mapping[str, Any] | None = None,
        payload: Payload | Mapping[str, Any] | None = None,
        body: bytes | str | None = None,
    ) -> RequestContext:
        return RequestContext(self.config, method, url, headers=headers, payload=payload, body=body)

    def send(
        self,
        method: str,
        url: str,
        headers: Headers | Mapping[str, Any] | None = None,
        payload: Payload | Mapping[str, Any] | None = None,
        body: bytes | str | None = None,
    ) -> Response:
        return self.request(method, url, headers=headers, payload=payload, body=body).send(self.transport_factory)

    def get(self, url: str, **kwargs: Any) -> Response:
        return self.send("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Response:
        return self.send("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Response:
        return self.send("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Response:
        return self.send("DELETE", url, **kwargs)


__all__ = ["HttpClient"]
