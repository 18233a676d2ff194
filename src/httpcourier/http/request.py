# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-call request context and wire-level request building."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..config import ClientConfig
from ..errors import RequestError, SecureRequestError
from .codec import UNSUPPORTED, ContentType, encode_form
from .executor import RequestExecutor
from .headers import Headers
from .models import TransportDirectives
from .observer import ObserverBinding, RequestObserver
from .payload import Payload
from .url import UrlInfo, append_query

if TYPE_CHECKING:
    from .models import Response
    from .transport import TransportFactory

QUERY_METHODS = frozenset({"GET"})


class RequestContext:
    """
    Binds a resolved ClientConfig to one method/URL/headers/payload.

    A context is owned by the caller for the duration of one ``send()``; it is not
    meant to be shared between threads or reused after sending.
    """

    def __init__(
        self,
        config: ClientConfig,
        method: str,
        url: str,
        headers: Headers | Mapping[str, Any] | None = None,
        payload: Payload | Mapping[str, Any] | None = None,
        body: bytes | str | None = None,
    ):
        self.config = config
        self.method = str(method or "").upper()
        if not self.method or not self.method.replace("-", "").isalpha():
            raise RequestError(f"Invalid HTTP method: {method!r}")
        try:
            self.url = UrlInfo.parse(url)
        except ValueError as exc:
            raise RequestError(str(exc)) from exc
        try:
            self.headers = Headers(headers, policy=config.request_headers_policy)
        except ValueError as exc:
            raise RequestError(f"Invalid request headers: {exc}") from exc
        try:
            self.payload = Payload(payload, policy=config.request_payload_policy)
        except ValueError as exc:
            raise RequestError(f"Invalid request payload: {exc}") from exc
        self.body: bytes | None = None
        self.observer: ObserverBinding | None = None
        if body is not None:
            self.set_body(body)

    def set_body(self, body: bytes | str | None) -> RequestContext:
        """Set a raw body; it is sent verbatim for non-GET methods and ignored for GET."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = bytes(body) if body else None
        return self

    def observe(self, observer: RequestObserver, context: Mapping[str, Any] | None = None) -> RequestContext:
        self.observer = ObserverBinding(observer, dict(context or {}))
        return self

    def request_content_type(self) -> ContentType | None:
        """Explicit config override, else the caller's Content-Type header, else the codec default."""
        if self.config.request_content_type is not None:
            return self.config.request_content_type
        announced = self.headers.get("Content-Type")
        if announced:
            return ContentType.find(announced)
        return self.config.codec.default_content_type

    def build_directives(self) -> TransportDirectives:
        """Resolve everything the transport needs. No network activity happens here."""
        config = self.config
        directives = TransportDirectives(
            method=self.method,
            url=self.url.complete,
            protocol_version=config.protocol_version,
            user_agent=config.user_agent or None,
            timeout=config.timeout,
            connect_timeout=config.connect_timeout,
        )

        if config.proxy is not None:
            config.proxy.apply_to(directives)

        if self.url.is_secure:
            if config.tls_policy is None:
                raise SecureRequestError(f"Refusing {self.url.scheme} request without a TLS trust policy", 450)
            config.tls_policy.apply_to(directives)

        headers = self.headers.copy()
        if self.method in QUERY_METHODS:
            self._format_query(directives)
        else:
            self._format_body(directives, headers)

        directives.headers = headers.to_dict()
        if config.auth_policy is not None:
            config.auth_policy.apply_to(directives)
        return directives

    def _format_query(self, directives: TransportDirectives) -> None:
        if self.payload.count():
            directives.url = append_query(self.url, encode_form(self.payload.to_dict()))

    def _format_body(self, directives: TransportDirectives, headers: Headers) -> None:
        codec = self.config.codec
        if self.body is not None:
            # Raw bodies are never encoded; only an explicit override labels them.
            body = self.body
            content_type = self.config.request_content_type
        elif self.payload.count():
            content_type = self.request_content_type()
            try:
                encoded = codec.encode(self.payload.to_dict(), content_type)
            except Exception as exc:  # noqa: BLE001
                raise RequestError(f"Failed to encode request payload: {type(exc).__name__}: {exc}") from exc
            if encoded is UNSUPPORTED or not isinstance(encoded, (bytes, bytearray)):
                label = content_type.value if content_type else headers.get("Content-Type", "none")
                raise RequestError(f"No encoder for request content type: {label}")
            body = bytes(encoded)
        else:
            return

        try:
            if content_type is not None and not headers.has("Content-Type"):
                header = codec.header_for(content_type)
                if header:
                    headers.set("Content-Type", header)
            if not headers.has("Content-Length"):
                headers.set("Content-Length", str(len(body)))
        except ValueError as exc:
            raise RequestError(f"Invalid request headers: {exc}") from exc
        directives.body = body

    def send(self, transport_factory: TransportFactory | None = None) -> Response:
        return RequestExecutor(transport_factory).send(self)

    def __repr__(self) -> str:
        return f"RequestContext({self.method} {self.url.complete})"


__all__ = ["QUERY_METHODS", "RequestContext"]
