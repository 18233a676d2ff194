# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed Transport implementation."""

from __future__ import annotations

import logging
import os
import ssl
import tempfile
from collections.abc import Callable
from contextlib import suppress
from typing import Any

import httpx

from ..config import ProtocolVersion
from ..errors import SecureRequestError
from ..security.trust import CredentialEncoding
from .models import CredentialDirective, RawResponse, TransportDirectives, VerifyHost
from .transport import Transport

logger = logging.getLogger(__name__)


class HttpxTransport(Transport):
    """
    Synchronous httpx transport.

    A fresh ``httpx.Client`` is built for every exchange (verification, proxy and
    protocol options are per request) and closed before ``execute`` returns.
    """

    def __init__(self, client_factory: Callable[..., httpx.Client] | None = None):
        self._client_factory = client_factory or httpx.Client

    def execute(self, directives: TransportDirectives) -> RawResponse:
        verify = build_verify(directives)
        http1, http2 = protocol_flags(directives.protocol_version)
        client_kwargs: dict[str, Any] = {
            "verify": verify,
            "http1": http1,
            "http2": http2,
            "timeout": build_timeout(directives),
            "follow_redirects": False,
            "trust_env": False,
        }
        if directives.proxy_url:
            client_kwargs["proxy"] = httpx.Proxy(directives.proxy_url, auth=directives.proxy_auth)

        headers = dict(directives.headers)
        if directives.user_agent and not any(name.lower() == "user-agent" for name in headers):
            headers["User-Agent"] = directives.user_agent

        logger.debug(
            "httpx %s %s (http2=%s, proxy=%s, verify_host=%s)",
            directives.method,
            directives.url,
            http2,
            bool(directives.proxy_url),
            directives.verify_host.value,
        )
        try:
            with self._client_factory(**client_kwargs) as client:
                resp = client.request(
                    directives.method,
                    directives.url,
                    headers=headers,
                    content=directives.body,
                )
                content = resp.content
        except (httpx.HTTPError, OSError) as exc:
            return RawResponse(
                ok=False,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                error_code=getattr(exc, "errno", None),
                exception=exc,
            )

        return RawResponse(
            ok=True,
            status_code=resp.status_code,
            headers=dict(resp.headers),
            content_type=resp.headers.get("content-type"),
            content=content,
            url=str(resp.url),
            meta={"http_version": resp.http_version},
        )

    def close(self) -> None:
        return None


def protocol_flags(version: ProtocolVersion | None) -> tuple[bool, bool]:
    """Return httpx ``(http1, http2)`` flags for a protocol hint."""
    if version is ProtocolVersion.HTTP_1_1:
        return True, False
    if version is ProtocolVersion.HTTP_1_0:
        logger.debug("httpx does not speak HTTP/1.0; sending as HTTP/1.1")
        return True, False
    if version is ProtocolVersion.HTTP_3:
        logger.warning("HTTP/3 is not available with httpx; negotiating HTTP/2 or HTTP/1.1 instead")
    return True, True


def build_timeout(directives: TransportDirectives) -> httpx.Timeout:
    """0 means unbounded for both the overall and the connect phase."""
    total = directives.timeout or None
    connect = directives.connect_timeout or total
    return httpx.Timeout(total, connect=connect)


def build_verify(directives: TransportDirectives) -> ssl.SSLContext | bool:
    """Translate TLS directives into an httpx ``verify`` argument."""
    if not directives.verify_peer:
        return False
    if (
        directives.ca_file is None
        and directives.ca_path is None
        and directives.client_certificate is None
        and directives.verify_host is VerifyHost.STRICT
    ):
        return True

    try:
        context = ssl.create_default_context(cafile=directives.ca_file, capath=directives.ca_path)
    except (OSError, ssl.SSLError) as exc:
        raise SecureRequestError("Unable to load CA certificate(s)", 143) from exc

    if directives.verify_host is VerifyHost.STRICT:
        context.check_hostname = True
        context.hostname_checks_common_name = False
        context.verify_flags |= ssl.VERIFY_X509_STRICT
    elif directives.verify_host is VerifyHost.RELAXED:
        context.check_hostname = True
        context.hostname_checks_common_name = True
    else:
        context.check_hostname = False

    if directives.client_certificate is not None:
        load_client_certificate(context, directives.client_certificate, directives.client_key)
    return context


def load_client_certificate(
    context: ssl.SSLContext,
    certificate: CredentialDirective,
    key: CredentialDirective | None,
) -> None:
    """Load a client certificate chain into ``context``; blobs go through a short-lived temp file."""
    temp_paths: list[str] = []
    try:
        cert_path = _material_path(certificate, temp_paths)
        key_path = _material_path(key, temp_paths) if key is not None else None
        password = (key.password if key is not None else None) or certificate.password
        context.load_cert_chain(cert_path, keyfile=key_path, password=password)
    except SecureRequestError:
        raise
    except (OSError, ssl.SSLError, ValueError) as exc:
        raise SecureRequestError(f"{type(exc).__name__}: unable to load client certificate", 179) from exc
    finally:
        for path in temp_paths:
            with suppress(FileNotFoundError):
                os.unlink(path)


def _material_path(material: CredentialDirective, temp_paths: list[str]) -> str:
    if material.encoding is not CredentialEncoding.PEM:
        raise SecureRequestError(f"{material.encoding.value} credentials are not supported by the httpx transport", 171)
    if material.path is not None:
        return material.path
    if not material.blob:
        raise SecureRequestError("Credential has neither a path nor blob data", 172)
    fd, path = tempfile.mkstemp(prefix="httpcourier-", suffix=".pem")
    temp_paths.append(path)
    with os.fdopen(fd, "wb") as handle:
        handle.write(material.blob)
    return path


__all__ = ["HttpxTransport", "build_timeout", "build_verify", "protocol_flags"]
