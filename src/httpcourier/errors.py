# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    PROXY_ERROR = "PROXY_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


class HttpCourierError(Exception):
    """Base class for every error raised by httpcourier."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class RequestError(HttpCourierError):
    """The request could not be constructed or encoded. Raised before any network activity."""


class ConfigurationError(RequestError):
    """A configuration value (codec, proxy, timeout, ...) is invalid."""


class SecureRequestError(RequestError):
    """A TLS trust precondition failed, or an https URL has no TLS policy."""


class ResponseError(HttpCourierError):
    """Transport failure, unusable status code, or response assembly failure."""

    def __init__(
        self,
        message: str,
        code: int | None = None,
        *,
        status_code: int | None = None,
        category: ErrorCategory = ErrorCategory.NONE,
    ):
        super().__init__(message, code)
        self.status_code = status_code
        self.category = category


class HttpClientError(HttpCourierError):
    """Raised in place of the original error when an observer saw the failure."""

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


def categorize_exception(exc: BaseException) -> ErrorCategory:
    """
    Map Python/httpx exceptions to ErrorCategory.
    """
    import socket
    import ssl as ssl_module

    import httpx

    if isinstance(exc, httpx.TimeoutException):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, httpx.ProxyError):
        return ErrorCategory.PROXY_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    # httpx wraps the ssl error of a failed handshake in ConnectError.
    if isinstance(exc, httpx.ConnectError) and isinstance(exc.__context__, ssl_module.SSLError):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.RemoteProtocolError, httpx.LocalProtocolError)):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, (socket.gaierror, socket.herror)):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (TimeoutError, socket.timeout)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


def error_category_to_reason(category: ErrorCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        ErrorCategory.TIMEOUT: "Network timeout while waiting for the server",
        ErrorCategory.SSL_ERROR: "TLS/certificate issue",
        ErrorCategory.CONNECTION_ERROR: "Network connectivity issue",
        ErrorCategory.PROXY_ERROR: "Proxy server refused or failed the request",
        ErrorCategory.DNS_ERROR: "DNS resolution failure",
        ErrorCategory.PROTOCOL_ERROR: "Malformed HTTP exchange",
        ErrorCategory.UNKNOWN_ERROR: "Network error during request",
        ErrorCategory.NONE: "",
        None: "",
    }
    return mapping.get(category, "Request failed due to network error")


__all__ = [
    "ConfigurationError",
    "ErrorCategory",
    "HttpClientError",
    "HttpCourierError",
    "RequestError",
    "ResponseError",
    "SecureRequestError",
    "categorize_exception",
    "error_category_to_reason",
]
