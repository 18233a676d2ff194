# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
httpcourier package entrypoint.

A synchronous outbound HTTP client built around immutable, layered configuration
snapshots and an escalating TLS trust policy. Every call resolves its options into a
flat set of transport directives, runs one exchange on an injectable transport
(httpx by default), and returns a structured Response or a typed error.
"""

from .errors import (
    ConfigurationError,
    HttpClientError,
    HttpCourierError,
    RequestError,
    ResponseError,
    SecureRequestError,
)
from .http import (
    BaseCodec,
    BasicAuth,
    BearerAuth,
    ContentType,
    Headers,
    HttpxTransport,
    Payload,
    ProxyConfig,
    RequestContext,
    RequestExecutor,
    Response,
    StubTransport,
    register_codec,
)
from .config import ClientConfig, ProtocolVersion, load_client_config, resolve_config
from .security import ClientCertificate, CredentialBlob, CredentialEncoding, TlsTrustPolicy, TlsVerify, TrustSource
from .client import HttpClient
from .log import setup_logging
from .version import __version__

__all__ = [
    "BaseCodec",
    "BasicAuth",
    "BearerAuth",
    "ClientCertificate",
    "ClientConfig",
    "ConfigurationError",
    "ContentType",
    "CredentialBlob",
    "CredentialEncoding",
    "Headers",
    "HttpClient",
    "HttpClientError",
    "HttpCourierError",
    "HttpxTransport",
    "Payload",
    "ProtocolVersion",
    "ProxyConfig",
    "RequestContext",
    "RequestError",
    "RequestExecutor",
    "Response",
    "ResponseError",
    "SecureRequestError",
    "StubTransport",
    "TlsTrustPolicy",
    "TlsVerify",
    "TrustSource",
    "load_client_config",
    "register_codec",
    "resolve_config",
    "setup_logging",
    "__version__",
]
