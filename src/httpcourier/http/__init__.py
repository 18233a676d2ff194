# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response exports."""

from .codec import UNSUPPORTED, BaseCodec, ContentCodec, ContentType, get_codec, register_codec
from .headers import Headers, HeadersPolicy, header_value, normalize_headers
from .payload import Payload, PayloadPolicy
from .url import UrlInfo, append_query
from .models import CredentialDirective, RawResponse, Response, TransportDirectives, VerifyHost
from .observer import ObserverBinding, RequestObserver
from .auth import AuthPolicy, BasicAuth, BearerAuth
from .proxy import ProxyConfig
from .transport import Transport, TransportFactory, create_default_transport
from .adapters import StubTransport
from .response import assemble_response, coerce_status_code
from .executor import RequestExecutor
from .request import RequestContext
from .httpx_transport import HttpxTransport

__all__ = [
    "UNSUPPORTED",
    "AuthPolicy",
    "BaseCodec",
    "BasicAuth",
    "BearerAuth",
    "ContentCodec",
    "ContentType",
    "CredentialDirective",
    "Headers",
    "HeadersPolicy",
    "HttpxTransport",
    "ObserverBinding",
    "Payload",
    "PayloadPolicy",
    "ProxyConfig",
    "RawResponse",
    "RequestContext",
    "RequestExecutor",
    "RequestObserver",
    "Response",
    "StubTransport",
    "Transport",
    "TransportDirectives",
    "TransportFactory",
    "UrlInfo",
    "VerifyHost",
    "append_query",
    "assemble_response",
    "coerce_status_code",
    "create_default_transport",
    "get_codec",
    "header_value",
    "normalize_headers",
    "register_codec",
]
