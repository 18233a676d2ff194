# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import httpx
import pytest

from httpcourier.config import ClientConfig, resolve_config
from httpcourier.errors import (
    ErrorCategory,
    HttpClientError,
    RequestError,
    ResponseError,
    SecureRequestError,
)
from httpcourier.http.adapters import StubTransport
from httpcourier.http.codec import BaseCodec, ContentType
from httpcourier.http.executor import RequestExecutor, transport_failure
from httpcourier.http.headers import HeadersPolicy
from httpcourier.http.models import RawResponse, Response, VerifyHost
from httpcourier.http.request import RequestContext
from httpcourier.http.response import assemble_response, coerce_status_code
from httpcourier.security.policy import TlsTrustPolicy
from httpcourier.security.trust import ClientCertificate


class RecordingObserver:
    def __init__(self):
        self.calls = []

    def on_request_result(self, request, result, context):
        self.calls.append((request, result, context))


class ExplodingTransport:
    def __init__(self, exc):
        self.exc = exc
        self.closed = 0

    def execute(self, directives):
        raise self.exc

    def close(self):
        self.closed += 1


def _json_response(status, data, content_type="application/json; charset=utf-8"):
    return RawResponse(
        ok=True,
        status_code=status,
        headers={"Content-Type": content_type},
        content_type=content_type,
        content=json.dumps(data).encode("utf-8"),
    )


def _send(stub, method, url, config=None, **kwargs):
    context = RequestContext(config or ClientConfig(), method, url, **kwargs)
    return RequestExecutor(stub.factory).send(context)


def test_string_status_is_coerced_and_json_body_decoded():
    stub = StubTransport(default=_json_response("404", {"e": 1}))
    response = _send(stub, "GET", "http://x/y")
    assert response.status_code == 404
    assert response.payload == {"e": 1}
    assert response.body is None
    assert response.ok is False
    assert stub.closed == 1


def test_get_reaches_transport_with_query_and_no_body():
    stub = StubTransport(default=_json_response(200, {}))
    _send(stub, "GET", "http://x/y?a=1", payload={"b": "2"})
    (directives,) = stub.requests
    assert directives.url == "http://x/y?a=1&b=2"
    assert directives.body is None
    assert "Content-Type" not in directives.headers


def test_enforce_policy_post_sends_json_with_strict_tls(tmp_path):
    ca = tmp_path / "ca.pem"
    cert = tmp_path / "cert.pem"
    key = tmp_path / "key.pem"
    for path in (ca, cert, key):
        path.write_text("pem")
    config = resolve_config(
        None,
        tls_policy=TlsTrustPolicy.enforce(str(ca), ClientCertificate(certificate=str(cert), private_key=str(key))),
    )
    stub = StubTransport(default=_json_response(201, {"id": 7}))

    response = _send(stub, "POST", "https://api.example/items", config=config, payload={"a": 1})

    (directives,) = stub.requests
    assert directives.body == b'{"a":1}'
    assert directives.headers["Content-Type"] == "application/json; charset=utf-8"
    assert directives.headers["Content-Length"] == "7"
    assert directives.verify_peer is True
    assert directives.verify_host is VerifyHost.STRICT
    assert directives.client_certificate.path == str(cert)
    assert response.status_code == 201
    assert response.payload["id"] == 7


def test_https_without_policy_never_reaches_transport():
    stub = StubTransport(default=_json_response(200, {}))
    with pytest.raises(SecureRequestError):
        _send(stub, "GET", "https://x/")
    assert stub.requests == []
    assert stub.closed == 0


def test_transport_failure_becomes_categorized_response_error():
    original = httpx.ConnectTimeout("too slow")
    stub = StubTransport(
        default=RawResponse(ok=False, error_message="too slow", error_type="ConnectTimeout", exception=original)
    )
    with pytest.raises(ResponseError) as excinfo:
        _send(stub, "GET", "http://x/")
    assert excinfo.value.category is ErrorCategory.TIMEOUT
    assert excinfo.value.__cause__ is original
    assert "ConnectTimeout" in str(excinfo.value)
    assert stub.closed == 1


def test_stub_miss_is_an_unknown_transport_error():
    with pytest.raises(ResponseError) as excinfo:
        _send(StubTransport(), "GET", "http://x/")
    assert excinfo.value.category is ErrorCategory.UNKNOWN_ERROR
    assert "StubMiss" in str(excinfo.value)


def test_unexpected_transport_exception_is_wrapped_and_transport_closed():
    transport = ExplodingTransport(ConnectionRefusedError("refused"))
    context = RequestContext(ClientConfig(), "GET", "http://x/")
    with pytest.raises(ResponseError) as excinfo:
        RequestExecutor(lambda: transport).send(context)
    assert excinfo.value.category is ErrorCategory.CONNECTION_ERROR
    assert transport.closed == 1


def test_library_errors_raised_by_transport_propagate_unchanged():
    error = SecureRequestError("bad key", 179)
    transport = ExplodingTransport(error)
    context = RequestContext(ClientConfig(), "GET", "http://x/")
    with pytest.raises(SecureRequestError) as excinfo:
        RequestExecutor(lambda: transport).send(context)
    assert excinfo.value is error
    assert transport.closed == 1


def test_observer_sees_error_once_and_caller_gets_wrapped_error():
    observer = RecordingObserver()
    stub = StubTransport()
    context = RequestContext(ClientConfig(), "GET", "http://x/").observe(observer, {"trace": "t-1"})

    with pytest.raises(HttpClientError) as excinfo:
        RequestExecutor(stub.factory).send(context)

    assert len(observer.calls) == 1
    request, result, ctx = observer.calls[0]
    assert request is context
    assert isinstance(result, ResponseError)
    assert ctx == {"trace": "t-1"}
    assert excinfo.value.cause is result
    assert excinfo.value.__cause__ is result


def test_observer_sees_request_build_errors_too():
    observer = RecordingObserver()
    context = RequestContext(ClientConfig(), "GET", "https://x/").observe(observer)
    with pytest.raises(HttpClientError) as excinfo:
        RequestExecutor(StubTransport().factory).send(context)
    assert isinstance(excinfo.value.cause, SecureRequestError)
    assert observer.calls[0][1] is excinfo.value.cause


def test_observer_sees_successful_response_once():
    observer = RecordingObserver()
    stub = StubTransport(default=_json_response(200, {"ok": True}))
    context = RequestContext(ClientConfig(), "GET", "http://x/").observe(observer)
    response = RequestExecutor(stub.factory).send(context)
    assert len(observer.calls) == 1
    assert observer.calls[0][1] is response
    assert observer.calls[0][2] == {}


def test_without_observer_errors_are_not_wrapped():
    with pytest.raises(ResponseError):
        _send(StubTransport(), "GET", "http://x/")


def test_missing_content_type_fails_unless_default_configured():
    raw = RawResponse(ok=True, status_code=200, content=b'{"a": 1}')
    with pytest.raises(ResponseError, match="no content type"):
        _send(StubTransport(default=raw), "GET", "http://x/")

    config = resolve_config(None, response_content_type=ContentType.JSON)
    response = _send(StubTransport(default=raw), "GET", "http://x/", config=config)
    assert response.payload == {"a": 1}
    assert response.body is None


def test_unknown_mime_type_keeps_raw_body():
    raw = RawResponse(ok=True, status_code=200, content_type="image/png", content=b"\x89PNG")
    response = _send(StubTransport(default=raw), "GET", "http://x/")
    assert response.body == b"\x89PNG"
    assert response.payload.count() == 0


def test_empty_json_object_still_drops_raw_body():
    response = _send(StubTransport(default=_json_response(200, {})), "GET", "http://x/")
    assert response.body is None
    assert response.payload.count() == 0


def test_non_mapping_json_keeps_raw_body():
    response = _send(StubTransport(default=_json_response(200, [1, 2])), "GET", "http://x/")
    assert response.body == b"[1, 2]"
    assert response.payload.count() == 0


def test_empty_body_yields_empty_response():
    raw = RawResponse(ok=True, status_code=204, content_type="application/json")
    response = _send(StubTransport(default=raw), "DELETE", "http://x/1")
    assert response.status_code == 204
    assert response.body == b""
    assert response.payload.count() == 0


def test_undecodable_body_raises_response_error():
    raw = RawResponse(ok=True, status_code=200, content_type="application/json", content=b"{broken")
    with pytest.raises(ResponseError) as excinfo:
        _send(StubTransport(default=raw), "GET", "http://x/")
    assert excinfo.value.status_code == 200


def test_response_header_policy_violations_raise_response_error():
    config = resolve_config(None, response_headers_policy=HeadersPolicy(max_count=1))
    raw = _json_response(200, {})
    raw.headers["X-Extra"] = "1"
    with pytest.raises(ResponseError):
        assemble_response(raw, config)


def test_coerce_status_code():
    assert coerce_status_code(200) == 200
    assert coerce_status_code("404") == 404
    assert coerce_status_code(b"503 Service Unavailable") == 503
    for bad in (None, True, "", "abc", "40"):
        with pytest.raises(ResponseError):
            coerce_status_code(bad)


def test_transport_failure_keeps_error_code():
    error = transport_failure(RawResponse(ok=False, error_message="reset", error_type="OSError", error_code=104))
    assert error.code == 104
    assert error.category is ErrorCategory.UNKNOWN_ERROR


def test_request_send_uses_executor():
    stub = StubTransport(default=_json_response(200, {"x": 1}))
    response = RequestContext(ClientConfig(), "GET", "http://x/").send(stub.factory)
    assert isinstance(response, Response)
    assert response.header("content-type") == "application/json; charset=utf-8"


def test_request_errors_are_library_errors():
    with pytest.raises(RequestError):
        _send(StubTransport(), "POST", "http://x/", headers={"Content-Type": "text/csv"}, payload={"a": 1})


class CrashingDecodeCodec(BaseCodec):
    def decode(self, data, content_type):
        raise RuntimeError("decoder crashed")


def test_codec_crash_during_decode_is_reported_to_observer_and_wrapped():
    observer = RecordingObserver()
    config = resolve_config(None, codec=CrashingDecodeCodec())
    stub = StubTransport(default=_json_response(200, {"a": 1}))
    context = RequestContext(config, "GET", "http://x/").observe(observer)

    with pytest.raises(HttpClientError) as excinfo:
        RequestExecutor(stub.factory).send(context)

    assert len(observer.calls) == 1
    error = observer.calls[0][1]
    assert isinstance(error, ResponseError)
    assert excinfo.value.cause is error
    assert isinstance(error.__cause__, RuntimeError)
    assert error.status_code == 200


def test_codec_crash_during_decode_without_observer_is_a_response_error():
    config = resolve_config(None, codec=CrashingDecodeCodec())
    stub = StubTransport(default=_json_response(200, {"a": 1}))
    with pytest.raises(ResponseError, match="decoder crashed"):
        _send(stub, "GET", "http://x/", config=config)


def test_json_object_with_empty_key_is_decoded():
    response = _send(StubTransport(default=_json_response(200, {"": 1, "k" * 300: 2})), "GET", "http://x/")
    assert response.payload == {"": 1, "k" * 300: 2}
    assert response.body is None


def test_long_response_header_values_are_accepted_by_default():
    raw = _json_response(200, {})
    raw.headers["Content-Security-Policy"] = "default-src 'self' " + "x" * 20000
    response = _send(StubTransport(default=raw), "GET", "http://x/")
    assert len(response.header("content-security-policy")) > 20000
