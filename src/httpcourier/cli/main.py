# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpcourier CLI."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from ..client import HttpClient
from ..config import ProtocolVersion
from ..errors import HttpCourierError
from ..http.auth import BasicAuth, BearerAuth
from ..http.codec import ContentType
from ..http.models import Response
from ..http.proxy import ProxyConfig
from ..http.transport import TransportFactory
from ..log import setup_logging
from ..security.policy import TlsTrustPolicy, TlsVerify
from ..security.trust import ClientCertificate, TrustSource

CLI_TEXT_TRUNCATION_BYTES = 4096


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="httpcourier", description="Send one HTTP request and print the response")
    parser.add_argument("method", help="HTTP method (GET, POST, ...)")
    parser.add_argument("url", help="Absolute target URL")
    parser.add_argument("-H", "--header", action="append", default=[], metavar="NAME: VALUE", help="Request header")
    parser.add_argument("-d", "--data", action="append", default=[], metavar="KEY=VALUE", help="Payload field")
    parser.add_argument("--raw-body", help="Send this text verbatim as the request body")
    body_type = parser.add_mutually_exclusive_group()
    body_type.add_argument("--json", dest="content_type", action="store_const", const=ContentType.JSON, help="Encode payload as JSON")
    body_type.add_argument("--form", dest="content_type", action="store_const", const=ContentType.FORM, help="Encode payload as a form")
    parser.add_argument("--expect", choices=["json", "form"], help="Decode the response as this type when it announces none")
    tls = parser.add_mutually_exclusive_group()
    tls.add_argument("--insecure", action="store_true", help="Skip TLS certificate and hostname verification")
    tls.add_argument("--ca", metavar="PATH", help="CA certificate file or directory (enables verification)")
    parser.add_argument("--cert", metavar="PATH", help="Client certificate (PEM) for mutual TLS; requires --ca and --key")
    parser.add_argument("--key", metavar="PATH", help="Client private key (PEM)")
    parser.add_argument("--key-password", help="Password for the client private key")
    parser.add_argument("--timeout", type=float, help="Overall timeout in seconds (0 = none)")
    parser.add_argument("--connect-timeout", type=float, help="Connect timeout in seconds (0 = none)")
    parser.add_argument("--http-version", choices=[v.value for v in ProtocolVersion], help="HTTP protocol version hint")
    parser.add_argument("--proxy", metavar="HOST:PORT", help="Proxy server")
    parser.add_argument("--proxy-user", help="Proxy username")
    parser.add_argument("--proxy-password", help="Proxy password")
    auth = parser.add_mutually_exclusive_group()
    auth.add_argument("--user", metavar="USER:PASSWORD", help="Basic authentication credentials")
    auth.add_argument("--bearer", metavar="TOKEN", help="Bearer token")
    parser.add_argument("--user-agent", help="User-Agent header value")
    parser.add_argument("--log-level", help="Logging level (default from HTTPCOURIER_LOG_LEVEL)")
    parser.add_argument("--output-json", action="store_true", help="Print the response as JSON")
    return parser


def _parse_pairs(values: list[str], separator: str, label: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition(separator)
        if not sep or not name.strip():
            raise SystemExit(f"httpcourier: invalid {label}: {item!r}")
        out[name.strip()] = value.strip() if separator == ":" else value
    return out


def _tls_policy(args: argparse.Namespace) -> TlsTrustPolicy | None:
    if args.insecure:
        return TlsTrustPolicy.disabled()
    if not args.ca:
        return None
    source = TrustSource(args.ca)
    if args.cert or args.key:
        certificate = ClientCertificate(
            certificate=args.cert,
            private_key=args.key,
            private_key_password=args.key_password,
        )
        return TlsTrustPolicy(mode=TlsVerify.ENFORCE, trust_source=source, client_certificate=certificate)
    return TlsTrustPolicy(mode=TlsVerify.CHECK, trust_source=source)


def _auth_policy(args: argparse.Namespace) -> BasicAuth | BearerAuth | None:
    if args.bearer:
        return BearerAuth(args.bearer)
    if args.user:
        username, _, password = args.user.partition(":")
        return BasicAuth(username, password)
    return None


def build_client(args: argparse.Namespace, transport_factory: TransportFactory | None = None) -> HttpClient:
    client = HttpClient(transport_factory=transport_factory)
    expect = {"json": ContentType.JSON, "form": ContentType.FORM}.get(args.expect or "")
    proxy = ProxyConfig.parse(args.proxy, args.proxy_user, args.proxy_password) if args.proxy else None
    return client.change_config(
        protocol_version=args.http_version,
        request_content_type=args.content_type,
        response_content_type=expect,
        tls_policy=_tls_policy(args),
        auth_policy=_auth_policy(args),
        proxy=proxy,
        user_agent=args.user_agent,
        timeout=args.timeout,
        connect_timeout=args.connect_timeout,
    )


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix[:max_bytes]
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _print_response(response: Response, as_json: bool) -> None:
    data: dict[str, Any] = dict(response.to_mapping())
    if data.get("body") is not None:
        data["body"] = _truncate_text_bytes(data["body"], CLI_TEXT_TRUNCATION_BYTES)
    if as_json:
        json.dump(data, sys.stdout, indent=2, sort_keys=True, default=str)
        sys.stdout.write("\n")
        return
    print(f"HTTP {response.status_code}")
    for name, value in response.headers.items():
        print(f"{name}: {value}")
    print()
    if response.body is None:
        print(json.dumps(response.payload.to_dict(), indent=2, default=str))
    else:
        print(data["body"])


def main(argv: list[str] | None = None, transport_factory: TransportFactory | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.cert or args.key) and not args.ca:
        parser.error("--cert and --key require --ca")
    setup_logging(args.log_level)

    try:
        client = build_client(args, transport_factory)
        response = client.send(
            args.method,
            args.url,
            headers=_parse_pairs(args.header, ":", "header"),
            payload=_parse_pairs(args.data, "=", "payload field"),
            body=args.raw_body,
        )
    except HttpCourierError as exc:
        print(f"httpcourier: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    _print_response(response, args.output_json)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
