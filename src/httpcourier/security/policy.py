# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TLS trust escalation policy.

Three modes form a strictly escalating set of checks, ENFORCE ⊇ CHECK ⊇ DISABLE:

- DISABLE: no certificate-chain and no hostname verification.
- CHECK: chain + relaxed hostname verification against a trust source.
- ENFORCE: everything CHECK does, plus mutual TLS and strict hostname matching.

Required material is validated when the policy is applied to a request, not when
the policy is built, so a DISABLE policy never has to supply any.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ..errors import SecureRequestError
from ..http.models import TransportDirectives, VerifyHost
from .trust import ClientCertificate, TrustSource

logger = logging.getLogger(__name__)


class TlsVerify(str, Enum):
    DISABLE = "disable"
    CHECK = "check"
    ENFORCE = "enforce"


@dataclass(frozen=True)
class TlsTrustPolicy:
    mode: TlsVerify = TlsVerify.ENFORCE
    trust_source: TrustSource | None = None
    client_certificate: ClientCertificate | None = None

    @classmethod
    def disabled(cls) -> TlsTrustPolicy:
        return cls(mode=TlsVerify.DISABLE)

    @classmethod
    def check(cls, trust_source: TrustSource | str) -> TlsTrustPolicy:
        if isinstance(trust_source, str):
            trust_source = TrustSource(trust_source)
        return cls(mode=TlsVerify.CHECK, trust_source=trust_source)

    @classmethod
    def enforce(cls, trust_source: TrustSource | str, client_certificate: ClientCertificate) -> TlsTrustPolicy:
        if isinstance(trust_source, str):
            trust_source = TrustSource(trust_source)
        return cls(mode=TlsVerify.ENFORCE, trust_source=trust_source, client_certificate=client_certificate)

    def apply_to(self, directives: TransportDirectives) -> None:
        if self.mode is TlsVerify.DISABLE:
            self._disable(directives)
        elif self.mode is TlsVerify.CHECK:
            self._check(directives)
        elif self.mode is TlsVerify.ENFORCE:
            self._enforce(directives)
        else:  # pragma: no cover - closed enum
            raise SecureRequestError(f"Unknown TLS verification mode: {self.mode!r}", 450)

    def _disable(self, directives: TransportDirectives) -> None:
        logger.debug("TLS verification disabled for %s", directives.url)
        directives.verify_peer = False
        directives.verify_host = VerifyHost.NONE

    def _check(self, directives: TransportDirectives) -> None:
        directives.verify_peer = True
        if self.trust_source is None:
            raise SecureRequestError("CA path is required to check TLS verification", 451)
        self.trust_source.apply_to(directives)
        directives.verify_host = VerifyHost.RELAXED

    def _enforce(self, directives: TransportDirectives) -> None:
        self._check(directives)
        if self.client_certificate is None or self.client_certificate.is_empty:
            raise SecureRequestError("Certificate credentials are required to enforce TLS verification", 452)
        self.client_certificate.apply_to(directives)
        directives.verify_host = VerifyHost.STRICT


__all__ = ["TlsTrustPolicy", "TlsVerify"]
