# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""CA trust material and client certificate credentials.

Both are validated once, at construction, and are immutable afterwards so a single
instance can be shared by concurrent requests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..errors import SecureRequestError
from ..http.models import CredentialDirective, TransportDirectives


class CredentialEncoding(str, Enum):
    PEM = "PEM"
    DER = "DER"
    P12 = "P12"


@dataclass(frozen=True)
class CredentialBlob:
    """In-memory certificate or key material."""

    data: bytes = field(repr=False)
    encoding: CredentialEncoding = CredentialEncoding.PEM

    def __post_init__(self) -> None:
        if isinstance(self.data, str):
            object.__setattr__(self, "data", self.data.encode("utf-8"))
        if not isinstance(self.data, (bytes, bytearray)) or not self.data:
            raise SecureRequestError("Credential blob is empty or not bytes", 150)
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def size(self) -> int:
        return len(self.data)


def _readable_file(path: str) -> bool:
    return bool(path) and os.path.isfile(path) and os.access(path, os.R_OK)


@dataclass(frozen=True)
class TrustSource:
    """CA certificate file or directory of CA certificates."""

    path: str
    is_directory: bool = field(init=False)

    def __post_init__(self) -> None:
        try:
            resolved = Path(self.path).resolve(strict=True)
        except (OSError, RuntimeError, TypeError) as exc:
            raise SecureRequestError("Path to CA certificate(s) is invalid or not readable", 141) from exc
        if not os.access(resolved, os.R_OK):
            raise SecureRequestError("Path to CA certificate(s) is invalid or not readable", 141)
        if resolved.is_file():
            is_directory = False
        elif resolved.is_dir():
            is_directory = True
        else:
            raise SecureRequestError("Path to CA certificate(s) is invalid or not readable", 142)
        object.__setattr__(self, "path", str(resolved))
        object.__setattr__(self, "is_directory", is_directory)

    def apply_to(self, directives: TransportDirectives) -> None:
        if self.is_directory:
            directives.ca_path = self.path
        else:
            directives.ca_file = self.path


CredentialMaterial = str | os.PathLike | CredentialBlob


@dataclass(frozen=True)
class ClientCertificate:
    """Certificate + private key pair presented for mutual TLS."""

    certificate: CredentialMaterial | None = field(repr=False)
    private_key: CredentialMaterial | None = field(repr=False)
    certificate_password: str | None = field(default=None, repr=False)
    private_key_password: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if (
            bool(self.certificate) != bool(self.private_key)
            or (self.certificate_password and not self.certificate)
            or (self.private_key_password and not self.private_key)
        ):
            raise SecureRequestError("Cannot create client credentials without certificate and private key", 151)

        for name in ("certificate", "private_key"):
            material = getattr(self, name)
            if isinstance(material, os.PathLike):
                material = os.fspath(material)
                object.__setattr__(self, name, material)
            if isinstance(material, str) and not _readable_file(material):
                raise SecureRequestError(f"Cannot read TLS {name.replace('_', ' ')} file", 152)
            if material is not None and not isinstance(material, (str, CredentialBlob)):
                raise SecureRequestError(f"Unsupported TLS {name.replace('_', ' ')} material", 153)

    @property
    def is_empty(self) -> bool:
        return not self.certificate

    @staticmethod
    def _directive(material: str | CredentialBlob, password: str | None) -> CredentialDirective:
        if isinstance(material, CredentialBlob):
            return CredentialDirective(encoding=material.encoding, blob=material.data, password=password)
        return CredentialDirective(encoding=CredentialEncoding.PEM, path=material, password=password)

    def apply_to(self, directives: TransportDirectives) -> None:
        if self.is_empty:
            return
        directives.client_certificate = self._directive(self.certificate, self.certificate_password)
        directives.client_key = self._directive(self.private_key, self.private_key_password)


__all__ = [
    "ClientCertificate",
    "CredentialBlob",
    "CredentialEncoding",
    "CredentialMaterial",
    "TrustSource",
]
