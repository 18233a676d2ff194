# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""TLS trust policy and credential exports."""

from .policy import TlsTrustPolicy, TlsVerify
from .trust import ClientCertificate, CredentialBlob, CredentialEncoding, TrustSource

__all__ = [
    "ClientCertificate",
    "CredentialBlob",
    "CredentialEncoding",
    "TlsTrustPolicy",
    "TlsVerify",
    "TrustSource",
]
