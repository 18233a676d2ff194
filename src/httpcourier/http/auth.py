# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authorization header policies."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Protocol

from .models import TransportDirectives


class AuthPolicy(Protocol):
    """Anything that can inject credentials into transport directives."""

    def apply_to(self, directives: TransportDirectives) -> None: ...


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str = field(repr=False)

    def header(self) -> str:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"

    def apply_to(self, directives: TransportDirectives) -> None:
        _set_authorization(directives, self.header())


@dataclass(frozen=True)
class BearerAuth:
    token: str = field(repr=False)

    def header(self) -> str:
        return f"Bearer {self.token}"

    def apply_to(self, directives: TransportDirectives) -> None:
        _set_authorization(directives, self.header())


def _set_authorization(directives: TransportDirectives, value: str) -> None:
    # An Authorization header supplied by the caller wins.
    if any(name.lower() == "authorization" for name in directives.headers):
        return
    directives.headers["Authorization"] = value


__all__ = ["AuthPolicy", "BasicAuth", "BearerAuth"]
