# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and factory."""

from collections.abc import Callable
from typing import Protocol

from .models import RawResponse, TransportDirectives


class Transport(Protocol):
    """Performs exactly one exchange described by a set of directives."""

    def execute(self, directives: TransportDirectives) -> RawResponse: ...

    def close(self) -> None:  # pragma: no cover - optional for adapters
        ...


TransportFactory = Callable[[], Transport]


def create_default_transport() -> Transport:
    """Factory for the default httpx-backed transport."""
    from .httpx_transport import HttpxTransport

    return HttpxTransport()
