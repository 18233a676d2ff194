# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process transports for tests and dry runs."""

from __future__ import annotations

from .models import RawResponse, TransportDirectives
from .transport import Transport


class StubTransport(Transport):
    """Deterministic, programmable Transport for tests."""

    def __init__(self, responses: dict[str, RawResponse] | None = None, default: RawResponse | None = None):
        self._responses = responses or {}
        self._default = default
        self.requests: list[TransportDirectives] = []
        self.closed = 0

    def add(self, url: str, response: RawResponse) -> None:
        self._responses[url] = response

    def execute(self, directives: TransportDirectives) -> RawResponse:
        self.requests.append(directives)
        if directives.url in self._responses:
            return self._responses[directives.url]
        if self._default is not None:
            return self._default
        return RawResponse(ok=False, error_message="No stubbed response configured", error_type="StubMiss")

    def close(self) -> None:
        self.closed += 1

    def factory(self) -> StubTransport:
        """Use as a transport factory: every send gets this same recording instance."""
        return self


__all__ = ["StubTransport"]
