# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request result observers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .models import Response
    from .request import RequestContext


class RequestObserver(Protocol):
    """Receives the outcome of every send() it is attached to, exactly once."""

    def on_request_result(
        self,
        request: RequestContext,
        result: Response | BaseException,
        context: dict[str, Any],
    ) -> None: ...


@dataclass(frozen=True)
class ObserverBinding:
    observer: RequestObserver
    context: dict[str, Any] = field(default_factory=dict)

    def notify(self, request: RequestContext, result: Response | BaseException) -> None:
        self.observer.on_request_result(request, result, self.context)


__all__ = ["ObserverBinding", "RequestObserver"]
