# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request execution: directives -> transport -> response assembly -> observer."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from ..errors import (
    ErrorCategory,
    HttpClientError,
    HttpCourierError,
    ResponseError,
    categorize_exception,
    error_category_to_reason,
)
from .models import RawResponse, Response, TransportDirectives
from .response import assemble_response
from .transport import Transport, TransportFactory, create_default_transport

if TYPE_CHECKING:
    from .request import RequestContext

logger = logging.getLogger(__name__)


class RequestExecutor:
    """
    Sends one RequestContext per call.

    Each ``send()`` obtains its own transport from the factory and closes it on every
    exit path. Nothing is retried: every failure is terminal for the call.
    """

    def __init__(self, transport_factory: TransportFactory | None = None):
        self._transport_factory = transport_factory or create_default_transport

    def send(self, request: RequestContext) -> Response:
        binding = request.observer
        try:
            response = self._send(request)
        except HttpCourierError as exc:
            if binding is None:
                raise
            binding.notify(request, exc)
            raise HttpClientError(f"Request failed: {exc}", exc.code) from exc

        if binding is not None:
            binding.notify(request, response)
        return response

    def _send(self, request: RequestContext) -> Response:
        directives = request.build_directives()
        raw = self._execute(directives)
        if not raw.ok:
            raise transport_failure(raw)
        logger.debug("%s %s -> %s", directives.method, directives.url, raw.status_code)
        return assemble_response(raw, request.config)

    def _execute(self, directives: TransportDirectives) -> RawResponse:
        transport: Transport = self._transport_factory()
        started = time.monotonic()
        try:
            raw = transport.execute(directives)
        except HttpCourierError:
            raise
        except Exception as exc:  # noqa: BLE001
            raw = RawResponse(
                ok=False,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                exception=exc,
            )
        finally:
            transport.close()
        raw.meta.setdefault("elapsed_s", time.monotonic() - started)
        return raw


def transport_failure(raw: RawResponse) -> ResponseError:
    """Build the ResponseError for a transport-level failure, chaining the original exception."""
    category = categorize_exception(raw.exception) if raw.exception is not None else ErrorCategory.UNKNOWN_ERROR
    message = raw.error_message or error_category_to_reason(category)
    logger.info("Transport failure (%s): %s", category.value, message)
    error = ResponseError(
        f"Transport error [{raw.error_type or category.value}]: {message}",
        raw.error_code,
        category=category,
    )
    if raw.exception is not None:
        error.__cause__ = raw.exception
    return error


__all__ = ["RequestExecutor", "transport_failure"]
