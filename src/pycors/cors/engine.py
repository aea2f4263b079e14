# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""CORS engine — classification, evaluation and response finalization.

Pipeline per request::

    is_preflight -> OptionsResolver -> match_origin -> build_headers -> ResponseFinalizer

:class:`CorsEngine` produces a :class:`CorsOutcome` without touching the
response. :class:`ResponseFinalizer` applies an outcome to a
:class:`~pycors.web.ports.http.ResponsePort` and either ends the response
or hands control to the downstream continuation. :func:`cors` wires both
into a ``(request, response, call_next)`` handler.
"""

from __future__ import annotations

import enum
import inspect
from dataclasses import dataclass, field
from typing import Any

import structlog

from pycors.cors.headers import HeaderSet, build_headers
from pycors.cors.origin import OriginAllowed, match_origin
from pycors.cors.resolver import OptionsResolver, OptionsSource
from pycors.web.ports.http import Continuation, RequestPort, ResponsePort

logger = structlog.get_logger("pycors.cors")


def is_preflight(method: str | None) -> bool:
    """Return ``True`` for ``OPTIONS`` requests, in any letter case."""
    return (method or "").upper() == "OPTIONS"


class CorsAction(enum.Enum):
    """What the finalizer must do with the response."""

    CONTINUE = "continue"
    """Apply headers, then invoke the downstream continuation."""

    PREFLIGHT = "preflight"
    """Apply headers and end the response with the success status."""

    REJECT = "reject"
    """End the response with the mismatch status."""

    ERROR = "error"
    """Apply nothing; pass the error to the continuation."""


@dataclass(frozen=True)
class CorsOutcome:
    """Result of evaluating one request.

    ``status_code`` is set only for outcomes the engine answers itself
    (``PREFLIGHT`` and ``REJECT``); ``error`` only for ``ERROR``.
    """

    action: CorsAction
    headers: HeaderSet = field(default_factory=HeaderSet)
    status_code: int | None = None
    error: BaseException | None = None

    @property
    def terminal(self) -> bool:
        """``True`` when the engine ends the response itself."""
        return self.status_code is not None


class CorsEngine:
    """Evaluates CORS policy for requests.

    Args:
        options: Static options (``None``, a mapping or ``CorsOptions``)
            or an options delegate. Static configuration is read once and
            never modified.
    """

    def __init__(self, options: OptionsSource = None) -> None:
        self._resolver = OptionsResolver(options)

    async def evaluate(self, request: RequestPort) -> CorsOutcome:
        """Compute the outcome for *request*.

        Delegate failures are captured in the outcome (``CorsAction.ERROR``)
        rather than raised, so the caller decides how to propagate them.
        """
        preflight = is_preflight(request.method)
        request_origin = request.headers.get("origin")

        try:
            options = await self._resolver.resolve(request)
            decision = await match_origin(
                request_origin,
                options.origin,
                strict=options.reject_mismatch,
                request=request,
            )
        except Exception as exc:
            return CorsOutcome(CorsAction.ERROR, error=exc)

        headers = build_headers(options, decision, request.headers, preflight=preflight)

        if not isinstance(decision, OriginAllowed):
            if options.reject_mismatch:
                logger.debug("cors_mismatch_rejected", origin=request_origin, status=options.mismatch_status)
                return CorsOutcome(CorsAction.REJECT, headers, status_code=options.mismatch_status)
            logger.debug("cors_origin_denied", origin=request_origin)
            return CorsOutcome(CorsAction.CONTINUE, headers)

        if preflight and not options.preflight_continue:
            logger.debug("cors_preflight_finalized", origin=request_origin, status=options.options_success_status)
            return CorsOutcome(CorsAction.PREFLIGHT, headers, status_code=options.options_success_status)

        return CorsOutcome(CorsAction.CONTINUE, headers)


class ResponseFinalizer:
    """Applies a :class:`CorsOutcome` to a response port."""

    async def finalize(self, outcome: CorsOutcome, response: ResponsePort, call_next: Continuation) -> None:
        if outcome.error is not None:
            await _proceed(call_next, outcome.error)
            return

        outcome.headers.apply(response.headers)

        if outcome.status_code is not None:
            response.status_code = outcome.status_code
            if outcome.action is CorsAction.PREFLIGHT:
                response.headers["Content-Length"] = "0"
            await _maybe_await(response.end())
            return

        await _proceed(call_next)


class CorsHandler:
    """``(request, response, call_next)`` middleware built from an engine."""

    def __init__(self, engine: CorsEngine, finalizer: ResponseFinalizer | None = None) -> None:
        self._engine = engine
        self._finalizer = finalizer or ResponseFinalizer()

    @property
    def engine(self) -> CorsEngine:
        return self._engine

    async def __call__(self, request: RequestPort, response: ResponsePort, call_next: Continuation) -> None:
        outcome = await self._engine.evaluate(request)
        await self._finalizer.finalize(outcome, response, call_next)


def cors(options: OptionsSource = None) -> CorsHandler:
    """Create a CORS handler.

    *options* may be omitted (allow every origin), a mapping of options, a
    :class:`~pycors.cors.options.CorsOptions`, or a delegate
    ``(request) -> options`` that may be async.
    """
    return CorsHandler(CorsEngine(options))


async def _proceed(call_next: Continuation, error: BaseException | None = None) -> None:
    result = call_next(error) if error is not None else call_next()
    await _maybe_await(result)


async def _maybe_await(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
