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
"""Origin rules and origin matching.

An origin rule is configured in one of several shapes (``True``, ``False``,
``"*"``, a string, a compiled regex, a list of strings/regexes, or a
callback). :func:`to_origin_rule` canonicalizes the shape once into one of
the rule classes below; :func:`match_origin` then evaluates a rule against
the request's ``Origin`` header and yields an :data:`OriginDecision`.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any

import structlog

from pycors.kernel.exceptions import CorsConfigurationError, OriginCallbackError
from pycors.web.ports.http import paused

logger = structlog.get_logger("pycors.cors")

OriginCallable = Callable[[str | None], Any | Awaitable[Any]]

# =============================================================================
# Rules
# =============================================================================


@dataclass(frozen=True)
class AllowAllOrigins:
    """Any origin is allowed; ``*`` is emitted."""


@dataclass(frozen=True)
class OriginsDisabled:
    """CORS is switched off for the request."""


@dataclass(frozen=True)
class ReflectOrigin:
    """The request's own ``Origin`` is echoed back."""


@dataclass(frozen=True)
class ExactOrigin:
    """A fixed origin value."""

    value: str


@dataclass(frozen=True)
class OriginPattern:
    """Origins matching a regular expression (``re.search`` semantics)."""

    pattern: re.Pattern[str]


@dataclass(frozen=True)
class OriginList:
    """Ordered allow-list; the first matching entry wins."""

    entries: tuple[ExactOrigin | OriginPattern, ...]


@dataclass(frozen=True)
class OriginCallback:
    """Delegate deciding per origin.

    The callable receives the request origin (or ``None``) and returns, or
    awaits to, a boolean or any other origin-rule shape.
    """

    fn: OriginCallable


OriginRule = (
    AllowAllOrigins | OriginsDisabled | ReflectOrigin | ExactOrigin | OriginPattern | OriginList | OriginCallback
)

_RULE_TYPES = (AllowAllOrigins, OriginsDisabled, ReflectOrigin, ExactOrigin, OriginPattern, OriginList, OriginCallback)

# =============================================================================
# Decisions
# =============================================================================


@dataclass(frozen=True)
class OriginAllowed:
    """Origin accepted; ``value`` goes into ``Access-Control-Allow-Origin``."""

    value: str
    vary: bool = False


@dataclass(frozen=True)
class OriginDenied:
    """Origin rejected. ``vary`` is set when the rule depended on the origin."""

    vary: bool = False


OriginDecision = OriginAllowed | OriginDenied


# =============================================================================
# Canonicalization
# =============================================================================


def to_origin_rule(value: Any) -> OriginRule:
    """Canonicalize a configured origin shape into an :data:`OriginRule`.

    Raises:
        CorsConfigurationError: If *value* has no origin-rule interpretation.
    """
    if isinstance(value, _RULE_TYPES):
        return value
    if value is None or value == "*":
        return AllowAllOrigins()
    if value is True:
        return ReflectOrigin()
    if value is False or value == "":
        return OriginsDisabled()
    if isinstance(value, str):
        return ExactOrigin(value)
    if isinstance(value, re.Pattern):
        return OriginPattern(value)
    if isinstance(value, Sequence):
        return OriginList(tuple(_to_list_entry(entry) for entry in value))
    if callable(value):
        return OriginCallback(value)
    raise CorsConfigurationError(
        f"Unsupported origin value of type {type(value).__name__}",
        context={"origin": repr(value)},
    )


def _to_list_entry(entry: Any) -> ExactOrigin | OriginPattern:
    if isinstance(entry, (ExactOrigin, OriginPattern)):
        return entry
    if isinstance(entry, str):
        return ExactOrigin(entry)
    if isinstance(entry, re.Pattern):
        return OriginPattern(entry)
    raise CorsConfigurationError(
        f"Origin list entries must be strings or compiled patterns, got {type(entry).__name__}",
        context={"entry": repr(entry)},
    )


# =============================================================================
# Matching
# =============================================================================


def is_origin_allowed(request_origin: str | None, entry: ExactOrigin | OriginPattern) -> bool:
    """Test a single exact/pattern entry against the request origin.

    Exact entries compare without regard to letter case.
    """
    if request_origin is None:
        return False
    if isinstance(entry, ExactOrigin):
        return entry.value.casefold() == request_origin.casefold()
    return entry.pattern.search(request_origin) is not None


async def match_origin(
    request_origin: str | None,
    rule: OriginRule,
    *,
    strict: bool = False,
    request: Any = None,
) -> OriginDecision:
    """Decide whether *request_origin* is allowed under *rule*.

    Args:
        request_origin: Value of the request's ``Origin`` header, if any.
        rule: Canonical origin rule.
        strict: Mismatch-reject mode. An :class:`ExactOrigin` must then
            equal the request origin instead of being emitted unconditionally.
        request: The request, paused around an :class:`OriginCallback`.

    Raises:
        OriginCallbackError: If a callback returns an unsupported shape.
    """
    if isinstance(rule, OriginsDisabled):
        return OriginDenied()

    if isinstance(rule, AllowAllOrigins):
        return OriginAllowed("*")

    if isinstance(rule, ReflectOrigin):
        return OriginAllowed(request_origin or "", vary=True)

    if isinstance(rule, ExactOrigin):
        if strict and rule.value != request_origin:
            return OriginDenied(vary=True)
        return OriginAllowed(rule.value, vary=True)

    if isinstance(rule, OriginPattern):
        if is_origin_allowed(request_origin, rule):
            return OriginAllowed(request_origin or "", vary=True)
        return OriginDenied(vary=True)

    if isinstance(rule, OriginList):
        for entry in rule.entries:
            if is_origin_allowed(request_origin, entry):
                return OriginAllowed(request_origin or "", vary=True)
        return OriginDenied(vary=True)

    result = await _invoke_callback(rule, request_origin, request)
    try:
        resolved = to_origin_rule(result)
    except CorsConfigurationError as exc:
        raise OriginCallbackError(
            "Origin callback returned an unsupported value",
            context={"origin": request_origin, **exc.context},
        ) from exc
    if isinstance(resolved, OriginCallback) and resolved.fn is rule.fn:
        raise OriginCallbackError("Origin callback returned itself", context={"origin": request_origin})
    decision = await match_origin(request_origin, resolved, strict=strict, request=request)
    # Callback decisions are always origin-sensitive.
    return replace(decision, vary=True)


async def _invoke_callback(rule: OriginCallback, request_origin: str | None, request: Any) -> Any:
    with paused(request):
        try:
            result = rule.fn(request_origin)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.warning("cors_origin_callback_failed", origin=request_origin)
            raise
    if result is None:
        raise OriginCallbackError("Origin callback returned no result", context={"origin": request_origin})
    return result
