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
"""CORS response header computation.

:func:`build_headers` is a pure mapping from (options, origin decision,
request) to an ordered :class:`HeaderSet`. Nothing touches a response until
:meth:`HeaderSet.apply` is called.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from pycors.cors.options import CorsOptions, HeaderList
from pycors.cors.origin import OriginAllowed, OriginDecision

ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"

REQUEST_HEADERS = "Access-Control-Request-Headers"


def join_header_list(value: HeaderList | None) -> str:
    """Join a header list with ``,``; strings pass through unchanged.

    ``None`` and empty values normalize to ``""`` (header suppressed).
    """
    if not value:
        return ""
    if isinstance(value, str):
        return value
    return ",".join(value)


def append_vary(existing: str | None, token: str) -> str:
    """Merge *token* into an existing ``Vary`` value.

    Appends with ``", "``, never drops existing tokens and never adds a
    token already present (case-insensitive). ``*`` already covers
    everything.
    """
    if not existing:
        return token
    present = [part.strip() for part in existing.split(",") if part.strip()]
    if "*" in present or token.lower() in (part.lower() for part in present):
        return existing
    return f"{existing}, {token}"


class HeaderSet:
    """Ordered ``(name, value)`` pairs destined for a response.

    ``Vary`` entries are merged into whatever the response already carries
    instead of replacing it.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[tuple[str, str]] = []

    def add(self, name: str, value: str) -> None:
        """Add a header; empty values are dropped."""
        if value:
            self._items.append((name, value))

    def vary(self, token: str) -> None:
        self.add(VARY, token)

    def get(self, name: str) -> str | None:
        """Return the combined value for *name* (``Vary`` tokens merged)."""
        combined: str | None = None
        for key, value in self._items:
            if key.lower() == name.lower():
                combined = append_vary(combined, value) if key == VARY else value
        return combined

    def apply(self, headers: MutableMapping[str, str]) -> None:
        """Write every header onto a case-insensitive response header mapping."""
        for name, value in self._items:
            if name == VARY:
                headers[VARY] = append_vary(headers.get(VARY), value)
            else:
                headers[name] = value

    def names(self) -> list[str]:
        return [name for name, _ in self._items]

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"HeaderSet({self._items!r})"


def build_headers(
    options: CorsOptions,
    decision: OriginDecision,
    request_headers: Mapping[str, Any],
    *,
    preflight: bool,
) -> HeaderSet:
    """Compute the CORS headers for one request.

    Actual requests get, in order: ``Allow-Origin``, ``Vary: Origin``,
    ``Allow-Credentials`` and ``Expose-Headers``. Preflight requests also
    get ``Allow-Methods``, ``Allow-Headers`` (reflected from
    ``Access-Control-Request-Headers`` when not configured) and
    ``Max-Age``. A denied origin only keeps ``Vary: Origin``.
    """
    result = HeaderSet()
    allowed = isinstance(decision, OriginAllowed)

    if allowed:
        result.add(ALLOW_ORIGIN, decision.value)
    if decision.vary:
        result.vary("Origin")
    if not allowed:
        return result

    if options.credentials:
        result.add(ALLOW_CREDENTIALS, "true")

    if preflight:
        result.add(ALLOW_METHODS, join_header_list(options.methods))
        _add_allowed_headers(result, options, request_headers)
        if options.max_age is not None:
            result.add(MAX_AGE, str(options.max_age))

    result.add(EXPOSE_HEADERS, join_header_list(options.exposed_headers))
    return result


def _add_allowed_headers(result: HeaderSet, options: CorsOptions, request_headers: Mapping[str, Any]) -> None:
    if options.allowed_headers is not None:
        result.add(ALLOW_HEADERS, join_header_list(options.allowed_headers))
        return
    requested = request_headers.get(REQUEST_HEADERS.lower())
    if requested:
        result.add(ALLOW_HEADERS, str(requested))
    result.vary(REQUEST_HEADERS)
