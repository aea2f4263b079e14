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
"""HTTP ports — the request/response capabilities the CORS engine consumes.

Uses structural protocols so that vendor-specific types (e.g. Starlette)
remain confined to the adapter layer. A Starlette ``Request`` satisfies
:class:`RequestPort` as-is.
"""

from __future__ import annotations

import contextlib
from collections.abc import Awaitable, Callable, Iterator, Mapping, MutableMapping
from typing import Any, Protocol, runtime_checkable

# Downstream continuation: called once, optionally with an error.
# May return an awaitable, which the caller awaits.
Continuation = Callable[..., Awaitable[Any] | None]


@runtime_checkable
class RequestPort(Protocol):
    """Inbound request as seen by the engine.

    ``headers`` must support case-insensitive ``get``; the engine looks
    names up in lowercase. ``pause()``/``resume()`` are optional and
    detected at runtime.
    """

    method: str
    headers: Mapping[str, str]


@runtime_checkable
class ResponsePort(Protocol):
    """Outbound response as seen by the finalizer."""

    headers: MutableMapping[str, str]
    status_code: int

    def end(self) -> Any:
        """Terminate the response with its current status and headers."""
        ...


@runtime_checkable
class PausableRequest(Protocol):
    """A request whose body stream can be paused during asynchronous work."""

    def pause(self) -> Any: ...
    def resume(self) -> Any: ...


@contextlib.contextmanager
def paused(request: Any) -> Iterator[None]:
    """Pause *request* for the duration of the block and resume it exactly once.

    Requests without stream controls pass through untouched.
    """
    if not isinstance(request, PausableRequest):
        yield
        return
    request.pause()
    try:
        yield
    finally:
        request.resume()
