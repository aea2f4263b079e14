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
"""CORS middleware for Starlette — pure ASGI."""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatch
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pycors.core.config import Config
from pycors.cors.engine import CorsAction, CorsEngine
from pycors.cors.properties import CorsProperties
from pycors.cors.resolver import OptionsSource


class CorsMiddleware:
    """Applies CORS policy to every HTTP request.

    Preflight and mismatch-reject outcomes are answered here with an empty
    response. For everything else the headers are merged into the
    downstream ``http.response.start`` message, so responses produced by
    inner exception handlers carry them too. Options delegate and origin
    callback errors are re-raised into the ASGI stack.

    Uses raw ASGI protocol instead of ``BaseHTTPMiddleware`` so that
    streaming responses and request bodies pass through untouched.

    Args:
        app: The wrapped ASGI application.
        options: Static options or an options delegate (see :func:`pycors.cors`).
        paths: Glob patterns the middleware applies to. Empty means all paths.
        exclude_paths: Glob patterns skipped even if ``paths`` matches.
    """

    def __init__(
        self,
        app: ASGIApp,
        options: OptionsSource = None,
        paths: Sequence[str] = (),
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.app = app
        self._engine = CorsEngine(options)
        self._paths = list(paths)
        self._exclude_paths = list(exclude_paths)

    def should_not_filter(self, path: str) -> bool:
        """Return ``True`` if *path* is outside this middleware's patterns."""
        if self._paths and not any(fnmatch(path, p) for p in self._paths):
            return True
        return bool(self._exclude_paths and any(fnmatch(path, p) for p in self._exclude_paths))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or self.should_not_filter(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        recorded = _RecordingReceive(receive)
        outcome = await self._engine.evaluate(Request(scope, recorded))

        if outcome.error is not None:
            raise outcome.error

        if outcome.status_code is not None:
            response = Response(status_code=outcome.status_code)
            outcome.headers.apply(response.headers)
            if outcome.action is CorsAction.PREFLIGHT:
                response.headers["Content-Length"] = "0"
            await response(scope, receive, send)
            return

        if not outcome.headers:
            await self.app(scope, recorded.replay(), send)
            return

        async def send_with_cors(message: Any) -> None:
            if message["type"] == "http.response.start":
                outcome.headers.apply(MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, recorded.replay(), send_with_cors)


def cors_middleware(config: Config) -> Middleware:
    """Build a Starlette ``Middleware`` entry from ``pycors.cors`` configuration."""
    props = CorsProperties.from_config(config)
    return Middleware(
        CorsMiddleware,
        options=props.to_options(),
        paths=props.paths,
        exclude_paths=props.exclude_paths,
    )


class _RecordingReceive:
    """Records messages pulled from ``receive`` while the policy is evaluated.

    An options delegate or origin callback may read the request body.
    :meth:`replay` hands those messages to the wrapped application first,
    then falls through to the live channel.
    """

    def __init__(self, receive: Receive) -> None:
        self._receive = receive
        self._messages: list[Message] = []

    async def __call__(self) -> Message:
        message = await self._receive()
        self._messages.append(message)
        return message

    def replay(self) -> Receive:
        if not self._messages:
            return self._receive

        pending = list(self._messages)

        async def receive() -> Message:
            if pending:
                return pending.pop(0)
            return await self._receive()

        return receive
