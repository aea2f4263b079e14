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
"""OptionsResolver — turns a request into its effective CORS options."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog

from pycors.cors.options import CorsOptions, canonicalize
from pycors.kernel.exceptions import CorsConfigurationError, ResolutionError
from pycors.web.ports.http import paused

logger = structlog.get_logger("pycors.cors")

OptionsDelegate = Callable[[Any], CorsOptions | Mapping[str, Any] | Awaitable[CorsOptions | Mapping[str, Any]]]
OptionsSource = CorsOptions | Mapping[str, Any] | OptionsDelegate | None


class OptionsResolver:
    """Resolves the :class:`CorsOptions` for each request.

    *source* is either static configuration (``None``, a mapping or a
    :class:`CorsOptions`), canonicalized once here, or a delegate called
    per request with the request and returning (or awaiting to) a
    configuration. The request is paused around the delegate call.
    """

    def __init__(self, source: OptionsSource = None) -> None:
        self._delegate: OptionsDelegate | None = None
        self._static = CorsOptions()
        if callable(source) and not isinstance(source, (CorsOptions, Mapping)):
            self._delegate = source
        else:
            self._static = canonicalize(source)

    @property
    def is_static(self) -> bool:
        return self._delegate is None

    async def resolve(self, request: Any) -> CorsOptions:
        """Return the options for *request*.

        Raises:
            ResolutionError: If the delegate returns nothing usable.
            Exception: Anything the delegate raises, unchanged.
        """
        delegate = self._delegate
        if delegate is None:
            return self._static

        with paused(request):
            try:
                result = delegate(request)
                if inspect.isawaitable(result):
                    result = await result
            except Exception:
                logger.warning("cors_options_delegate_failed", method=getattr(request, "method", None))
                raise

        if result is None:
            raise ResolutionError("Options delegate returned no configuration")
        try:
            return canonicalize(result)
        except CorsConfigurationError as exc:
            raise ResolutionError(
                f"Options delegate returned an unusable configuration: {exc}",
                context=exc.context,
            ) from exc
