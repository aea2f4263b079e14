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
"""CORS configuration properties bound from ``pycors.cors``."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from pycors.core.config import Config, config_properties
from pycors.cors.options import DEFAULT_METHODS, CorsOptions, canonicalize
from pycors.kernel.exceptions import CorsConfigurationError


@config_properties(prefix="pycors.cors")
@dataclass(frozen=True)
class CorsProperties:
    """File/env form of the CORS options.

    ``origin`` takes the same shapes as the option mapping except
    callables: ``"*"``, ``true``/``false``, one origin, or a list (a
    comma-separated string from the environment also becomes a list).
    ``origin_patterns`` adds regular expressions to the allow-list, in
    the manner of Spring's ``allowedOriginPatterns``.

    ``paths`` / ``exclude_paths`` are glob patterns scoping the middleware.
    """

    origin: Any = "*"
    origin_patterns: list[str] = field(default_factory=list)
    methods: list[str] = field(default_factory=lambda: DEFAULT_METHODS.split(","))
    allowed_headers: list[str] | None = None
    exposed_headers: list[str] | None = None
    credentials: bool = False
    max_age: int | None = None
    preflight_continue: bool = False
    options_success_status: int = 204
    mismatch_continue: bool = True
    mismatch_status: int = 400
    paths: list[str] = field(default_factory=list)
    exclude_paths: list[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Config) -> CorsProperties:
        return config.bind(cls)

    def to_options(self) -> CorsOptions:
        """Canonicalize into :class:`CorsOptions`.

        Raises:
            CorsConfigurationError: On an invalid origin pattern or value.
        """
        return canonicalize(
            {
                "origin": self._origin_value(),
                "methods": self.methods,
                "allowedHeaders": self.allowed_headers,
                "exposedHeaders": self.exposed_headers,
                "credentials": _as_bool(self.credentials),
                "maxAge": self.max_age,
                "preflightContinue": _as_bool(self.preflight_continue),
                "optionsSuccessStatus": self.options_success_status,
                "mismatchContinue": _as_bool(self.mismatch_continue),
                "mismatchStatus": self.mismatch_status,
            }
        )

    def _origin_value(self) -> Any:
        origin = self.origin
        if isinstance(origin, str):
            lowered = origin.strip().lower()
            if lowered in ("true", "false"):
                origin = lowered == "true"
            elif "," in origin:
                origin = [part.strip() for part in origin.split(",") if part.strip()]

        if not self.origin_patterns:
            return origin

        patterns = [_compile(p) for p in self.origin_patterns]
        if origin in ("*", None, True, False, ""):
            # Patterns alone define the allow-list.
            return patterns
        exact = [origin] if isinstance(origin, str) else list(origin)
        return exact + patterns


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise CorsConfigurationError(
            f"Invalid origin pattern '{pattern}': {exc}",
            context={"pattern": pattern},
        ) from exc


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)
