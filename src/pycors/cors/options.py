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
"""CORS options and their canonicalization."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from pycors.cors.origin import AllowAllOrigins, OriginRule, to_origin_rule
from pycors.kernel.exceptions import CorsConfigurationError

logger = structlog.get_logger("pycors.cors")

DEFAULT_METHODS = "GET,HEAD,PUT,PATCH,POST,DELETE"

HeaderList = str | tuple[str, ...]

# Accepted option spellings -> canonical field name.
_OPTION_KEYS: dict[str, str] = {
    "origin": "origin",
    "methods": "methods",
    "allowedHeaders": "allowed_headers",
    "allowed_headers": "allowed_headers",
    "exposedHeaders": "exposed_headers",
    "exposed_headers": "exposed_headers",
    "credentials": "credentials",
    "maxAge": "max_age",
    "max_age": "max_age",
    "preflightContinue": "preflight_continue",
    "preflight_continue": "preflight_continue",
    "optionsSuccessStatus": "options_success_status",
    "options_success_status": "options_success_status",
    "mismatchStatus": "mismatch_status",
    "mismatch_status": "mismatch_status",
}

# Legacy spellings, folded into canonical fields.
_LEGACY_KEYS = frozenset({"headers", "enablePreflight", "enable_preflight", "mismatchContinue", "mismatch_continue"})


@dataclass(frozen=True)
class CorsOptions:
    """Canonical CORS policy for one request.

    Sequences are stored as tuples so the instance is safe to share.
    ``max_age=None`` means "unset"; ``0`` is a real value.
    """

    origin: OriginRule = field(default_factory=AllowAllOrigins)
    methods: HeaderList = DEFAULT_METHODS
    allowed_headers: HeaderList | None = None
    exposed_headers: HeaderList | None = None
    credentials: bool = False
    max_age: int | None = None
    preflight_continue: bool = False
    options_success_status: int = 204
    reject_mismatch: bool = False
    mismatch_status: int = 400


def canonicalize(raw: CorsOptions | Mapping[str, Any] | None) -> CorsOptions:
    """Build a :class:`CorsOptions` from any supported configuration shape.

    *raw* is only read, never written, so frozen mappings are fine.

    Legacy spellings:
    - ``headers`` is an alias of ``allowedHeaders``; ``allowedHeaders`` wins
      when both are present.
    - ``enablePreflight: False`` behaves like ``preflightContinue: True``.
    - ``mismatchContinue: False`` switches on mismatch-reject mode.

    Raises:
        CorsConfigurationError: If a value has an unsupported type.
    """
    if raw is None:
        return CorsOptions()
    if isinstance(raw, CorsOptions):
        return raw
    if not isinstance(raw, Mapping):
        raise CorsConfigurationError(
            f"CORS options must be a mapping or CorsOptions, got {type(raw).__name__}",
        )

    values: dict[str, Any] = {}
    for key, value in raw.items():
        if key in _OPTION_KEYS:
            values[_OPTION_KEYS[key]] = value
        elif key not in _LEGACY_KEYS:
            logger.warning("cors_unknown_option", option=key)

    if "allowed_headers" not in values and "headers" in raw:
        values["allowed_headers"] = raw["headers"]

    enable_preflight = _first(raw, "enablePreflight", "enable_preflight")
    if enable_preflight is False:
        values["preflight_continue"] = True

    mismatch_continue = _first(raw, "mismatchContinue", "mismatch_continue")
    if mismatch_continue is not None:
        values["reject_mismatch"] = not mismatch_continue

    return CorsOptions(
        origin=to_origin_rule(values.get("origin")),
        methods=_methods(values.get("methods")),
        allowed_headers=_header_list("allowedHeaders", values.get("allowed_headers")),
        exposed_headers=_header_list("exposedHeaders", values.get("exposed_headers")),
        credentials=values.get("credentials") is True,
        max_age=_max_age(values.get("max_age")),
        preflight_continue=bool(values.get("preflight_continue", False)),
        options_success_status=_status("optionsSuccessStatus", values.get("options_success_status", 204)),
        reject_mismatch=bool(values.get("reject_mismatch", False)),
        mismatch_status=_status("mismatchStatus", values.get("mismatch_status", 400)),
    )


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


def _methods(value: Any) -> HeaderList:
    if value is None:
        return DEFAULT_METHODS
    return _header_list("methods", value) or ""


def _header_list(name: str, value: Any) -> HeaderList | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value)
    raise CorsConfigurationError(
        f"'{name}' must be a string or a sequence of strings, got {type(value).__name__}",
        context={name: repr(value)},
    )


def _max_age(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise CorsConfigurationError("'maxAge' must be an integer", context={"maxAge": value})
    if isinstance(value, str) and re.fullmatch(r"\d+", value.strip()):
        return int(value)
    if isinstance(value, int):
        return value
    raise CorsConfigurationError("'maxAge' must be an integer", context={"maxAge": repr(value)})


def _status(name: str, value: Any) -> int:
    if isinstance(value, str) and re.fullmatch(r"\d+", value.strip()):
        value = int(value)
    if isinstance(value, int) and not isinstance(value, bool) and 100 <= value <= 599:
        return value
    raise CorsConfigurationError(f"'{name}' must be an HTTP status code", context={name: repr(value)})
