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
"""Unified exception hierarchy for pycors.

All library exceptions inherit from PyCorsException, so callers can catch
the base class to handle every CORS failure, or a specific subclass for
targeted handling.

Categories:
- CorsException: failures while resolving a CORS policy for a request
- CorsConfigurationError: static configuration that cannot be canonicalized
"""

from __future__ import annotations

# =============================================================================
# Base
# =============================================================================


class PyCorsException(Exception):
    """Base exception for all pycors errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CORS_RESOLUTION").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Policy resolution
# =============================================================================


class CorsException(PyCorsException):
    """A CORS policy could not be resolved for the current request."""


class ResolutionError(CorsException):
    """The options delegate produced no usable configuration."""

    default_code = "CORS_RESOLUTION"


class OriginCallbackError(CorsException):
    """The origin callback produced a result that is not an origin rule."""

    default_code = "CORS_ORIGIN_CALLBACK"


# =============================================================================
# Configuration
# =============================================================================


class CorsConfigurationError(PyCorsException):
    """A configuration value has a type the engine cannot interpret."""

    default_code = "CORS_CONFIGURATION"
