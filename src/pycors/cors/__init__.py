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
"""pycors CORS engine — policy resolution and header decisions."""

from pycors.cors.engine import (
    CorsAction,
    CorsEngine,
    CorsHandler,
    CorsOutcome,
    ResponseFinalizer,
    cors,
    is_preflight,
)
from pycors.cors.headers import HeaderSet, append_vary, build_headers, join_header_list
from pycors.cors.options import DEFAULT_METHODS, CorsOptions, canonicalize
from pycors.cors.origin import (
    AllowAllOrigins,
    ExactOrigin,
    OriginAllowed,
    OriginCallback,
    OriginDecision,
    OriginDenied,
    OriginList,
    OriginPattern,
    OriginRule,
    OriginsDisabled,
    ReflectOrigin,
    match_origin,
    to_origin_rule,
)
from pycors.cors.properties import CorsProperties
from pycors.cors.resolver import OptionsResolver

__all__ = [
    # Engine
    "CorsAction",
    "CorsEngine",
    "CorsHandler",
    "CorsOutcome",
    "ResponseFinalizer",
    "cors",
    "is_preflight",
    # Options
    "DEFAULT_METHODS",
    "CorsOptions",
    "CorsProperties",
    "OptionsResolver",
    "canonicalize",
    # Origins
    "AllowAllOrigins",
    "ExactOrigin",
    "OriginAllowed",
    "OriginCallback",
    "OriginDecision",
    "OriginDenied",
    "OriginList",
    "OriginPattern",
    "OriginRule",
    "OriginsDisabled",
    "ReflectOrigin",
    "match_origin",
    "to_origin_rule",
    # Headers
    "HeaderSet",
    "append_vary",
    "build_headers",
    "join_header_list",
]
