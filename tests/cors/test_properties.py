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
"""Tests for CorsProperties binding and conversion."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from pycors.core.config import Config
from pycors.cors.options import DEFAULT_METHODS
from pycors.cors.origin import (
    AllowAllOrigins,
    ExactOrigin,
    OriginList,
    OriginPattern,
    OriginsDisabled,
    ReflectOrigin,
)
from pycors.cors.properties import CorsProperties
from pycors.kernel.exceptions import CorsConfigurationError


class TestCorsPropertiesDefaults:
    def test_defaults_convert_to_default_options(self):
        opts = CorsProperties().to_options()

        assert opts.origin == AllowAllOrigins()
        assert opts.methods == tuple(DEFAULT_METHODS.split(","))
        assert opts.credentials is False
        assert opts.max_age is None
        assert opts.reject_mismatch is False

    def test_library_defaults_file(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "missing.yaml")
        props = CorsProperties.from_config(config)

        assert props.origin == "*"
        assert props.options_success_status == 204
        assert props.mismatch_status == 400


class TestCorsPropertiesBinding:
    def test_bind_from_dict(self):
        config = Config(
            {
                "pycors": {
                    "cors": {
                        "origin": ["http://a.com", "http://b.com"],
                        "credentials": True,
                        "max_age": 600,
                        "exposed_headers": ["X-Total-Count"],
                        "mismatch_continue": False,
                        "mismatch_status": 403,
                    }
                }
            }
        )
        opts = CorsProperties.from_config(config).to_options()

        assert opts.origin == OriginList((ExactOrigin("http://a.com"), ExactOrigin("http://b.com")))
        assert opts.credentials is True
        assert opts.max_age == 600
        assert opts.exposed_headers == ("X-Total-Count",)
        assert opts.reject_mismatch is True
        assert opts.mismatch_status == 403

    def test_bind_from_yaml(self, tmp_path: Path):
        (tmp_path / "pycors.yaml").write_text(
            "pycors:\n"
            "  cors:\n"
            "    origin: true\n"
            "    methods: [GET, POST]\n"
            "    paths: ['/api/*']\n"
        )
        props = CorsProperties.from_config(Config.from_sources(tmp_path))

        assert props.paths == ["/api/*"]
        opts = props.to_options()
        assert opts.origin == ReflectOrigin()
        assert opts.methods == ("GET", "POST")

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PYCORS_CORS_ORIGIN", "http://a.com, http://b.com")
        monkeypatch.setenv("PYCORS_CORS_CREDENTIALS", "true")
        monkeypatch.setenv("PYCORS_CORS_MAX_AGE", "0")
        monkeypatch.setenv("PYCORS_CORS_METHODS", "GET,POST")

        opts = CorsProperties.from_config(Config({})).to_options()

        assert opts.origin == OriginList((ExactOrigin("http://a.com"), ExactOrigin("http://b.com")))
        assert opts.credentials is True
        assert opts.max_age == 0
        assert opts.methods == ("GET", "POST")

    def test_env_boolean_origin(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PYCORS_CORS_ORIGIN", "false")
        assert CorsProperties.from_config(Config({})).to_options().origin == OriginsDisabled()


class TestOriginPatterns:
    def test_patterns_alone(self):
        opts = CorsProperties(origin_patterns=[r"\.example\.com$"]).to_options()
        assert opts.origin == OriginList((OriginPattern(re.compile(r"\.example\.com$")),))

    def test_patterns_extend_exact_origins(self):
        opts = CorsProperties(origin="http://a.com", origin_patterns=[r"\.b\.com$"]).to_options()
        assert opts.origin == OriginList(
            (ExactOrigin("http://a.com"), OriginPattern(re.compile(r"\.b\.com$")))
        )

    def test_invalid_pattern(self):
        with pytest.raises(CorsConfigurationError):
            CorsProperties(origin_patterns=["("]).to_options()
