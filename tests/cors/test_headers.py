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
"""Tests for header computation and Vary merging."""

from __future__ import annotations

from starlette.datastructures import MutableHeaders

from pycors.cors.headers import HeaderSet, append_vary, build_headers, join_header_list
from pycors.cors.options import CorsOptions, canonicalize
from pycors.cors.origin import OriginAllowed, OriginDenied

REQUEST_HEADERS = {"origin": "http://example.com", "access-control-request-headers": "x-header-1, x-header-2"}


class TestJoinHeaderList:
    def test_sequence_joined_without_spaces(self):
        assert join_header_list(("FOO", "bar")) == "FOO,bar"

    def test_string_passes_through(self):
        assert join_header_list("header1, header2") == "header1, header2"

    def test_empty_values(self):
        assert join_header_list(()) == ""
        assert join_header_list("") == ""
        assert join_header_list(None) == ""


class TestAppendVary:
    def test_no_existing_value(self):
        assert append_vary(None, "Origin") == "Origin"
        assert append_vary("", "Origin") == "Origin"

    def test_appends_with_comma_space(self):
        assert append_vary("Foo", "Origin") == "Foo, Origin"

    def test_never_duplicates(self):
        assert append_vary("Foo, Origin", "Origin") == "Foo, Origin"
        assert append_vary("origin", "Origin") == "origin"

    def test_star_covers_everything(self):
        assert append_vary("*", "Origin") == "*"


class TestHeaderSet:
    def test_empty_values_dropped(self):
        headers = HeaderSet()
        headers.add("X-Empty", "")
        assert not headers
        assert len(headers) == 0

    def test_get_merges_vary(self):
        headers = HeaderSet()
        headers.vary("Origin")
        headers.vary("Access-Control-Request-Headers")
        assert headers.get("vary") == "Origin, Access-Control-Request-Headers"

    def test_apply_merges_into_existing_vary(self):
        target = MutableHeaders()
        target["Vary"] = "Foo"
        headers = HeaderSet()
        headers.add("Access-Control-Allow-Origin", "http://example.com")
        headers.vary("Origin")

        headers.apply(target)

        assert target["vary"] == "Foo, Origin"
        assert target["access-control-allow-origin"] == "http://example.com"

    def test_apply_twice_does_not_duplicate_vary(self):
        target = MutableHeaders()
        headers = HeaderSet()
        headers.vary("Origin")
        headers.apply(target)
        headers.apply(target)
        assert target["vary"] == "Origin"


class TestActualRequestHeaders:
    def test_allow_all(self):
        headers = build_headers(CorsOptions(), OriginAllowed("*"), REQUEST_HEADERS, preflight=False)

        assert headers.get("Access-Control-Allow-Origin") == "*"
        assert headers.get("Vary") is None
        assert headers.get("Access-Control-Allow-Methods") is None

    def test_order(self):
        opts = canonicalize({"credentials": True, "exposedHeaders": ["X-A", "X-B"]})
        headers = build_headers(opts, OriginAllowed("http://example.com", vary=True), REQUEST_HEADERS, preflight=False)

        assert headers.names() == [
            "Access-Control-Allow-Origin",
            "Vary",
            "Access-Control-Allow-Credentials",
            "Access-Control-Expose-Headers",
        ]
        assert headers.get("Access-Control-Expose-Headers") == "X-A,X-B"

    def test_credentials_only_when_enabled(self):
        headers = build_headers(CorsOptions(), OriginAllowed("*"), REQUEST_HEADERS, preflight=False)
        assert headers.get("Access-Control-Allow-Credentials") is None

    def test_empty_exposed_headers_suppressed(self):
        for value in ([], ""):
            opts = canonicalize({"exposedHeaders": value})
            headers = build_headers(opts, OriginAllowed("*"), REQUEST_HEADERS, preflight=False)
            assert headers.get("Access-Control-Expose-Headers") is None

    def test_denied_keeps_only_vary(self):
        opts = canonicalize({"credentials": True, "exposedHeaders": ["X-A"]})
        headers = build_headers(opts, OriginDenied(vary=True), REQUEST_HEADERS, preflight=True)
        assert list(headers) == [("Vary", "Origin")]

    def test_denied_without_vary_is_empty(self):
        headers = build_headers(CorsOptions(), OriginDenied(), REQUEST_HEADERS, preflight=True)
        assert not headers


class TestPreflightHeaders:
    def test_full_scenario(self):
        opts = canonicalize(
            {
                "origin": "http://example.com",
                "methods": ["FOO", "bar"],
                "headers": ["FIZZ", "buzz"],
                "credentials": True,
                "maxAge": 123,
            }
        )
        headers = build_headers(opts, OriginAllowed("http://example.com", vary=True), REQUEST_HEADERS, preflight=True)

        assert headers.get("Access-Control-Allow-Origin") == "http://example.com"
        assert headers.get("Access-Control-Allow-Methods") == "FOO,bar"
        assert headers.get("Access-Control-Allow-Headers") == "FIZZ,buzz"
        assert headers.get("Access-Control-Allow-Credentials") == "true"
        assert headers.get("Access-Control-Max-Age") == "123"
        assert headers.get("Vary") == "Origin"

    def test_default_methods(self):
        headers = build_headers(CorsOptions(), OriginAllowed("*"), REQUEST_HEADERS, preflight=True)
        assert headers.get("Access-Control-Allow-Methods") == "GET,HEAD,PUT,PATCH,POST,DELETE"

    def test_reflects_requested_headers_when_unset(self):
        headers = build_headers(CorsOptions(), OriginAllowed("*"), REQUEST_HEADERS, preflight=True)

        assert headers.get("Access-Control-Allow-Headers") == "x-header-1, x-header-2"
        assert headers.get("Vary") == "Access-Control-Request-Headers"

    def test_reflection_adds_vary_even_without_request_header(self):
        headers = build_headers(CorsOptions(), OriginAllowed("*"), {}, preflight=True)

        assert headers.get("Access-Control-Allow-Headers") is None
        assert headers.get("Vary") == "Access-Control-Request-Headers"

    def test_configured_headers_string(self):
        opts = canonicalize({"allowedHeaders": "header1,header2"})
        headers = build_headers(opts, OriginAllowed("*"), REQUEST_HEADERS, preflight=True)

        assert headers.get("Access-Control-Allow-Headers") == "header1,header2"
        assert headers.get("Vary") is None

    def test_empty_configured_headers_suppressed(self):
        for value in ([], ""):
            opts = canonicalize({"allowedHeaders": value})
            headers = build_headers(opts, OriginAllowed("*"), REQUEST_HEADERS, preflight=True)

            assert headers.get("Access-Control-Allow-Headers") is None
            assert headers.get("Vary") is None

    def test_max_age_zero(self):
        opts = canonicalize({"maxAge": 0})
        headers = build_headers(opts, OriginAllowed("*"), REQUEST_HEADERS, preflight=True)
        assert headers.get("Access-Control-Max-Age") == "0"

    def test_max_age_unset(self):
        headers = build_headers(CorsOptions(), OriginAllowed("*"), REQUEST_HEADERS, preflight=True)
        assert headers.get("Access-Control-Max-Age") is None

    def test_empty_methods_suppressed(self):
        opts = canonicalize({"methods": []})
        headers = build_headers(opts, OriginAllowed("*"), REQUEST_HEADERS, preflight=True)
        assert headers.get("Access-Control-Allow-Methods") is None

    def test_vary_merges_origin_and_request_headers(self):
        headers = build_headers(CorsOptions(), OriginAllowed("http://a.com", vary=True), REQUEST_HEADERS, preflight=True)
        assert headers.get("Vary") == "Origin, Access-Control-Request-Headers"
