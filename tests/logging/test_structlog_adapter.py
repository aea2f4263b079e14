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
"""Tests for StructlogAdapter."""

import logging

from pycors.core.config import Config
from pycors.logging.structlog_adapter import StructlogAdapter


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"pycors": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_format(self):
        for fmt in ("json", "logfmt"):
            adapter = StructlogAdapter()
            adapter.configure(Config({"pycors": {"logging": {"format": fmt}}}))
            assert adapter._format == fmt

    def test_per_logger_levels_flat_and_nested(self):
        adapter = StructlogAdapter()
        adapter.configure(
            Config(
                {
                    "pycors": {
                        "logging": {
                            "level": {
                                "root": "INFO",
                                "myapp.web": "warning",
                                "pycors": {"cors": "DEBUG"},
                            }
                        }
                    }
                }
            )
        )
        assert adapter._module_levels == {"myapp.web": "WARNING", "pycors.cors": "DEBUG"}
        assert logging.getLogger("pycors.cors").level == logging.DEBUG
        assert logging.getLogger("myapp.web").level == logging.WARNING


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_usable_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("pycors.cors")
        assert callable(getattr(logger, "debug", None))
        assert callable(getattr(logger, "warning", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("pycors.test", "ERROR")
        assert logging.getLogger("pycors.test").level == logging.ERROR
