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
"""StructlogAdapter — configures structlog for pycors."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from pycors.core.config import Config

_RENDERERS: dict[str, Any] = {
    "json": structlog.processors.JSONRenderer,
    "logfmt": structlog.processors.LogfmtRenderer,
}


class StructlogAdapter:
    """Logging adapter backed by structlog.

    Reads ``pycors.logging.level.*`` (``root`` plus per-logger levels such
    as ``pycors.cors: DEBUG``) and ``pycors.logging.format``
    (``console``, ``json`` or ``logfmt``).
    """

    def __init__(self) -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}

    def configure(self, config: Config) -> None:
        """Configure structlog from the logging section of config."""
        level_section = dict(config.get_section("pycors.logging.level"))
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = _flatten_levels(level_section)
        self._format = str(config.get("pycors.logging.format", "console")).lower()

        self._setup_structlog()
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        """Get a structlog BoundLogger by name."""
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the log level for a specific stdlib logger."""
        log_level = getattr(logging, level.upper(), logging.INFO)
        logging.getLogger(name).setLevel(log_level)

    def _setup_structlog(self) -> None:
        log_level = getattr(logging, self._root_level, logging.INFO)

        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]
        renderer = _RENDERERS.get(self._format)
        processors.append(renderer() if renderer is not None else structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=log_level,
            force=True,
        )


def _flatten_levels(section: dict[str, Any], prefix: str = "") -> dict[str, str]:
    # YAML nests dotted logger names: {"pycors": {"cors": "DEBUG"}}
    levels: dict[str, str] = {}
    for key, value in section.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            levels.update(_flatten_levels(value, name))
        else:
            levels[name] = str(value).upper()
    return levels
