# Copyright 2026 tplkit authors
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
#
# SPDX-License-Identifier: Apache-2.0

"""Configuration for tplkit.

Settings are read from the first of these files found in the start
directory:

1. ``tplkit.toml`` (keys at the top level)
2. ``pyproject.toml`` (keys under ``[tool.tplkit]``)

Example ``tplkit.toml``::

    strategy = "spdx-header"
    license-file-stems = ["LICENSE", "LICENCE", "COPYING"]
    header-lines = 20
    max-expression-depth = 32

Every key is optional. Unknown keys and wrongly typed values raise
:class:`~tplkit.errors.ConfigError` rather than being ignored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from tplkit.errors import ConfigError
from tplkit.logging import get_logger

__all__ = [
    'CONFIG_FILENAME',
    'MAX_EXPRESSION_DEPTH',
    'Strategy',
    'TplConfig',
    'load_config',
    'parse_config',
]

logger = get_logger(__name__)

CONFIG_FILENAME = 'tplkit.toml'
PYPROJECT_FILENAME = 'pyproject.toml'


class Strategy(str, enum.Enum):
    """How :func:`tplkit.scan.scan` collects license evidence for a file."""

    FILE = 'file'
    SPDX_HEADER = 'spdx-header'


DEFAULT_LICENSE_FILE_STEMS: tuple[str, ...] = ('LICENSE', 'LICENCE', 'COPYING', 'NOTICE')

# Deepest nesting the recursive parser handles within the default recursion limit.
MAX_EXPRESSION_DEPTH = 64


@dataclass(frozen=True)
class TplConfig:
    """Scan settings.

    Attributes:
        strategy: Default scan strategy.
        license_file_stems: File stems (name without final suffix)
            treated as license evidence, matched case-insensitively.
        header_lines: Number of leading lines of a target file searched
            for an ``SPDX-License-Identifier:`` tag.
        max_expression_depth: Parenthesis nesting cap applied when
            parsing expressions read from scanned files. At most
            :data:`MAX_EXPRESSION_DEPTH`.
    """

    strategy: Strategy = Strategy.FILE
    license_file_stems: tuple[str, ...] = DEFAULT_LICENSE_FILE_STEMS
    header_lines: int = 30
    max_expression_depth: int = MAX_EXPRESSION_DEPTH


def _positive_int(key: str, value: Any) -> int:  # noqa: ANN401
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f'{key!r} must be a positive integer, got {value!r}')
    return int(value)


def _depth(key: str, value: Any) -> int:  # noqa: ANN401
    depth = _positive_int(key, value)
    if depth > MAX_EXPRESSION_DEPTH:
        raise ConfigError(f'{key!r} must be at most {MAX_EXPRESSION_DEPTH}, got {depth}')
    return depth


def _strategy(key: str, value: Any) -> Strategy:  # noqa: ANN401
    try:
        return Strategy(str(value))
    except ValueError:
        choices = ', '.join(s.value for s in Strategy)
        raise ConfigError(f'{key!r} must be one of {choices}, got {value!r}') from None


def _stems(key: str, value: Any) -> tuple[str, ...]:  # noqa: ANN401
    if not isinstance(value, list) or not value or not all(isinstance(v, str) and v for v in value):
        raise ConfigError(f'{key!r} must be a non-empty list of non-empty strings')
    return tuple(str(v) for v in value)


_FIELDS = {
    'strategy': ('strategy', _strategy),
    'license-file-stems': ('license_file_stems', _stems),
    'header-lines': ('header_lines', _positive_int),
    'max-expression-depth': ('max_expression_depth', _depth),
}


def parse_config(table: dict[str, Any], source: str = '<config>') -> TplConfig:
    """Build a :class:`TplConfig` from a TOML table.

    Args:
        table: The configuration keys (kebab-case).
        source: Where the table came from, for error messages.

    Raises:
        ConfigError: On unknown keys or invalid values.
    """
    kwargs: dict[str, Any] = {}
    for key, value in table.items():
        if key not in _FIELDS:
            known = ', '.join(sorted(_FIELDS))
            raise ConfigError(f'{source}: unknown key {key!r} (known keys: {known})')
        attr, convert = _FIELDS[key]
        try:
            kwargs[attr] = convert(key, value)
        except ConfigError as exc:
            raise ConfigError(f'{source}: {exc}') from None
    return TplConfig(**kwargs)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        doc = tomlkit.parse(path.read_text(encoding='utf-8'))
    except tomlkit.exceptions.ParseError as exc:
        raise ConfigError(f'{path}: invalid TOML: {exc}') from exc
    return doc.unwrap()


def load_config(start: Path) -> TplConfig:
    """Load configuration from *start*, falling back to defaults.

    Args:
        start: Directory to look in (usually the package root).

    Returns:
        The loaded :class:`TplConfig`.

    Raises:
        ConfigError: If a config file exists but is invalid.
    """
    config_file = start / CONFIG_FILENAME
    if config_file.is_file():
        logger.debug('config_loaded', path=str(config_file))
        return parse_config(_read_toml(config_file), str(config_file))

    pyproject = start / PYPROJECT_FILENAME
    if pyproject.is_file():
        tool = _read_toml(pyproject).get('tool', {})
        table = tool.get('tplkit') if isinstance(tool, dict) else None
        if isinstance(table, dict):
            logger.debug('config_loaded', path=str(pyproject), section='tool.tplkit')
            return parse_config(table, f'{pyproject} [tool.tplkit]')

    logger.debug('config_defaults', start=str(start))
    return TplConfig()
