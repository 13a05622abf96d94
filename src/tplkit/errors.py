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

"""Error types raised by tplkit.

Parse failures are reported with a single :class:`ParseError` class
whose :attr:`~ParseError.kind` says *what* went wrong. Every kind is
terminal for the parse call that raised it: the parser never retries
internally, and no partial AST is ever returned alongside an error.

Usage::

    from tplkit.errors import ErrorKind, ParseError
    from tplkit.spdx import parse

    try:
        parse('MIT Apache-2.0')
    except ParseError as exc:
        assert exc.kind is ErrorKind.UNEXPECTED_TOKEN
"""

from __future__ import annotations

import enum

__all__ = [
    'ConfigError',
    'ErrorKind',
    'ParseError',
    'ScanError',
    'ScanErrorKind',
]


class ErrorKind(str, enum.Enum):
    """Why an SPDX expression (or one of its identifiers) was rejected."""

    LESS_THAN_MINIMUM_CHARACTER_LENGTH = 'LessThanMinimumCharacterLength'
    ILLEGAL_CHARACTER = 'IllegalCharacter'
    MISSING_COLON_AFTER_DOCUMENT_REF = 'MissingColonAfterDocumentRef'
    MISSING_LICENSE_REF_PREFIX = 'MissingLicenseRefPrefix'
    UNKNOWN_LICENSE_ID = 'UnknownLicenseId'
    UNKNOWN_LICENSE_EXCEPTION_ID = 'UnknownLicenseExceptionId'
    INVALID_SIMPLE_EXPRESSION = 'InvalidSimpleExpression'
    UNEXPECTED_TOKEN = 'UnexpectedToken'
    END_OF_INPUT = 'EndOfInput'


class ParseError(ValueError):
    """Raised when an SPDX expression or identifier cannot be parsed.

    Attributes:
        kind: The :class:`ErrorKind` of the failure.
        expression: The text being parsed. For a bare identifier this
            is the identifier itself.
        position: Character offset where the error was detected.
        detail: Human-readable description of the problem.
    """

    def __init__(
        self,
        kind: ErrorKind,
        expression: str = '',
        position: int = 0,
        detail: str = '',
    ) -> None:
        """Initialize with error kind, source text, position, and detail."""
        self.kind = kind
        self.expression = expression
        self.position = position
        self.detail = detail or kind.value
        marker = ' ' * position + '^'
        super().__init__(f'SPDX parse error at position {position}: {self.detail}\n  {expression}\n  {marker}')

    def at(self, expression: str, offset: int) -> ParseError:
        """Return a copy of this error relocated into a larger *expression*.

        Identifier validators report offsets relative to the token they
        were given; the grammar shifts them by the token's start so the
        caret points into the full expression.
        """
        return ParseError(self.kind, expression, offset + self.position, self.detail)


class ScanErrorKind(str, enum.Enum):
    """Why a scan produced no result."""

    LICENSE_OR_COPYRIGHT_NOT_FOUND = 'LicenseOrCopyrightNotFound'
    INVALID_PATH = 'InvalidPath'


class ScanError(Exception):
    """Raised when license evidence for a file cannot be collected.

    Attributes:
        kind: The :class:`ScanErrorKind` of the failure.
        path: The path the scan was about.
    """

    def __init__(self, kind: ScanErrorKind, path: str, detail: str = '') -> None:
        """Initialize with error kind, offending path, and optional detail."""
        self.kind = kind
        self.path = path
        super().__init__(f'{kind.value}: {path}' + (f' ({detail})' if detail else ''))


class ConfigError(ValueError):
    """Raised when ``tplkit.toml`` or ``[tool.tplkit]`` is malformed."""
