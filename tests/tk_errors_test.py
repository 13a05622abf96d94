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

"""Tests for tplkit.errors."""

from __future__ import annotations

from tplkit.errors import ConfigError, ErrorKind, ParseError, ScanError, ScanErrorKind


class TestParseError:
    """Tests for ParseError."""

    def test_message(self) -> None:
        """Test message with caret."""
        exc = ParseError(ErrorKind.UNEXPECTED_TOKEN, 'MIT X', 4, 'boom')
        assert str(exc) == 'SPDX parse error at position 4: boom\n  MIT X\n      ^'

    def test_default_detail(self) -> None:
        """Test detail defaults to the kind name."""
        assert ParseError(ErrorKind.END_OF_INPUT).detail == 'EndOfInput'

    def test_at_relocates(self) -> None:
        """Test at() shifts the position into a larger expression."""
        inner = ParseError(ErrorKind.ILLEGAL_CHARACTER, 'a_b', 1, 'illegal')
        outer = inner.at('MIT OR a_b', 7)
        assert outer.kind is ErrorKind.ILLEGAL_CHARACTER
        assert outer.expression == 'MIT OR a_b'
        assert outer.position == 8
        assert outer.detail == 'illegal'
        assert inner.position == 1

    def test_kind_values(self) -> None:
        """Test kinds carry their reporting names."""
        assert ErrorKind('UnknownLicenseId') is ErrorKind.UNKNOWN_LICENSE_ID
        assert len(ErrorKind) == 9


class TestOtherErrors:
    """Tests for ScanError and ConfigError."""

    def test_scan_error(self) -> None:
        """Test ScanError message."""
        exc = ScanError(ScanErrorKind.INVALID_PATH, '/x', 'not a directory')
        assert exc.kind is ScanErrorKind.INVALID_PATH
        assert exc.path == '/x'
        assert str(exc) == 'InvalidPath: /x (not a directory)'

    def test_scan_error_without_detail(self) -> None:
        """Test ScanError without detail."""
        assert str(ScanError(ScanErrorKind.LICENSE_OR_COPYRIGHT_NOT_FOUND, 'pkg')) == 'LicenseOrCopyrightNotFound: pkg'

    def test_config_error_is_value_error(self) -> None:
        """Test ConfigError is a ValueError."""
        assert issubclass(ConfigError, ValueError)
