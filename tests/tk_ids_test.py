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

"""Tests for SPDX identifier validation and registry lookup."""

from __future__ import annotations

import pytest

from tplkit.errors import ErrorKind, ParseError
from tplkit.spdx import (
    EXCEPTION_IDS,
    LICENSE_IDS,
    REGISTRY_VERSION,
    IdString,
    LicenseExceptionId,
    LicenseId,
    LicenseRef,
    parse_idstring,
    parse_license_exception_id,
    parse_license_id,
    parse_license_ref,
)
from tplkit.spdx._ids import find_exception_id, find_license_id, parse_license_id_and_plus


class TestRegistry:
    """Tests for the bundled registries."""

    def test_version(self) -> None:
        """Test registry version is recorded."""
        assert REGISTRY_VERSION == '3.23'

    def test_well_known_ids_present(self) -> None:
        """Test well known ids present."""
        for license_id in ('MIT', 'Apache-2.0', 'GPL-3.0-or-later', '0BSD', 'GPL-2.0+'):
            assert license_id in LICENSE_IDS
        for exception_id in ('LLVM-exception', 'Classpath-exception-2.0'):
            assert exception_id in EXCEPTION_IDS

    def test_no_case_insensitive_duplicates(self) -> None:
        """Test no case insensitive duplicates."""
        assert len({i.lower() for i in LICENSE_IDS}) == len(LICENSE_IDS)
        assert len({i.lower() for i in EXCEPTION_IDS}) == len(EXCEPTION_IDS)

    def test_ids_are_idstrings(self) -> None:
        """Test every id is a valid idstring, apart from the deprecated + forms."""
        for license_id in LICENSE_IDS:
            parse_idstring(license_id.rstrip('+'))
        for exception_id in EXCEPTION_IDS:
            parse_idstring(exception_id)


class TestFind:
    """Tests for case-insensitive lookup."""

    def test_canonical_spelling(self) -> None:
        """Test canonical spelling is returned."""
        assert find_license_id('apache-2.0') == 'Apache-2.0'
        assert find_license_id('GPL-3.0-OR-LATER') == 'GPL-3.0-or-later'
        assert find_exception_id('llvm-EXCEPTION') == 'LLVM-exception'

    def test_unknown(self) -> None:
        """Test unknown ids."""
        assert find_license_id('NotALicense') is None
        assert find_exception_id('MIT') is None
        assert find_license_id('') is None

    def test_non_ascii_never_matches(self) -> None:
        """KELVIN SIGN lowercases to 'k' but is not an ASCII K."""
        assert find_license_id('\u212aazlib') is None
        assert find_license_id('Kazlib') == 'Kazlib'


class TestParseIdstring:
    """Tests for parse_idstring()."""

    def test_valid(self) -> None:
        """Test valid idstring."""
        assert parse_idstring('My-License.1') == IdString('My-License.1')

    def test_empty(self) -> None:
        """Test empty idstring."""
        with pytest.raises(ParseError) as exc:
            parse_idstring('')
        assert exc.value.kind is ErrorKind.LESS_THAN_MINIMUM_CHARACTER_LENGTH
        assert exc.value.position == 0

    @pytest.mark.parametrize(
        ('text', 'position'),
        [
            ('a_b', 1),
            ('ab+', 2),
            ('a:b', 1),
            ('é', 0),
            ('ab cd', 2),
        ],
    )
    def test_illegal_character(self, text: str, position: int) -> None:
        """Test illegal character position."""
        with pytest.raises(ParseError) as exc:
            parse_idstring(text)
        assert exc.value.kind is ErrorKind.ILLEGAL_CHARACTER
        assert exc.value.position == position


class TestParseLicenseRef:
    """Tests for parse_license_ref()."""

    def test_plain(self) -> None:
        """Test plain license ref."""
        assert parse_license_ref('LicenseRef-Foo') == LicenseRef(IdString('Foo'))

    def test_with_document_ref(self) -> None:
        """Test license ref with document ref."""
        assert parse_license_ref('DocumentRef-spdx-tool-1.2:LicenseRef-MIT-Style-2') == LicenseRef(
            license_ref=IdString('MIT-Style-2'),
            document_ref=IdString('spdx-tool-1.2'),
        )

    def test_missing_colon(self) -> None:
        """Test missing colon after DocumentRef."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('DocumentRef-foo')
        assert exc.value.kind is ErrorKind.MISSING_COLON_AFTER_DOCUMENT_REF
        assert exc.value.position == len('DocumentRef-foo')

    def test_missing_prefix(self) -> None:
        """Test missing LicenseRef prefix."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('Foo')
        assert exc.value.kind is ErrorKind.MISSING_LICENSE_REF_PREFIX
        assert exc.value.position == 0

    def test_missing_prefix_after_document_ref(self) -> None:
        """Test missing prefix after DocumentRef."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('DocumentRef-foo:Bar')
        assert exc.value.kind is ErrorKind.MISSING_LICENSE_REF_PREFIX
        assert exc.value.position == len('DocumentRef-foo:')

    def test_prefix_is_case_sensitive(self) -> None:
        """Test prefix is case sensitive."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('licenseref-Foo')
        assert exc.value.kind is ErrorKind.MISSING_LICENSE_REF_PREFIX

    def test_empty_document_ref(self) -> None:
        """Test empty DocumentRef idstring."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('DocumentRef-:LicenseRef-x')
        assert exc.value.kind is ErrorKind.LESS_THAN_MINIMUM_CHARACTER_LENGTH
        assert exc.value.position == len('DocumentRef-')

    def test_empty_license_ref(self) -> None:
        """Test empty LicenseRef idstring."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('LicenseRef-')
        assert exc.value.kind is ErrorKind.LESS_THAN_MINIMUM_CHARACTER_LENGTH
        assert exc.value.position == len('LicenseRef-')

    def test_illegal_character_relocated(self) -> None:
        """Test illegal character position is relative to the whole ref."""
        with pytest.raises(ParseError) as exc:
            parse_license_ref('LicenseRef-a_b')
        assert exc.value.kind is ErrorKind.ILLEGAL_CHARACTER
        assert exc.value.position == len('LicenseRef-a')
        assert exc.value.expression == 'LicenseRef-a_b'


class TestParseLicenseId:
    """Tests for registry-backed identifiers."""

    def test_license_id(self) -> None:
        """Test license id canonicalized."""
        assert parse_license_id('mit') == LicenseId('MIT')

    def test_unknown_license_id(self) -> None:
        """Test unknown license id."""
        with pytest.raises(ParseError) as exc:
            parse_license_id('NotALicense')
        assert exc.value.kind is ErrorKind.UNKNOWN_LICENSE_ID

    def test_license_id_and_plus(self) -> None:
        """Test license id with plus suffix."""
        assert parse_license_id_and_plus('gpl-2.0-only+') == LicenseId('GPL-2.0-only', or_later=True)

    def test_license_id_and_plus_requires_plus(self) -> None:
        """Test license id and plus requires plus."""
        with pytest.raises(ParseError) as exc:
            parse_license_id_and_plus('MIT')
        assert exc.value.kind is ErrorKind.UNKNOWN_LICENSE_ID

    def test_exception_id(self) -> None:
        """Test exception id canonicalized."""
        assert parse_license_exception_id('classpath-exception-2.0') == LicenseExceptionId('Classpath-exception-2.0')

    def test_unknown_exception_id(self) -> None:
        """Test license id is not an exception id."""
        with pytest.raises(ParseError) as exc:
            parse_license_exception_id('MIT')
        assert exc.value.kind is ErrorKind.UNKNOWN_LICENSE_EXCEPTION_ID
