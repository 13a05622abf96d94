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

"""Identifier validation and registry lookup.

Each function here validates the text of a *single* token and either
returns a typed value or raises :class:`~tplkit.errors.ParseError`
with a position relative to that text. The grammar relocates those
positions into the full expression.

Grammar covered (SPDX 2.3 Annex D)::

    idstring             = 1*(ALPHA / DIGIT / "-" / ".")
    license-id           = <short form license identifier>
    license-exception-id = <short form license exception identifier>
    license-ref          = ["DocumentRef-"idstring":"]"LicenseRef-"idstring

Registry lookups are ASCII case-insensitive and return the registry's
canonical spelling::

    >>> parse_license_id('gpl-3.0-or-LaTER')
    LicenseId(id='GPL-3.0-or-later', or_later=False)
"""

from __future__ import annotations

from collections.abc import Iterable

from tplkit.errors import ErrorKind, ParseError
from tplkit.spdx._registry import EXCEPTION_IDS, LICENSE_IDS
from tplkit.spdx._types import (
    DOCUMENT_REF_PREFIX,
    LICENSE_REF_PREFIX,
    IdString,
    LicenseExceptionId,
    LicenseId,
    LicenseRef,
)

__all__ = [
    'find_exception_id',
    'find_license_id',
    'parse_idstring',
    'parse_license_exception_id',
    'parse_license_id',
    'parse_license_id_and_plus',
    'parse_license_ref',
]

_IDSTRING_CHARS = frozenset('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-.')


def _casefold_index(ids: Iterable[str]) -> dict[str, str]:
    """Map lowercased IDs to their canonical spelling; the first entry wins."""
    index: dict[str, str] = {}
    for canonical in ids:
        index.setdefault(canonical.lower(), canonical)
    return index


# Built once at import; the registries are immutable.
_LICENSE_INDEX = _casefold_index(LICENSE_IDS)
_EXCEPTION_INDEX = _casefold_index(EXCEPTION_IDS)


def find_license_id(text: str) -> str | None:
    """Return the canonical license ID matching *text*, or ``None``."""
    # Non-ASCII input never matches: str.lower() would fold characters
    # like U+212A KELVIN SIGN onto ASCII letters.
    if not text.isascii():
        return None
    return _LICENSE_INDEX.get(text.lower())


def find_exception_id(text: str) -> str | None:
    """Return the canonical exception ID matching *text*, or ``None``."""
    if not text.isascii():
        return None
    return _EXCEPTION_INDEX.get(text.lower())


def parse_idstring(text: str) -> IdString:
    """Validate *text* as an SPDX ``idstring``.

    Raises:
        ParseError: ``LESS_THAN_MINIMUM_CHARACTER_LENGTH`` for empty text,
            ``ILLEGAL_CHARACTER`` at the first character outside
            ``[A-Za-z0-9.-]``.
    """
    if not text:
        raise ParseError(ErrorKind.LESS_THAN_MINIMUM_CHARACTER_LENGTH, text, 0, 'idstring must not be empty')
    for pos, char in enumerate(text):
        if char not in _IDSTRING_CHARS:
            raise ParseError(ErrorKind.ILLEGAL_CHARACTER, text, pos, f'illegal character {char!r} in idstring')
    return IdString(text)


def parse_license_ref(text: str) -> LicenseRef:
    """Parse ``["DocumentRef-" idstring ":"] "LicenseRef-" idstring``.

    Raises:
        ParseError: ``MISSING_COLON_AFTER_DOCUMENT_REF``,
            ``MISSING_LICENSE_REF_PREFIX``, or any idstring error.
    """
    cursor = 0
    document_ref: IdString | None = None

    if text.startswith(DOCUMENT_REF_PREFIX):
        cursor = len(DOCUMENT_REF_PREFIX)
        colon = text.find(':', cursor)
        if colon < 0:
            raise ParseError(
                ErrorKind.MISSING_COLON_AFTER_DOCUMENT_REF,
                text,
                len(text),
                'expected ":" after DocumentRef idstring',
            )
        try:
            document_ref = parse_idstring(text[cursor:colon])
        except ParseError as exc:
            raise exc.at(text, cursor) from None
        cursor = colon + 1

    if not text.startswith(LICENSE_REF_PREFIX, cursor):
        raise ParseError(
            ErrorKind.MISSING_LICENSE_REF_PREFIX,
            text,
            cursor,
            f'expected {LICENSE_REF_PREFIX!r}',
        )
    cursor += len(LICENSE_REF_PREFIX)

    try:
        license_ref = parse_idstring(text[cursor:])
    except ParseError as exc:
        raise exc.at(text, cursor) from None

    return LicenseRef(license_ref=license_ref, document_ref=document_ref)


def parse_license_id(text: str) -> LicenseId:
    """Look *text* up in the license registry.

    Raises:
        ParseError: ``UNKNOWN_LICENSE_ID`` if no registry entry matches.
    """
    canonical = find_license_id(text)
    if canonical is None:
        raise ParseError(ErrorKind.UNKNOWN_LICENSE_ID, text, 0, f'unknown license identifier {text!r}')
    return LicenseId(canonical)


def parse_license_id_and_plus(text: str) -> LicenseId:
    """Parse ``license-id "+"`` into an or-later :class:`LicenseId`."""
    if not text.endswith('+'):
        raise ParseError(ErrorKind.UNKNOWN_LICENSE_ID, text, len(text), 'expected "+" suffix')
    return LicenseId(parse_license_id(text[:-1]).id, or_later=True)


def parse_license_exception_id(text: str) -> LicenseExceptionId:
    """Look *text* up in the exception registry.

    Raises:
        ParseError: ``UNKNOWN_LICENSE_EXCEPTION_ID`` if no registry entry matches.
    """
    canonical = find_exception_id(text)
    if canonical is None:
        raise ParseError(
            ErrorKind.UNKNOWN_LICENSE_EXCEPTION_ID,
            text,
            0,
            f'unknown license exception identifier {text!r}',
        )
    return LicenseExceptionId(canonical)
