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

"""AST node types for parsed SPDX license expressions.

This module has **zero** imports from other ``tplkit`` modules. Every
node is a frozen dataclass; ``And``/``Or`` embed their children
directly, so an expression is a strict tree that is released as soon
as the last reference to its root goes away.

Shape of the tree::

    CompoundExpression
    ├── LicenseId            MIT, GPL-2.0-only+  (or_later=True)
    ├── LicenseRef           DocumentRef-X:LicenseRef-Y
    ├── With                 <simple> WITH <exception>
    ├── And(left, right)     <compound> AND <compound>
    └── Or(left, right)      <compound> OR <compound>
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    'And',
    'CompoundExpression',
    'IdString',
    'LicenseExceptionId',
    'LicenseId',
    'LicenseRef',
    'Or',
    'SimpleExpression',
    'With',
    'exception_ids',
    'license_ids',
    'render',
]

DOCUMENT_REF_PREFIX = 'DocumentRef-'
LICENSE_REF_PREFIX = 'LicenseRef-'


@dataclass(frozen=True)
class IdString:
    """A validated identifier made of ``[A-Za-z0-9.-]``, at least one character long.

    Attributes:
        value: The identifier text as it appeared in the source.
    """

    value: str

    def __str__(self) -> str:
        """Return the identifier text."""
        return self.value


@dataclass(frozen=True)
class LicenseId:
    """A license identifier found in the SPDX license registry.

    Attributes:
        id: The registry's canonical spelling (e.g. ``"GPL-3.0-or-later"``),
            regardless of how the source text cased it.
        or_later: ``True`` if the ``+`` suffix was present.
    """

    id: str
    or_later: bool = False

    def __str__(self) -> str:
        """Return the identifier, with ``+`` suffix if or-later."""
        return f'{self.id}+' if self.or_later else self.id


@dataclass(frozen=True)
class LicenseExceptionId:
    """An exception identifier found in the SPDX exception registry.

    Attributes:
        id: The registry's canonical spelling (e.g. ``"LLVM-exception"``).
    """

    id: str

    def __str__(self) -> str:
        """Return the exception identifier."""
        return self.id


@dataclass(frozen=True)
class LicenseRef:
    """A user-defined license reference.

    Attributes:
        license_ref: The idstring following ``LicenseRef-``.
        document_ref: The idstring following ``DocumentRef-``, if the
            reference was scoped to another SPDX document.
    """

    license_ref: IdString
    document_ref: IdString | None = None

    def __str__(self) -> str:
        """Return ``[DocumentRef-X:]LicenseRef-Y``."""
        ref = f'{LICENSE_REF_PREFIX}{self.license_ref}'
        if self.document_ref is not None:
            return f'{DOCUMENT_REF_PREFIX}{self.document_ref}:{ref}'
        return ref


@dataclass(frozen=True)
class With:
    """A simple expression paired with a license exception.

    Attributes:
        license: The base license.
        exception: The exception granted on top of it.
    """

    license: SimpleExpression
    exception: LicenseExceptionId

    def __str__(self) -> str:
        """Return ``license WITH exception``."""
        return f'{self.license} WITH {self.exception}'


@dataclass(frozen=True)
class And:
    """Conjunction: both sides apply.

    Attributes:
        left: Left operand.
        right: Right operand.
    """

    left: CompoundExpression
    right: CompoundExpression

    def __str__(self) -> str:
        """Return ``left AND right``, parenthesizing nested conjunctions and disjunctions."""
        return f'{_group(self.left, (And, Or))} AND {_group(self.right, (And, Or))}'


@dataclass(frozen=True)
class Or:
    """Disjunction: either side may be chosen.

    Attributes:
        left: Left operand.
        right: Right operand.
    """

    left: CompoundExpression
    right: CompoundExpression

    def __str__(self) -> str:
        """Return ``left OR right``, parenthesizing nested disjunctions."""
        return f'{_group(self.left, (Or,))} OR {_group(self.right, (Or,))}'


SimpleExpression = LicenseId | LicenseRef

CompoundExpression = LicenseId | LicenseRef | With | And | Or


def _group(node: CompoundExpression, kinds: tuple[type, ...]) -> str:
    # The grammar accepts one operator per precedence level, so any
    # same-level child has to be spelled with explicit parentheses.
    if isinstance(node, kinds):
        return f'({node})'
    return str(node)


def render(node: CompoundExpression) -> str:
    """Return the canonical text of an expression.

    The output uses single spaces, canonical identifier casing, and just
    enough parentheses to re-parse into an equal tree::

        >>> render(And(And(LicenseId('MIT'), LicenseId('ISC')), LicenseId('0BSD')))
        '(MIT AND ISC) AND 0BSD'
    """
    return str(node)


def license_ids(node: CompoundExpression) -> set[str]:
    """Collect the license identifiers referenced by an expression.

    Registry IDs are returned in canonical spelling without the ``+``
    suffix; license refs are returned in full
    (``DocumentRef-X:LicenseRef-Y``). Exceptions are not included.

    Examples::

        >>> license_ids(Or(LicenseId('MIT'), LicenseId('GPL-2.0-only', or_later=True)))
        {'MIT', 'GPL-2.0-only'}
    """
    ids: set[str] = set()
    _collect(node, ids, exceptions=False)
    return ids


def exception_ids(node: CompoundExpression) -> set[str]:
    """Collect the license exception identifiers referenced by an expression."""
    ids: set[str] = set()
    _collect(node, ids, exceptions=True)
    return ids


def _collect(node: CompoundExpression, acc: set[str], *, exceptions: bool) -> None:
    """Recursively collect IDs into *acc*."""
    if isinstance(node, LicenseId):
        if not exceptions:
            acc.add(node.id)
    elif isinstance(node, LicenseRef):
        if not exceptions:
            acc.add(str(node))
    elif isinstance(node, With):
        if exceptions:
            acc.add(node.exception.id)
        else:
            _collect(node.license, acc, exceptions=exceptions)
    else:
        _collect(node.left, acc, exceptions=exceptions)
        _collect(node.right, acc, exceptions=exceptions)
