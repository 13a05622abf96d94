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

r"""SPDX license expression grammar.

Grammar, as accepted by :func:`parse`::

    simple-expression     = license-id / license-id "+" / license-ref
    simple-with-exception = simple-expression "WITH" license-exception-id
    primary               = simple-with-exception
                          / simple-expression
                          / "(" compound-expression ")"
    and-level             = primary [ "AND" primary ]
    compound-expression   = and-level [ "OR" and-level ]

Operator precedence (tightest to loosest)::

    +  >  WITH  >  AND  >  OR

Operators are matched case-sensitively (``AND``, ``OR``, ``WITH``).
Each precedence level accepts **one** operator: a chain such as
``MIT AND ISC AND 0BSD`` is rejected with ``UNEXPECTED_TOKEN`` and must
be written ``(MIT AND ISC) AND 0BSD``.

Usage::

    from tplkit.spdx import parse, Spdx

    expr = parse('LGPL-2.1-only AND BSD-3-Clause OR MIT')
    # Or(And(LicenseId('LGPL-2.1-only'), LicenseId('BSD-3-Clause')), LicenseId('MIT'))

    with Spdx(b'GPL-3.0-only WITH LLVM-exception') as spdx:
        print(spdx.ast.exception.id)  # LLVM-exception
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tplkit.errors import ErrorKind, ParseError
from tplkit.logging import get_logger
from tplkit.spdx._combinators import (
    literal,
    mapped,
    maybe,
    one_of,
    one_token,
    replace_with,
    seq,
)
from tplkit.spdx._ids import (
    parse_license_exception_id,
    parse_license_id,
    parse_license_id_and_plus,
    parse_license_ref,
)
from tplkit.spdx._tokenizer import Tokenizer
from tplkit.spdx._types import And, CompoundExpression, Or, With

__all__ = [
    'Spdx',
    'compound_expression',
    'is_valid',
    'parse',
    'simple_expression',
    'simple_with_exception',
]

logger = get_logger(__name__)

_AND = 'AND'
_OR = 'OR'
_WITH = 'WITH'
_LPAREN = '('
_RPAREN = ')'


# ── Leaves ────────────────────────────────────────────────────────────

license_id = one_token(parse_license_id)
license_id_and_plus = one_token(parse_license_id_and_plus)
license_ref = one_token(parse_license_ref)
license_exception_id = one_token(parse_license_exception_id)

# The individual failures say nothing useful about *which* simple form
# the author meant, so they collapse into one aggregate kind.
simple_expression = one_of(
    license_id,
    license_id_and_plus,
    license_ref,
    on_failure=replace_with(ErrorKind.INVALID_SIMPLE_EXPRESSION, 'not a license-id, license-id+, or license-ref'),
)

simple_with_exception = mapped(
    seq(simple_expression, literal(_WITH), license_exception_id),
    lambda parts: With(license=parts[0], exception=parts[2]),
)


# ── Compound levels ───────────────────────────────────────────────────


def _binary(node_type: type[And] | type[Or]) -> Callable[[tuple[Any, ...]], CompoundExpression]:
    """Build ``node_type(lhs, rhs)`` from ``(lhs, (operator, rhs) | None)``."""

    def build(parts: tuple[Any, ...]) -> CompoundExpression:
        lhs, tail = parts
        if tail is None:
            return lhs
        return node_type(lhs, tail[1])

    return build


def compound_expression(tokens: Tokenizer) -> tuple[CompoundExpression, Tokenizer]:
    """Parse ``and-level [ "OR" and-level ]``."""
    return _or_level(tokens)


_parenthesized = mapped(
    seq(literal(_LPAREN), compound_expression, literal(_RPAREN)),
    lambda parts: parts[1],
)

_primary = one_of(
    one_of(simple_with_exception, simple_expression),
    _parenthesized,
)

_and_level = mapped(seq(_primary, maybe(seq(literal(_AND), _primary))), _binary(And))

_or_level = mapped(seq(_and_level, maybe(seq(literal(_OR), _and_level))), _binary(Or))


# ── Entry points ──────────────────────────────────────────────────────


def _check_depth(tokens: Tokenizer, max_depth: int) -> None:
    depth = 0
    for token in tokens.tokens():
        if token.text == _LPAREN:
            depth += 1
            if depth > max_depth:
                raise ParseError(
                    ErrorKind.UNEXPECTED_TOKEN,
                    tokens.source,
                    token.start,
                    f'parentheses nested deeper than {max_depth}',
                )
        elif token.text == _RPAREN:
            depth = max(depth - 1, 0)


def parse(text: str, *, max_depth: int | None = None) -> CompoundExpression:
    """Parse an SPDX license expression into an AST.

    Args:
        text: An SPDX license expression (e.g. ``"MIT OR Apache-2.0"``).
        max_depth: Reject expressions whose parentheses nest deeper
            than this. ``None`` means no limit; callers parsing
            untrusted input should set one.

    Returns:
        The root of the parsed AST.

    Raises:
        ParseError: If the expression is invalid. ``UNEXPECTED_TOKEN``
            is raised when input remains after a complete expression,
            and when nesting exceeds *max_depth* or the interpreter's
            recursion limit.

    Examples::

        >>> parse('MIT')
        LicenseId(id='MIT', or_later=False)

        >>> parse('((MIT))')
        LicenseId(id='MIT', or_later=False)
    """
    tokens = Tokenizer(text)
    try:
        if max_depth is not None:
            _check_depth(tokens, max_depth)
        try:
            expr, rest = compound_expression(tokens)
        except RecursionError:
            raise ParseError(ErrorKind.UNEXPECTED_TOKEN, text, 0, 'expression nested too deeply to parse') from None
        leftover = rest.peek()
        if leftover is not None:
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN,
                text,
                leftover.start,
                f'unexpected token after expression: {leftover.text!r}',
            )
    except ParseError as exc:
        logger.debug('spdx_parse_failed', expression=text, kind=exc.kind.value, position=exc.position)
        raise
    logger.debug('spdx_parsed', expression=text)
    return expr


def is_valid(text: str) -> bool:
    """Return ``True`` if *text* parses as an SPDX license expression."""
    try:
        parse(text)
    except ParseError:
        return False
    return True


class Spdx:
    """A parsed expression that owns its own copy of the source text.

    The constructor accepts ``str`` or any UTF-8 bytes-like object. A
    mutable buffer (``bytearray``, ``memoryview``) is copied before
    parsing, so changing or discarding it afterwards never affects
    :attr:`source` or :attr:`ast`.

    Release the instance with :meth:`release` (or use it as a context
    manager); :attr:`ast` and :attr:`source` are unavailable afterwards.

    Attributes:
        source: The expression text the AST was parsed from.
        ast: The root of the parsed AST.
    """

    __slots__ = ('_ast', '_source')

    def __init__(self, text: str | bytes | bytearray | memoryview, *, max_depth: int | None = None) -> None:
        """Copy *text* and parse the copy.

        Raises:
            ParseError: If the expression is invalid. Bytes that are not
                UTF-8 fail with ``ILLEGAL_CHARACTER``, positioned at the
                character before which decoding stopped.
        """
        if isinstance(text, str):
            source = text
        else:
            raw = bytes(text)
            try:
                source = raw.decode('utf-8')
            except UnicodeDecodeError as exc:
                raise ParseError(
                    ErrorKind.ILLEGAL_CHARACTER,
                    raw.decode('utf-8', errors='replace'),
                    len(raw[: exc.start].decode('utf-8')),
                    f'invalid UTF-8 byte at offset {exc.start}',
                ) from None
        self._source: str | None = source
        self._ast: CompoundExpression | None = parse(source, max_depth=max_depth)

    @property
    def source(self) -> str:
        """The owned copy of the expression text."""
        if self._source is None:
            msg = 'Spdx instance has been released'
            raise ValueError(msg)
        return self._source

    @property
    def ast(self) -> CompoundExpression:
        """The root of the parsed AST."""
        if self._ast is None:
            msg = 'Spdx instance has been released'
            raise ValueError(msg)
        return self._ast

    @property
    def released(self) -> bool:
        """``True`` once :meth:`release` has been called."""
        return self._ast is None

    def release(self) -> None:
        """Drop the AST and the source copy. Safe to call more than once."""
        self._ast = None
        self._source = None

    def __enter__(self) -> Spdx:
        """Return self for use in a ``with`` block."""
        return self

    def __exit__(self, *exc_info: object) -> None:
        """Release on leaving the ``with`` block."""
        self.release()

    def __repr__(self) -> str:
        if self._source is None:
            return 'Spdx(<released>)'
        return f'Spdx({self._source!r})'
