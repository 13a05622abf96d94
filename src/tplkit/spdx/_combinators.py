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

"""Parser combinators over an immutable :class:`Tokenizer`.

A parser is any callable ``(tokenizer) -> (value, rest)`` that raises
:class:`~tplkit.errors.ParseError` on failure. Because tokenizers are
immutable, a failed parser leaves its caller's tokenizer exactly where
it was, and ordered choice needs no save/restore bookkeeping.

Building blocks::

    ┌───────────────────┬──────────────────────────────────────────────┐
    │ Combinator        │ Behaviour                                    │
    ├───────────────────┼──────────────────────────────────────────────┤
    │ literal('AND')    │ Next token must equal the text exactly.      │
    │ one_token(fn)     │ Consume one token, validate its text.        │
    │ seq(p1, p2, ...)  │ All parts in order; first failure wins.      │
    │ try_parse(p, t)   │ Run p; return the error instead of raising.  │
    │ one_of(p1, ...)   │ First success; failures combined by policy.  │
    │ maybe(p)          │ Value or ``None``; never fails.              │
    │ mapped(p, fn)     │ Transform the value of a successful parse.   │
    └───────────────────┴──────────────────────────────────────────────┘

Failure policies decide which error :func:`one_of` reports when every
alternative fails. :func:`last_error` keeps the last alternative's
error; :func:`replace_with` reports one aggregate kind instead.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from tplkit.errors import ErrorKind, ParseError
from tplkit.spdx._tokenizer import Tokenizer

__all__ = [
    'FailurePolicy',
    'Parser',
    'last_error',
    'literal',
    'mapped',
    'maybe',
    'one_of',
    'one_token',
    'replace_with',
    'seq',
    'try_parse',
]

T = TypeVar('T')
U = TypeVar('U')

Parser = Callable[[Tokenizer], tuple[T, Tokenizer]]

# Receives every alternative's error (in order) and the tokenizer the
# choice started from; returns the error to raise.
FailurePolicy = Callable[[Sequence[ParseError], Tokenizer], ParseError]


def end_of_input(tokens: Tokenizer) -> ParseError:
    """Return the error for a token required past the end of input."""
    return ParseError(ErrorKind.END_OF_INPUT, tokens.source, len(tokens.source), 'unexpected end of input')


def literal(text: str) -> Parser[str]:
    """Match a token equal to *text* (case-sensitive)."""

    def parse(tokens: Tokenizer) -> tuple[str, Tokenizer]:
        step = tokens.next()
        if step is None:
            raise end_of_input(tokens)
        token, rest = step
        if token.text != text:
            raise ParseError(
                ErrorKind.UNEXPECTED_TOKEN,
                tokens.source,
                token.start,
                f'expected {text!r}, got {token.text!r}',
            )
        return token.text, rest

    return parse


def one_token(validate: Callable[[str], T]) -> Parser[T]:
    """Consume one token and pass its text through *validate*.

    Errors raised by *validate* are relocated from token-relative to
    expression-relative positions.
    """

    def parse(tokens: Tokenizer) -> tuple[T, Tokenizer]:
        step = tokens.next()
        if step is None:
            raise end_of_input(tokens)
        token, rest = step
        try:
            value = validate(token.text)
        except ParseError as exc:
            raise exc.at(tokens.source, token.start) from None
        return value, rest

    return parse


def seq(*parts: Parser[Any]) -> Parser[tuple[Any, ...]]:
    """Run *parts* in order and collect their values into a tuple."""

    def parse(tokens: Tokenizer) -> tuple[tuple[Any, ...], Tokenizer]:
        values: list[Any] = []
        rest = tokens
        for part in parts:
            value, rest = part(rest)
            values.append(value)
        return tuple(values), rest

    return parse


def try_parse(parser: Parser[T], tokens: Tokenizer) -> tuple[T, Tokenizer] | ParseError:
    """Run *parser* and return its error instead of raising it.

    The caller's *tokens* are unaffected either way.
    """
    try:
        return parser(tokens)
    except ParseError as exc:
        return exc


def last_error(errors: Sequence[ParseError], tokens: Tokenizer) -> ParseError:
    """Failure policy: report the last alternative's error."""
    return errors[-1]


def replace_with(kind: ErrorKind, detail: str = '') -> FailurePolicy:
    """Failure policy: report a single *kind* at the start of the choice.

    If every alternative failed only because the input was exhausted,
    the end-of-input error is kept.
    """

    def policy(errors: Sequence[ParseError], tokens: Tokenizer) -> ParseError:
        if errors and all(e.kind is ErrorKind.END_OF_INPUT for e in errors):
            return errors[-1]
        token = tokens.peek()
        position = token.start if token is not None else len(tokens.source)
        got = f': {token.text!r}' if token is not None else ''
        return ParseError(kind, tokens.source, position, (detail or kind.value) + got)

    return policy


def one_of(*alternatives: Parser[Any], on_failure: FailurePolicy = last_error) -> Parser[Any]:
    """Try *alternatives* in order and return the first success."""

    def parse(tokens: Tokenizer) -> tuple[Any, Tokenizer]:
        errors: list[ParseError] = []
        for alternative in alternatives:
            result = try_parse(alternative, tokens)
            if not isinstance(result, ParseError):
                return result
            errors.append(result)
        raise on_failure(errors, tokens)

    return parse


def maybe(parser: Parser[T]) -> Parser[T | None]:
    """Return the parsed value, or ``None`` without consuming input on failure."""

    def parse(tokens: Tokenizer) -> tuple[T | None, Tokenizer]:
        result = try_parse(parser, tokens)
        if isinstance(result, ParseError):
            return None, tokens
        return result

    return parse


def mapped(parser: Parser[T], transform: Callable[[T], U]) -> Parser[U]:
    """Apply *transform* to the value of a successful parse."""

    def parse(tokens: Tokenizer) -> tuple[U, Tokenizer]:
        value, rest = parser(tokens)
        return transform(value), rest

    return parse
