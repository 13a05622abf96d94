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

"""Whitespace-delimited tokenizer for SPDX expressions.

A :class:`Tokenizer` is an immutable cursor over the source text.
Reading a token never mutates it; :meth:`Tokenizer.next` hands back a
*new* tokenizer positioned after the token. Backtracking is therefore
just "keep using the old tokenizer".

Token rules:
    - Spaces between tokens are skipped.
    - ``(`` and ``)`` are always single-character tokens.
    - Anything else is the longest run of characters up to the next
      space or parenthesis.

    >>> [t.text for t in Tokenizer('(MIT OR Apache-2.0)').tokens()]
    ['(', 'MIT', 'OR', 'Apache-2.0', ')']
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

__all__ = [
    'Token',
    'Tokenizer',
]

_SPACE = ' '
_PARENS = frozenset('()')
_DELIMITERS = frozenset(' ()')


@dataclass(frozen=True)
class Token:
    """A token and where it starts in the source text.

    Attributes:
        text: The token text.
        start: Offset of the first character of the token.
    """

    text: str
    start: int

    @property
    def end(self) -> int:
        """Offset one past the last character of the token."""
        return self.start + len(self.text)


@dataclass(frozen=True)
class Tokenizer:
    """Immutable cursor over an SPDX expression.

    Attributes:
        source: The full expression text.
        cursor: Offset at which the next token search starts.
    """

    source: str
    cursor: int = 0

    def peek(self) -> Token | None:
        """Return the next token without advancing, or ``None`` at end of input."""
        source = self.source
        end = len(source)
        start = self.cursor
        while start < end and source[start] == _SPACE:
            start += 1
        if start >= end:
            return None
        if source[start] in _PARENS:
            return Token(source[start], start)
        stop = start
        while stop < end and source[stop] not in _DELIMITERS:
            stop += 1
        return Token(source[start:stop], start)

    def next(self) -> tuple[Token, Tokenizer] | None:
        """Return the next token and a tokenizer positioned after it.

        Returns ``None`` at end of input.
        """
        token = self.peek()
        if token is None:
            return None
        return token, Tokenizer(self.source, token.end)

    def at_end(self) -> bool:
        """Return ``True`` if no token remains."""
        return self.peek() is None

    def tokens(self) -> Iterator[Token]:
        """Yield every remaining token in order."""
        tokenizer = self
        step = tokenizer.next()
        while step is not None:
            token, tokenizer = step
            yield token
            step = tokenizer.next()
