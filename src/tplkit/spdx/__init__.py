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

r"""SPDX license expression parsing.

Turns an expression string such as
``"(MIT AND LicenseRef-Foo) OR GPL-3.0-or-later WITH LLVM-exception"``
into a tree of frozen dataclasses, validating every identifier against
the bundled SPDX license and exception registries.

Key Concepts (ELI5)::

    ┌─────────────────────┬──────────────────────────────────────────────┐
    │ Concept             │ Plain-English                                │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ OR (disjunctive)    │ The user may pick either license.            │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ AND (conjunctive)   │ The user must comply with both licenses.     │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ WITH (exception)    │ A license plus an exception relaxing it,     │
    │                     │ e.g. Apache-2.0 WITH LLVM-exception.         │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ + (or-later)        │ "This version or any later version."         │
    ├─────────────────────┼──────────────────────────────────────────────┤
    │ LicenseRef-         │ A license that is not on the SPDX list,      │
    │                     │ defined by the document that uses it.        │
    └─────────────────────┴──────────────────────────────────────────────┘

Usage::

    from tplkit.spdx import And, LicenseId, Or, parse, render

    expr = parse('mit OR (Apache-2.0 AND BSD-3-Clause)')
    assert expr == Or(LicenseId('MIT'), And(LicenseId('Apache-2.0'), LicenseId('BSD-3-Clause')))
    assert render(expr) == 'MIT OR Apache-2.0 AND BSD-3-Clause'
"""

from tplkit.errors import ErrorKind, ParseError
from tplkit.spdx._grammar import Spdx, is_valid, parse
from tplkit.spdx._ids import (
    parse_idstring,
    parse_license_exception_id,
    parse_license_id,
    parse_license_ref,
)
from tplkit.spdx._registry import EXCEPTION_IDS, LICENSE_IDS, REGISTRY_VERSION
from tplkit.spdx._types import (
    And,
    CompoundExpression,
    IdString,
    LicenseExceptionId,
    LicenseId,
    LicenseRef,
    Or,
    SimpleExpression,
    With,
    exception_ids,
    license_ids,
    render,
)

__all__ = [
    'EXCEPTION_IDS',
    'LICENSE_IDS',
    'REGISTRY_VERSION',
    'And',
    'CompoundExpression',
    'ErrorKind',
    'IdString',
    'LicenseExceptionId',
    'LicenseId',
    'LicenseRef',
    'Or',
    'ParseError',
    'SimpleExpression',
    'Spdx',
    'With',
    'exception_ids',
    'is_valid',
    'license_ids',
    'parse',
    'parse_idstring',
    'parse_license_exception_id',
    'parse_license_id',
    'parse_license_ref',
    'render',
]
