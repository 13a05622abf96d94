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

r"""Output data model for scan results.

`Pydantic <https://docs.pydantic.dev/>`_ models for the JSON document
that ``tplkit scan`` prints. Python attributes are snake_case; the JSON
uses camelCase and omits unset optional fields.

License expressions are encoded as nested objects::

    MIT                       {"id": "MIT", "includes": [...]}
    GPL-2.0-only+             {"id": "GPL-2.0-only", "includesLaterVersions": true, ...}
    DocumentRef-D:LicenseRef-R {"licenseRef": "R", "documentRef": "D", "includes": [...]}
    <simple> WITH <exc>       {"conjunction": "WITH", "license": <simple>,
                               "exceptionId": <exc>, "exceptionIncludes": [...]}
    <a> AND <b>, <a> OR <b>   {"conjunction": "AND" | "OR", "left": ..., "right": ...}

:func:`expression_to_json` and :func:`expression_from_json` convert
between this encoding and the :mod:`tplkit.spdx` AST without loss.

Usage::

    from tplkit.tpl import spdx_license

    lic = spdx_license('MIT OR LicenseRef-Foo')
    print(lic.to_json())
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag
from pydantic.alias_generators import to_camel

from tplkit.spdx import (
    And,
    CompoundExpression,
    LicenseId,
    LicenseRef,
    Or,
    SimpleExpression,
    With,
    parse,
    parse_idstring,
    parse_license_exception_id,
    parse_license_id,
)

__all__ = [
    'ArbitraryLicense',
    'Copyright',
    'CopyrightHolder',
    'FileRef',
    'IncludeItem',
    'InlineText',
    'License',
    'LicenseGroup',
    'Project',
    'Spdx23Compound',
    'Spdx23Conjunction',
    'Spdx23License',
    'Spdx23LicenseRef',
    'Spdx23Simple',
    'Spdx23WithException',
    'SpdxLicense',
    'Tpl',
    'expression_from_json',
    'expression_to_json',
    'spdx_license',
]


class _Model(BaseModel):
    """Base model: camelCase aliases, strict about unknown fields."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='forbid',
    )

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialize with camelCase keys, omitting ``None`` fields."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible dict form of :meth:`to_json`."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')


# ── Include items ────────────────────────────────────────────────────


class FileRef(_Model):
    """A file, relative to the scan root."""

    path: str


class InlineText(_Model):
    """Text included verbatim."""

    text: str


def _include_tag(value: Any) -> str:  # noqa: ANN401
    if isinstance(value, dict):
        return 'file' if 'path' in value else 'text'
    return 'file' if isinstance(value, FileRef) else 'text'


IncludeItem = Annotated[
    Union[Annotated[FileRef, Tag('file')], Annotated[InlineText, Tag('text')]],
    Discriminator(_include_tag),
]


# ── SPDX expression encoding ─────────────────────────────────────────


class Spdx23License(_Model):
    """A registry license, optionally "or later"."""

    id: str
    includes_later_versions: bool | None = None
    includes: list[IncludeItem] = Field(default_factory=list)


class Spdx23LicenseRef(_Model):
    """A ``LicenseRef-`` license, optionally scoped by a ``DocumentRef-``."""

    license_ref: str
    document_ref: str | None = None
    includes: list[IncludeItem] = Field(default_factory=list)


def _simple_tag(value: Any) -> str:  # noqa: ANN401
    if isinstance(value, dict):
        return 'licenseRef' if 'licenseRef' in value or 'license_ref' in value else 'license'
    return 'licenseRef' if isinstance(value, Spdx23LicenseRef) else 'license'


Spdx23Simple = Annotated[
    Union[Annotated[Spdx23License, Tag('license')], Annotated[Spdx23LicenseRef, Tag('licenseRef')]],
    Discriminator(_simple_tag),
]


class Spdx23WithException(_Model):
    """A simple license with an exception."""

    conjunction: Literal['WITH'] = 'WITH'
    license: Spdx23Simple
    exception_id: str
    exception_includes: list[IncludeItem] = Field(default_factory=list)


class Spdx23Conjunction(_Model):
    """Two expressions joined by ``AND`` or ``OR``."""

    conjunction: Literal['AND', 'OR']
    left: Spdx23Compound
    right: Spdx23Compound


def _compound_tag(value: Any) -> str | None:  # noqa: ANN401
    if isinstance(value, dict):
        conjunction = value.get('conjunction')
        if conjunction is None:
            return _simple_tag(value)
        if conjunction == 'WITH':
            return 'with'
        if conjunction in ('AND', 'OR'):
            return 'conjunction'
        return None
    if isinstance(value, Spdx23WithException):
        return 'with'
    if isinstance(value, Spdx23Conjunction):
        return 'conjunction'
    return _simple_tag(value)


Spdx23Compound = Annotated[
    Union[
        Annotated[Spdx23License, Tag('license')],
        Annotated[Spdx23LicenseRef, Tag('licenseRef')],
        Annotated[Spdx23WithException, Tag('with')],
        Annotated[Spdx23Conjunction, Tag('conjunction')],
    ],
    Discriminator(_compound_tag),
]

Spdx23Conjunction.model_rebuild()


# ── License groups and the document ──────────────────────────────────


class SpdxLicense(_Model):
    """A license described by an SPDX expression."""

    type: Literal['spdx'] = 'spdx'
    raw_id: str
    expression: Spdx23Compound
    includes: list[IncludeItem] = Field(default_factory=list)


class ArbitraryLicense(_Model):
    """A license known only by the files or text that state it."""

    type: Literal['arbitrary'] = 'arbitrary'
    includes: list[IncludeItem]


License = Annotated[Union[SpdxLicense, ArbitraryLicense], Field(discriminator='type')]


class CopyrightHolder(_Model):
    """A person or organization holding a copyright."""

    name: str
    email: str | None = None


class Copyright(_Model):
    """A copyright statement."""

    text: str
    year: int | None = Field(default=None, ge=0)
    holders: list[CopyrightHolder] | None = None


class Project(_Model):
    """The package the scanned files belong to."""

    id: str
    display_name: str
    description: str | None = None


class LicenseGroup(_Model):
    """Files sharing one license."""

    files: list[FileRef]
    license: License


class Tpl(_Model):
    """Third-party license listing for a project."""

    project: Project
    licenses: list[LicenseGroup] = Field(default_factory=list)
    copyrights: list[Copyright] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


# ── AST <-> JSON ─────────────────────────────────────────────────────

Includes = Mapping[str, Sequence[IncludeItem]]


def _simple_to_json(node: SimpleExpression, includes: Includes) -> Spdx23License | Spdx23LicenseRef:
    if isinstance(node, LicenseId):
        return Spdx23License(
            id=node.id,
            includes_later_versions=True if node.or_later else None,
            includes=list(includes.get(node.id, ())),
        )
    return Spdx23LicenseRef(
        license_ref=node.license_ref.value,
        document_ref=node.document_ref.value if node.document_ref is not None else None,
        includes=list(includes.get(str(node), ())),
    )


def expression_to_json(expr: CompoundExpression, includes: Includes | None = None) -> Spdx23Compound:
    """Encode an AST as its JSON model.

    Args:
        expr: The parsed expression.
        includes: Evidence per identifier, keyed by canonical license ID,
            full ``[DocumentRef-X:]LicenseRef-Y`` text, or exception ID.

    Returns:
        The root JSON model.
    """
    includes = includes or {}
    if isinstance(expr, (LicenseId, LicenseRef)):
        return _simple_to_json(expr, includes)
    if isinstance(expr, With):
        return Spdx23WithException(
            license=_simple_to_json(expr.license, includes),
            exception_id=expr.exception.id,
            exception_includes=list(includes.get(expr.exception.id, ())),
        )
    conjunction: Literal['AND', 'OR'] = 'AND' if isinstance(expr, And) else 'OR'
    return Spdx23Conjunction(
        conjunction=conjunction,
        left=expression_to_json(expr.left, includes),
        right=expression_to_json(expr.right, includes),
    )


def _simple_from_json(model: Spdx23License | Spdx23LicenseRef) -> SimpleExpression:
    if isinstance(model, Spdx23License):
        return LicenseId(parse_license_id(model.id).id, or_later=bool(model.includes_later_versions))
    return LicenseRef(
        license_ref=parse_idstring(model.license_ref),
        document_ref=parse_idstring(model.document_ref) if model.document_ref is not None else None,
    )


def expression_from_json(model: Spdx23Compound) -> CompoundExpression:
    """Decode a JSON model back into an AST.

    Identifiers are re-validated against the registries.

    Raises:
        ParseError: If an identifier is malformed or unknown.
    """
    if isinstance(model, (Spdx23License, Spdx23LicenseRef)):
        return _simple_from_json(model)
    if isinstance(model, Spdx23WithException):
        return With(
            license=_simple_from_json(model.license),
            exception=parse_license_exception_id(model.exception_id),
        )
    node_type = And if model.conjunction == 'AND' else Or
    return node_type(expression_from_json(model.left), expression_from_json(model.right))


def spdx_license(
    text: str,
    includes: Includes | None = None,
    *,
    max_depth: int | None = None,
    evidence: Sequence[IncludeItem] = (),
) -> SpdxLicense:
    """Parse *text* and wrap it as an :class:`SpdxLicense`.

    Args:
        text: The SPDX expression; kept verbatim as ``rawId``.
        includes: Per-identifier evidence, see :func:`expression_to_json`.
        max_depth: Parenthesis nesting cap passed to the parser.
        evidence: Files or text supporting the expression as a whole.

    Raises:
        ParseError: If *text* is not a valid expression.
    """
    expr = parse(text, max_depth=max_depth)
    return SpdxLicense(
        raw_id=text,
        expression=expression_to_json(expr, includes),
        includes=list(evidence),
    )
