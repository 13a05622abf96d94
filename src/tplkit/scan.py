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

r"""Locate license and copyright evidence for a source file.

Given a target file and the root of the package it belongs to, the
scanner builds a :class:`~tplkit.tpl.Tpl` describing which license
applies to the file and where the evidence for it lives.

Strategies::

    file          License files (LICENSE, LICENCE, COPYING, NOTICE by
                  default) in the package root are reported as an
                  ``arbitrary`` license covering the target file.

    spdx-header   The target file's ``SPDX-License-Identifier:`` tag is
                  parsed and reported as an ``spdx`` license whose
                  ``includes`` are the license files found. Falls back
                  to ``file`` when the file carries no tag.

Paths in the result are relative to ``root`` when they lie inside it.

Usage::

    from pathlib import Path
    from tplkit.scan import ScanParams, scan

    tpl = scan(ScanParams(package_root=Path('vendor/zlib'), root=Path('.'), file=Path('vendor/zlib/inflate.c')))
    print(tpl.to_json(indent=2))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from itertools import islice
from pathlib import Path, PurePath

from tplkit.config import Strategy, TplConfig
from tplkit.errors import ScanError, ScanErrorKind
from tplkit.logging import get_logger
from tplkit.tpl import (
    ArbitraryLicense,
    Copyright,
    FileRef,
    IncludeItem,
    License,
    LicenseGroup,
    Project,
    Tpl,
    spdx_license,
)

__all__ = [
    'ScanParams',
    'find_license_files',
    'read_copyrights',
    'read_spdx_header',
    'scan',
    'strip_root_prefix',
]

logger = get_logger(__name__)

_SPDX_TAG_RE = re.compile(r'SPDX-License-Identifier:\s*(.*)')
_COPYRIGHT_RE = re.compile(r'(SPDX-FileCopyrightText:.*|Copyright\b.*|©.*)')
_YEAR_RE = re.compile(r'(?<!\d)(\d{4})(?!\d)')
_COMMENT_TERMINATORS = ('*/', '-->')


@dataclass(frozen=True)
class ScanParams:
    """Inputs to :func:`scan`.

    Attributes:
        file: The file whose license is being determined.
        package_root: Directory of the package containing ``file``.
        root: Directory that output paths are made relative to.
        strategy: How evidence is collected; ``None`` uses the
            configured default.
    """

    file: Path
    package_root: Path = Path('.')
    root: Path = Path('.')
    strategy: Strategy | None = None


def strip_root_prefix(path: PurePath | str, root: PurePath | str) -> str:
    """Return *path* relative to *root* if strictly inside it, else unchanged.

    The comparison is component-wise, so ``/a/bc`` is not inside ``/a/b``.
    The result uses POSIX separators.

        >>> strip_root_prefix('/repo/vendor/zlib/LICENSE', '/repo')
        'vendor/zlib/LICENSE'
        >>> strip_root_prefix('/repo', '/repo')
        '/repo'
    """
    target = PurePath(path)
    base = PurePath(root)
    if target == base:
        return target.as_posix()
    try:
        return target.relative_to(base).as_posix()
    except ValueError:
        return target.as_posix()


def find_license_files(package_root: Path, stems: tuple[str, ...] | list[str]) -> list[Path]:
    """Return the license files directly inside *package_root*.

    A regular file matches when its stem (the name without its final
    suffix) equals one of *stems*, ignoring case. ``LICENSE``,
    ``license.md`` and ``Copying.txt`` all match the default stems.

    Raises:
        ScanError: If *package_root* is not a directory.
    """
    if not package_root.is_dir():
        raise ScanError(ScanErrorKind.INVALID_PATH, str(package_root), 'package root is not a directory')
    wanted = {s.lower() for s in stems}
    found = sorted(
        (entry for entry in package_root.iterdir() if entry.is_file() and entry.stem.lower() in wanted),
        key=lambda p: p.name,
    )
    for path in found:
        logger.debug('license_file_found', path=str(path))
    return found


def _header_lines(file: Path, max_lines: int) -> list[str]:
    try:
        with file.open(encoding='utf-8', errors='replace') as f:
            return [line.rstrip('\r\n') for line in islice(f, max_lines)]
    except OSError as exc:
        raise ScanError(ScanErrorKind.INVALID_PATH, str(file), exc.strerror or str(exc)) from exc


def _strip_terminators(text: str) -> str:
    text = text.strip()
    changed = True
    while changed:
        changed = False
        for terminator in _COMMENT_TERMINATORS:
            if text.endswith(terminator):
                text = text[: -len(terminator)].rstrip()
                changed = True
    return text


def read_spdx_header(file: Path, max_lines: int) -> str | None:
    """Return the value of the first ``SPDX-License-Identifier:`` tag.

    Only the first *max_lines* lines are searched. Trailing comment
    terminators (``*/``, ``-->``) are removed. Returns ``None`` when no
    non-empty tag is found.
    """
    for line in _header_lines(file, max_lines):
        match = _SPDX_TAG_RE.search(line)
        if match:
            value = _strip_terminators(match.group(1))
            if value:
                return value
    return None


def read_copyrights(file: Path, max_lines: int) -> list[Copyright]:
    """Collect copyright statements from the first *max_lines* lines of *file*.

    Lines mentioning ``Copyright``, ``SPDX-FileCopyrightText:`` or ``©``
    are kept from the keyword onwards, with the first four-digit number
    on the line taken as the year.
    """
    copyrights: list[Copyright] = []
    for line in _header_lines(file, max_lines):
        match = _COPYRIGHT_RE.search(line)
        if not match:
            continue
        text = _strip_terminators(match.group(1))
        year = _YEAR_RE.search(text)
        copyrights.append(Copyright(text=text, year=int(year.group(1)) if year else None))
    return copyrights


def _license_for(
    params: ScanParams,
    config: TplConfig,
    strategy: Strategy,
    evidence: list[IncludeItem],
) -> License | None:
    if strategy is Strategy.SPDX_HEADER:
        tag = read_spdx_header(params.file, config.header_lines)
        if tag is not None:
            logger.debug('spdx_header_found', file=str(params.file), expression=tag)
            return spdx_license(tag, max_depth=config.max_expression_depth, evidence=evidence)
        logger.debug('spdx_header_missing', file=str(params.file))
    if not evidence:
        return None
    return ArbitraryLicense(includes=evidence)


def scan(params: ScanParams, config: TplConfig | None = None) -> Tpl:
    """Build the license listing for ``params.file``.

    Args:
        params: What to scan.
        config: Settings; defaults to :class:`~tplkit.config.TplConfig()`.

    Returns:
        A :class:`~tplkit.tpl.Tpl` with one license group covering the
        target file.

    Raises:
        ScanError: ``LicenseOrCopyrightNotFound`` when there is no
            license evidence, ``InvalidPath`` when a path is unusable.
        ParseError: If the file's SPDX header is malformed.
    """
    config = config or TplConfig()
    strategy = params.strategy or config.strategy
    if not params.file.is_file():
        raise ScanError(ScanErrorKind.INVALID_PATH, str(params.file), 'not a regular file')

    license_files = find_license_files(params.package_root, config.license_file_stems)
    evidence: list[IncludeItem] = [FileRef(path=strip_root_prefix(p, params.root)) for p in license_files]

    group_license = _license_for(params, config, strategy, evidence)
    if group_license is None:
        raise ScanError(ScanErrorKind.LICENSE_OR_COPYRIGHT_NOT_FOUND, str(params.package_root))

    project_id = strip_root_prefix(params.package_root, params.root)
    result = Tpl(
        project=Project(id=project_id, display_name=project_id),
        licenses=[
            LicenseGroup(
                files=[FileRef(path=strip_root_prefix(params.file, params.root))],
                license=group_license,
            ),
        ],
        copyrights=read_copyrights(params.file, config.header_lines),
    )
    logger.info('scan_complete', file=str(params.file), strategy=strategy.value, evidence=len(evidence))
    return result
