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

"""Regenerate ``src/tplkit/spdx/_registry.py`` from the SPDX license list.

Fetches ``licenses.json`` and ``exceptions.json`` for one release of
the SPDX license-list-data repository and writes the ID tables the
parser validates against. Upstream order is preserved; the case-folded
lookup in ``_ids.py`` keeps the first entry on a case-insensitive clash.

Exit codes:
    0  Registry written.
    1  Fetch failed or a fetched list was empty.

Usage::

    python scripts/generate_spdx_registry.py src/tplkit/spdx/_registry.py
    python scripts/generate_spdx_registry.py --version v3.24 out.py

Source:
    - SPDX License List data: https://github.com/spdx/license-list-data
"""

from __future__ import annotations

import argparse
import json
import sys
import urllib.error
import urllib.request
from pathlib import Path

DEFAULT_VERSION = 'v3.23'

BASE_URL = 'https://raw.githubusercontent.com/spdx/license-list-data/{version}/json/{name}.json'

LICENSE_HEADER = Path(__file__).read_text(encoding='utf-8').split('\n\n', 1)[0]

# ── Helpers ─────────────────────────────────────────────────────────────


def _fetch(url: str) -> bytes:
    """Fetch a URL and return the raw bytes."""
    if not url.startswith('https://'):
        msg = f'Only https:// URLs are allowed, got: {url}'
        raise ValueError(msg)
    with urllib.request.urlopen(url) as resp:  # noqa: S310
        return resp.read()


def fetch_ids(version: str, name: str, list_key: str, id_key: str) -> list[str]:
    """Return the IDs listed in ``<name>.json`` for *version*, in upstream order."""
    data = json.loads(_fetch(BASE_URL.format(version=version, name=name)))
    return [entry[id_key] for entry in data.get(list_key, [])]


def _tuple_literal(name: str, ids: list[str]) -> list[str]:
    lines = [f'{name}: tuple[str, ...] = (']
    lines.extend(f'    {i!r},' for i in ids)
    lines.append(')')
    return lines


def render_registry(version: str, license_ids: list[str], exception_ids: list[str]) -> str:
    """Return the Python source of the registry module."""
    lines = [
        LICENSE_HEADER,
        '',
        '"""SPDX license and exception identifier registries.',
        '',
        'Generated by ``scripts/generate_spdx_registry.py`` from the SPDX',
        'license-list-data JSON files. Do not edit by hand; regenerate instead.',
        '"""',
        '',
        'from __future__ import annotations',
        '',
        '__all__ = [',
        "    'EXCEPTION_IDS',",
        "    'LICENSE_IDS',",
        "    'REGISTRY_VERSION',",
        ']',
        '',
        f'REGISTRY_VERSION = {version.removeprefix("v")!r}',
        '',
        *_tuple_literal('LICENSE_IDS', license_ids),
        '',
        *_tuple_literal('EXCEPTION_IDS', exception_ids),
    ]
    return '\n'.join(lines) + '\n'


# ── Main ────────────────────────────────────────────────────────────────


def main() -> int:
    """Fetch the SPDX lists and write the registry module."""
    parser = argparse.ArgumentParser(
        description='Generate the SPDX ID registry module.',
    )
    parser.add_argument(
        '--version',
        default=DEFAULT_VERSION,
        help=f'License list release tag (default: {DEFAULT_VERSION}).',
    )
    parser.add_argument(
        'output',
        type=Path,
        help='Path of the module to write.',
    )
    args = parser.parse_args()

    try:
        licenses = fetch_ids(args.version, 'licenses', 'licenses', 'licenseId')
        exceptions = fetch_ids(args.version, 'exceptions', 'exceptions', 'licenseExceptionId')
    except (urllib.error.URLError, ValueError, KeyError) as exc:
        print(f'error: could not fetch SPDX list {args.version}: {exc}', file=sys.stderr)  # noqa: T201
        return 1

    if not licenses or not exceptions:
        print(f'error: SPDX list {args.version} has no licenses or no exceptions', file=sys.stderr)  # noqa: T201
        return 1

    args.output.write_text(render_registry(args.version, licenses, exceptions), encoding='utf-8')
    print(f'wrote {len(licenses)} licenses and {len(exceptions)} exceptions to {args.output}')  # noqa: T201
    return 0


if __name__ == '__main__':
    sys.exit(main())
