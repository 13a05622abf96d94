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

"""Command-line interface for tplkit.

Commands::

    tplkit scan [--strategy file|spdx-header] [-p PATH] [--root PATH] FILE
    tplkit parse EXPRESSION [--json] [--max-depth N]
    tplkit help

Exit codes:
    0  Success.
    1  Usage error, invalid expression, or any other failure.
    2  ``scan`` found no license evidence.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from rich.console import Console
from rich.markup import escape

from tplkit import __version__
from tplkit.config import MAX_EXPRESSION_DEPTH, Strategy, load_config
from tplkit.errors import ConfigError, ParseError, ScanError, ScanErrorKind
from tplkit.logging import configure_logging, get_logger
from tplkit.scan import ScanParams, scan
from tplkit.spdx import parse, render
from tplkit.tpl import expression_to_json

__all__ = ['main']

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 2


class _UsageError(Exception):
    """Raised instead of exiting when the command line is malformed."""

    def __init__(self, parser: argparse.ArgumentParser, message: str) -> None:
        self.parser = parser
        super().__init__(message)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise _UsageError(self, message)


def _depth_arg(text: str) -> int:
    try:
        depth = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f'not an integer: {text!r}') from None
    if not 1 <= depth <= MAX_EXPRESSION_DEPTH:
        raise argparse.ArgumentTypeError(f'must be between 1 and {MAX_EXPRESSION_DEPTH}, got {depth}')
    return depth


def build_parser() -> argparse.ArgumentParser:
    """Return the ``tplkit`` argument parser."""
    parser = _ArgumentParser(
        prog='tplkit',
        description='Find third-party license evidence and parse SPDX expressions.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Emit logs as JSON lines.')

    sub = parser.add_subparsers(dest='command', metavar='COMMAND')

    scan_parser = sub.add_parser('scan', help='Scan license evidence for a file.')
    scan_parser.add_argument(
        '--strategy',
        '-s',
        choices=[s.value for s in Strategy],
        default=None,
        help='Scan strategy (default: from config, else "file").',
    )
    scan_parser.add_argument(
        '--package',
        '-p',
        type=Path,
        default=Path('.'),
        help='Package directory (default: current directory).',
    )
    scan_parser.add_argument(
        '--root',
        type=Path,
        default=Path('.'),
        help='Root directory output paths are relative to (default: current directory).',
    )
    scan_parser.add_argument('file', type=Path, metavar='FILE', help='File to scan.')

    parse_parser = sub.add_parser('parse', help='Parse and normalize an SPDX expression.')
    parse_parser.add_argument('expression', metavar='EXPRESSION', help='SPDX license expression.')
    parse_parser.add_argument('--json', action='store_true', help='Print the JSON encoding instead of text.')
    parse_parser.add_argument(
        '--max-depth',
        type=_depth_arg,
        default=MAX_EXPRESSION_DEPTH,
        metavar='N',
        help=f'Reject parentheses nested deeper than N (default: {MAX_EXPRESSION_DEPTH}).',
    )

    sub.add_parser('help', help='Show this message.')
    return parser


def _report(console: Console, message: str) -> None:
    console.print(f'[bold red]error[/]: {escape(message)}', soft_wrap=True)


def _cmd_scan(args: argparse.Namespace, out: Console, err: Console) -> int:
    package_root = args.package.resolve()
    try:
        config = load_config(package_root)
        params = ScanParams(
            file=args.file.resolve(),
            package_root=package_root,
            root=args.root.resolve(),
            strategy=Strategy(args.strategy) if args.strategy else None,
        )
        result = scan(params, config)
    except ScanError as exc:
        if exc.kind is ScanErrorKind.LICENSE_OR_COPYRIGHT_NOT_FOUND:
            _report(err, 'License file not found.')
            return EXIT_NOT_FOUND
        _report(err, str(exc))
        return EXIT_ERROR
    except ParseError as exc:
        _report(err, f'[{exc.kind.value}] {exc}')
        return EXIT_ERROR
    except ConfigError as exc:
        _report(err, str(exc))
        return EXIT_ERROR
    out.out(result.to_json())
    return EXIT_OK


def _cmd_parse(args: argparse.Namespace, out: Console, err: Console) -> int:
    try:
        expr = parse(args.expression, max_depth=args.max_depth)
    except ParseError as exc:
        _report(err, f'[{exc.kind.value}] {exc}')
        return EXIT_ERROR
    if args.json:
        out.out(expression_to_json(expr).to_json())
    else:
        out.out(render(expr))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``tplkit`` command line and return the exit code."""
    out = Console(highlight=False)
    err = Console(stderr=True, highlight=False)
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except _UsageError as exc:
        err.out(exc.parser.format_usage(), end='')
        _report(err, str(exc))
        return EXIT_ERROR

    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    logger.debug('command_started', command=args.command)

    if args.command is None or args.command == 'help':
        out.out(parser.format_help(), end='')
        return EXIT_OK
    if args.command == 'scan':
        return _cmd_scan(args, out, err)
    return _cmd_parse(args, out, err)
