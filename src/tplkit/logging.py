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

"""Structured logging for tplkit.

All diagnostics go to stderr (or a caller-supplied stream) so stdout
carries nothing but command output, e.g.
``tplkit scan src/main.c | jq .licenses``.

Output modes::

    ┌──────────┬──────────────────────────────────────────────────────┐
    │ Mode     │ Selected by                                          │
    ├──────────┼──────────────────────────────────────────────────────┤
    │ console  │ default; colored only when the stream is a TTY       │
    │ json     │ ``--json-log`` or ``TPLKIT_LOG_JSON=1``              │
    └──────────┴──────────────────────────────────────────────────────┘

Events are snake_case names with keyword context::

    from tplkit.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    get_logger(__name__).debug('license_file_found', path='LICENSE')
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

__all__ = [
    'configure_logging',
    'get_logger',
]

JSON_ENV_VAR = 'TPLKIT_LOG_JSON'

_TRUTHY = frozenset({'1', 'true', 'yes'})

_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt='iso'),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
)


def _level(*, verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbose else logging.INFO


def _wants_json(json_log: bool) -> bool:
    return json_log or os.environ.get(JSON_ENV_VAR, '').strip().lower() in _TRUTHY


def _renderer(*, json_log: bool, stream: TextIO) -> structlog.types.Processor:
    if _wants_json(json_log):
        return structlog.processors.JSONRenderer()
    isatty = getattr(stream, 'isatty', None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))


def _library_defaults() -> None:
    """Send events to stdlib logging before :func:`configure_logging` runs.

    The stdlib level (WARNING by default) then applies, so library use
    of the parser writes nothing to stdout. An existing structlog
    configuration is left alone.
    """
    if structlog.is_configured():
        return
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbose: Log at DEBUG instead of INFO.
        quiet: Log only warnings and errors. Wins over *verbose*.
        json_log: Render one JSON object per line. ``TPLKIT_LOG_JSON``
            set to ``1``/``true``/``yes`` has the same effect.
        stream: Where records are written; defaults to ``sys.stderr``
            as it is at call time.
    """
    target = stream if stream is not None else sys.stderr

    handler = logging.StreamHandler(target)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_PRE_CHAIN),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(json_log=json_log, stream=target),
            ],
        ),
    )
    logging.basicConfig(handlers=[handler], level=_level(verbose=verbose, quiet=quiet), force=True)

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = 'tplkit') -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the stdlib logger *name*."""
    return structlog.get_logger(name)


_library_defaults()
