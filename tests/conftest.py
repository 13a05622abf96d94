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

"""Shared pytest configuration for tplkit tests."""

from __future__ import annotations

import pytest

from tplkit.logging import configure_logging


@pytest.fixture(autouse=True, scope='session')
def _logging() -> None:
    """Route structlog through stdlib logging before any module logs."""
    configure_logging()
