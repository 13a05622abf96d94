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

"""Tests for the tplkit command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tplkit import __version__
from tplkit.cli import EXIT_ERROR, EXIT_NOT_FOUND, EXIT_OK, main


def _package(root: Path, *, license_file: bool = True, header: str = '') -> Path:
    pkg = root / 'pkg'
    pkg.mkdir()
    if license_file:
        (pkg / 'LICENSE').write_text('MIT License\n')
    (pkg / 'main.py').write_text(header + 'print("hi")\n')
    return pkg


class TestParseCommand:
    """Tests for ``tplkit parse``."""

    def test_renders_canonical_text(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test canonical rendering on stdout."""
        assert main(['parse', 'mit  OR (apache-2.0)']) == EXIT_OK
        assert capsys.readouterr().out == 'MIT OR Apache-2.0\n'

    def test_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --json prints the JSON encoding."""
        assert main(['parse', '--json', 'GPL-2.0-only+']) == EXIT_OK
        assert json.loads(capsys.readouterr().out) == {
            'id': 'GPL-2.0-only',
            'includesLaterVersions': True,
            'includes': [],
        }

    def test_invalid(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test invalid expression reports its kind."""
        assert main(['parse', 'MIT Apache-2.0']) == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'UnexpectedToken' in captured.err
        assert 'position 4' in captured.err

    def test_deep_nesting_is_an_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test nesting past the default cap exits 1 without a traceback."""
        depth = 120
        assert main(['parse', '(' * depth + 'MIT' + ')' * depth]) == EXIT_ERROR
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'nested deeper than 64' in captured.err
        assert 'Traceback' not in captured.err

    def test_max_depth_flag(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --max-depth lowers the cap."""
        assert main(['parse', '--max-depth', '2', '((MIT))']) == EXIT_OK
        assert main(['parse', '--max-depth', '2', '(((MIT)))']) == EXIT_ERROR
        assert 'nested deeper than 2' in capsys.readouterr().err

    @pytest.mark.parametrize('value', ['0', '500', 'deep'])
    def test_max_depth_out_of_range(self, capsys: pytest.CaptureFixture[str], value: str) -> None:
        """Test --max-depth outside 1..64 is a usage error."""
        assert main(['parse', '--max-depth', value, 'MIT']) == EXIT_ERROR
        assert 'usage: tplkit parse' in capsys.readouterr().err


class TestScanCommand:
    """Tests for ``tplkit scan``."""

    def test_prints_tpl_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test scan result is printed as JSON."""
        pkg = _package(tmp_path)
        code = main(['scan', '-p', str(pkg), '--root', str(tmp_path), str(pkg / 'main.py')])
        assert code == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data['project'] == {'id': 'pkg', 'displayName': 'pkg'}
        assert data['licenses'] == [
            {
                'files': [{'path': 'pkg/main.py'}],
                'license': {'type': 'arbitrary', 'includes': [{'path': 'pkg/LICENSE'}]},
            },
        ]
        assert data['copyrights'] == []

    def test_spdx_header_strategy(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --strategy spdx-header."""
        pkg = _package(tmp_path, header='# SPDX-License-Identifier: Apache-2.0\n')
        code = main(['scan', '--strategy', 'spdx-header', '--package', str(pkg), str(pkg / 'main.py')])
        assert code == EXIT_OK
        lic = json.loads(capsys.readouterr().out)['licenses'][0]['license']
        assert lic['type'] == 'spdx'
        assert lic['rawId'] == 'Apache-2.0'
        assert lic['expression'] == {'id': 'Apache-2.0', 'includes': []}

    def test_strategy_from_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test tplkit.toml in the package root sets the strategy."""
        pkg = _package(tmp_path, license_file=False, header='# SPDX-License-Identifier: MIT\n')
        (pkg / 'tplkit.toml').write_text('strategy = "spdx-header"\n')
        assert main(['scan', '-p', str(pkg), str(pkg / 'main.py')]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)['licenses'][0]['license']['type'] == 'spdx'

    def test_not_found(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test exit code 2 when no license evidence exists."""
        pkg = _package(tmp_path, license_file=False)
        assert main(['scan', '-p', str(pkg), str(pkg / 'main.py')]) == EXIT_NOT_FOUND
        captured = capsys.readouterr()
        assert captured.out == ''
        assert 'License file not found.' in captured.err

    def test_malformed_header(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a malformed SPDX tag exits 1."""
        pkg = _package(tmp_path, header='# SPDX-License-Identifier: MIT AND\n')
        code = main(['scan', '-s', 'spdx-header', '-p', str(pkg), str(pkg / 'main.py')])
        assert code == EXIT_ERROR
        assert 'UnexpectedToken' in capsys.readouterr().err

    def test_bad_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test an invalid config file exits 1."""
        pkg = _package(tmp_path)
        (pkg / 'tplkit.toml').write_text('colour = true\n')
        assert main(['scan', '-p', str(pkg), str(pkg / 'main.py')]) == EXIT_ERROR
        assert 'unknown key' in capsys.readouterr().err

    def test_config_depth_above_ceiling(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a nesting cap the parser cannot honor is rejected up front."""
        pkg = _package(tmp_path)
        (pkg / 'tplkit.toml').write_text('max-expression-depth = 500\n')
        assert main(['scan', '-p', str(pkg), str(pkg / 'main.py')]) == EXIT_ERROR
        assert 'must be at most 64' in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test a nonexistent target exits 1."""
        pkg = _package(tmp_path)
        assert main(['scan', '-p', str(pkg), str(pkg / 'nope.py')]) == EXIT_ERROR
        assert 'InvalidPath' in capsys.readouterr().err

    def test_file_required(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test FILE is required."""
        assert main(['scan']) == EXIT_ERROR
        err = capsys.readouterr().err
        assert 'usage: tplkit scan' in err

    def test_bad_strategy(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test unknown strategy value."""
        assert main(['scan', '--strategy', 'guess', 'x']) == EXIT_ERROR
        assert 'invalid choice' in capsys.readouterr().err


class TestUsage:
    """Tests for help and unknown commands."""

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test no command prints usage."""
        assert main([]) == EXIT_OK
        assert capsys.readouterr().out.startswith('usage: tplkit')

    def test_help_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test help command prints usage."""
        assert main(['help']) == EXIT_OK
        out = capsys.readouterr().out
        assert 'scan' in out
        assert 'parse' in out

    def test_unknown_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test unknown command prints usage and fails."""
        assert main(['frobnicate']) == EXIT_ERROR
        err = capsys.readouterr().err
        assert 'usage: tplkit' in err
        assert 'frobnicate' in err

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version."""
        with pytest.raises(SystemExit) as exc:
            main(['--version'])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_global_flags(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test logging flags are accepted before the command."""
        assert main(['-q', '--json-log', 'parse', 'MIT']) == EXIT_OK
        assert capsys.readouterr().out == 'MIT\n'
