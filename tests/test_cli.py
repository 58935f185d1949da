"""
Tests for the command line entry point.
"""

import json
from pathlib import Path

import main


class TestCommandLine:

    def test_generate_and_export(self, tmp_path, capsys):
        out = tmp_path / "dungeon.json"
        status = main.main([
            '--seed', '3', '--width', '5', '--height', '5', '--rooms', '12',
            '--keys', '2', '--retries', '200', '--quiet', '--ascii', '--export', str(out),
        ])

        assert status == 0
        data = json.loads(out.read_text())
        assert len(data['rooms']) == 12
        assert data['boss'] is not None
        assert data['goal'] is not None

        printed = capsys.readouterr().out
        assert "SOLVABLE" in printed
        assert "ASCII VISUALIZATION" in printed

    def test_dead_end_key_placement_without_goal(self, capsys):
        status = main.main([
            '--seed', '8', '--rooms', '15', '--keys', '2', '--retries', '200',
            '--no-goal', '--key-placement', 'dead-end', '--quiet',
        ])

        assert status == 0
        assert "Goal: none" in capsys.readouterr().out

    def test_failure_exit_status(self, capsys):
        status = main.main([
            '--seed', '1', '--width', '1', '--height', '1', '--rooms', '1',
            '--keys', '0', '--retries', '2', '--quiet',
        ])

        assert status == 1
        assert "GENERATION FAILED" in capsys.readouterr().out


class TestPackaging:

    def test_readme_is_package_long_description(self):
        root = Path(main.__file__).resolve().parent
        pyproject = (root / "pyproject.toml").read_text(encoding="utf-8")

        assert 'readme = "README.md"' in pyproject
        assert (root / "README.md").read_text(encoding="utf-8").startswith("# KeyDungeon")
