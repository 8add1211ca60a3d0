"""
Tests for the repoversions command line interface.
"""

import json

import pytest
from click.testing import CliRunner

from repoversions.cli import cli
from repoversions.exit_codes import (
    SUCCESS, REPO_NOT_FOUND, MANIFEST_ERROR, CONFIG_ERROR, VALIDATION_FAILED, CYCLE_ERROR
)


def json_lines(output):
    """Parse the JSON records from CLI output, skipping stderr noise."""
    return [json.loads(line) for line in output.splitlines() if line.startswith('{')]


@pytest.fixture
def runner():
    return CliRunner()


class TestShowCommand:

    def test_show_jsonl(self, runner, chain_file):
        result = runner.invoke(cli, ['show', '-m', str(chain_file)])

        assert result.exit_code == SUCCESS
        records = json_lines(result.output)
        assert [r['name'] for r in records] == ['blvm-consensus', 'blvm-protocol', 'blvm-node']
        assert records[2]['binaries'] == ['blvm-node']
        assert 'git_commit' not in records[0]

    def test_show_json(self, runner, chain_file):
        result = runner.invoke(cli, ['show', '-m', str(chain_file), '-f', 'json'])

        assert result.exit_code == SUCCESS
        start = result.output.index('[')
        data = json.loads(result.output[start:])
        assert len(data) == 3

    def test_show_csv_fields(self, runner, chain_file):
        result = runner.invoke(cli, ['show', '-m', str(chain_file), '-f', 'csv',
                                     '--fields', 'name,version'])

        assert result.exit_code == SUCCESS
        lines = result.output.strip().splitlines()
        assert lines[0] == 'name,version'
        assert 'blvm-node,0.1.0' in lines

    def test_show_metadata(self, runner, tmp_path):
        path = tmp_path / 'versions.toml'
        path.write_text('[versions]\n\n[metadata]\nrelease = "2024.1"\n')

        result = runner.invoke(cli, ['show', '-m', str(path), '--metadata'])

        assert result.exit_code == SUCCESS
        assert json_lines(result.output) == [{'release': '2024.1'}]

    def test_missing_manifest(self, runner, tmp_path):
        result = runner.invoke(cli, ['show', '-m', str(tmp_path / 'nope.toml')])

        assert result.exit_code == MANIFEST_ERROR
        error = json_lines(result.output)[0]
        assert error['type'] == 'LoadError'
        assert error['exit_code'] == MANIFEST_ERROR

    def test_malformed_manifest(self, runner, tmp_path):
        path = tmp_path / 'versions.toml'
        path.write_text('[versions\n')

        result = runner.invoke(cli, ['show', '-m', str(path)])

        assert result.exit_code == MANIFEST_ERROR
        assert json_lines(result.output)[0]['type'] == 'ParseError'

    def test_manifest_path_from_config(self, runner, chain_file, isolated_home):
        config_dir = isolated_home / '.repoversions'
        config_dir.mkdir()
        (config_dir / 'config.json').write_text(
            json.dumps({'manifest': {'path': str(chain_file)}})
        )

        result = runner.invoke(cli, ['show'])

        assert result.exit_code == SUCCESS
        assert len(json_lines(result.output)) == 3


class TestValidateCommand:

    def test_valid_manifest(self, runner, chain_file):
        result = runner.invoke(cli, ['validate', '-m', str(chain_file)])

        assert result.exit_code == SUCCESS
        report = json_lines(result.output)[0]
        assert report['outcome'] == 'valid'
        assert report['valid'] is True

    def test_missing_dependency(self, runner, missing_file):
        result = runner.invoke(cli, ['validate', '-m', str(missing_file)])

        assert result.exit_code == VALIDATION_FAILED
        assert "Repository 'protocol' requires 'consensus' which is not defined" in result.output

    def test_cycle_is_validation_failure(self, runner, cycle_file):
        result = runner.invoke(cli, ['validate', '-m', str(cycle_file)])

        assert result.exit_code == VALIDATION_FAILED
        assert "Circular dependency detected: A -> B -> A" in result.output

    def test_reports_every_error(self, runner, tmp_path):
        path = tmp_path / 'versions.toml'
        path.write_text(
            '[versions]\n'
            'a = { version = "1.0", git_tag = "v1.0" }\n'
            'b = { version = "0.1.0", git_tag = "v0.1.0", requires = ["ghost"] }\n'
        )

        result = runner.invoke(cli, ['validate', '-m', str(path)])

        assert result.exit_code == VALIDATION_FAILED
        assert "invalid version '1.0'" in result.output
        assert "requires 'ghost'" in result.output

    def test_quiet_keeps_exit_code(self, runner, missing_file):
        result = runner.invoke(cli, ['validate', '-m', str(missing_file), '-q'])

        assert result.exit_code == VALIDATION_FAILED
        assert json_lines(result.output) == []


class TestVerifyCommand:

    def test_verify_known_repo(self, runner, chain_file):
        result = runner.invoke(cli, ['verify', 'blvm-node', '-m', str(chain_file)])

        assert result.exit_code == SUCCESS

    def test_verify_unknown_repo(self, runner, chain_file):
        result = runner.invoke(cli, ['verify', 'ghost', '-m', str(chain_file)])

        assert result.exit_code == REPO_NOT_FOUND
        assert json_lines(result.output)[0]['type'] == 'RepoNotFoundError'

    def test_verify_repo_with_missing_dependency(self, runner, missing_file):
        result = runner.invoke(cli, ['verify', 'protocol', '-m', str(missing_file)])

        assert result.exit_code == VALIDATION_FAILED


class TestOrderCommand:

    def test_order(self, runner, chain_file):
        result = runner.invoke(cli, ['order', '-m', str(chain_file)])

        assert result.exit_code == SUCCESS
        records = json_lines(result.output)
        assert [r['name'] for r in records] == ['blvm-consensus', 'blvm-protocol', 'blvm-node']
        assert [r['position'] for r in records] == [1, 2, 3]
        assert records[0]['git_tag'] == 'v0.1.0'

    def test_order_levels(self, runner, tmp_path):
        path = tmp_path / 'versions.toml'
        path.write_text(
            '[versions]\n'
            'app = { version = "0.1.0", git_tag = "v", requires = ["lib", "util"] }\n'
            'lib = { version = "0.1.0", git_tag = "v" }\n'
            'util = { version = "0.1.0", git_tag = "v" }\n'
        )

        result = runner.invoke(cli, ['order', '--levels', '-m', str(path)])

        assert result.exit_code == SUCCESS
        assert json_lines(result.output) == [
            {'level': 0, 'repos': ['lib', 'util']},
            {'level': 1, 'repos': ['app']},
        ]

    def test_order_cycle(self, runner, cycle_file):
        result = runner.invoke(cli, ['order', '-m', str(cycle_file)])

        assert result.exit_code == CYCLE_ERROR
        error = json_lines(result.output)[0]
        assert error['type'] == 'CircularDependencyError'
        assert 'Circular dependency' in error['error']
        assert 'position' not in result.output

    def test_order_skips_missing_dependency(self, runner, missing_file):
        result = runner.invoke(cli, ['order', '-m', str(missing_file)])

        assert result.exit_code == SUCCESS
        assert [r['name'] for r in json_lines(result.output)] == ['protocol']

    def test_order_strict_rejects_invalid(self, runner, missing_file):
        result = runner.invoke(cli, ['order', '--strict', '-m', str(missing_file)])

        assert result.exit_code == VALIDATION_FAILED
        assert "requires 'consensus'" in result.output


class TestCyclesCommand:

    def test_no_cycles(self, runner, chain_file):
        result = runner.invoke(cli, ['cycles', '-m', str(chain_file)])

        assert result.exit_code == SUCCESS
        assert json_lines(result.output) == []

    def test_cycle_reported(self, runner, cycle_file):
        result = runner.invoke(cli, ['cycles', '-m', str(cycle_file)])

        assert result.exit_code == SUCCESS
        assert json_lines(result.output) == [{'cycle': 'A -> B -> A', 'path': ['A', 'B', 'A']}]


class TestDependentsCommand:

    def test_transitive(self, runner, chain_file):
        result = runner.invoke(cli, ['dependents', 'blvm-consensus', '-m', str(chain_file)])

        assert result.exit_code == SUCCESS
        assert [r['name'] for r in json_lines(result.output)] == ['blvm-protocol', 'blvm-node']

    def test_direct(self, runner, tmp_path):
        path = tmp_path / 'versions.toml'
        path.write_text(
            '[versions]\n'
            'a = { version = "0.1.0", git_tag = "v" }\n'
            'b = { version = "0.1.0", git_tag = "v", requires = ["a"] }\n'
            'c = { version = "0.1.0", git_tag = "v", requires = ["b"] }\n'
        )

        result = runner.invoke(cli, ['dependents', 'a', '--direct', '-m', str(path)])

        assert result.exit_code == SUCCESS
        assert [r['name'] for r in json_lines(result.output)] == ['b']

    def test_unknown_repo(self, runner, chain_file):
        result = runner.invoke(cli, ['dependents', 'ghost', '-m', str(chain_file)])

        assert result.exit_code == REPO_NOT_FOUND

    def test_undefined_but_required_repo(self, runner, missing_file):
        result = runner.invoke(cli, ['dependents', 'consensus', '-m', str(missing_file)])

        assert result.exit_code == SUCCESS
        assert [r['name'] for r in json_lines(result.output)] == ['protocol']


class TestConfigCommand:

    def test_config_show(self, runner):
        result = runner.invoke(cli, ['config', 'show'])

        assert result.exit_code == SUCCESS
        config = json_lines(result.output)[0]
        assert config['manifest']['path'] == 'versions.toml'

    def test_config_show_path(self, runner, isolated_home):
        result = runner.invoke(cli, ['config', 'show', '--path'])

        assert result.exit_code == SUCCESS
        path = json_lines(result.output)[0]['config_path']
        assert path == str(isolated_home / '.repoversions' / 'config.json')

    def test_config_init(self, runner, isolated_home):
        result = runner.invoke(cli, ['config', 'init'])

        assert result.exit_code == SUCCESS
        config_file = isolated_home / '.repoversions' / 'config.json'
        assert config_file.exists()
        assert json.loads(config_file.read_text())['output']['format'] == 'jsonl'

    def test_config_init_does_not_overwrite(self, runner, isolated_home):
        config_dir = isolated_home / '.repoversions'
        config_dir.mkdir()
        (config_dir / 'config.json').write_text('{"output": {"format": "csv"}}')

        result = runner.invoke(cli, ['config', 'init'])

        assert result.exit_code == SUCCESS
        assert 'already exists' in result.output
        assert 'csv' in (config_dir / 'config.json').read_text()


def test_help_lists_commands(runner):
    result = runner.invoke(cli, ['--help'])

    assert result.exit_code == SUCCESS
    for command in ('show', 'validate', 'verify', 'order', 'cycles', 'dependents', 'config'):
        assert command in result.output


def test_bad_manifest_format_in_config(runner, chain_file, isolated_home):
    config_dir = isolated_home / '.repoversions'
    config_dir.mkdir()
    (config_dir / 'config.json').write_text(json.dumps({'manifest': {'format': 'ini'}}))

    result = runner.invoke(cli, ['show', '-m', str(chain_file)])

    assert result.exit_code == CONFIG_ERROR
    assert json_lines(result.output)[0]['type'] == 'ConfigError'
