"""Shared fixtures for repoversions tests."""

import os

import pytest

from repoversions.loader import loads_manifest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the user's real config and REPOVERSIONS_* variables out of tests."""
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    for key in list(os.environ):
        if key.startswith('REPOVERSIONS_'):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def make_manifest():
    """Build a manifest from TOML text."""
    def _make(content):
        return loads_manifest(content, fmt='toml')
    return _make


CHAIN_TOML = """
[versions]
blvm-consensus = { version = "0.1.0", git_tag = "v0.1.0" }
blvm-protocol = { version = "0.1.0", git_tag = "v0.1.0", requires = ["blvm-consensus=0.1.0"] }
blvm-node = { version = "0.1.0", git_tag = "v0.1.0", requires = ["blvm-protocol=0.1.0", "blvm-consensus=0.1.0"], binaries = ["blvm-node"] }
"""

CYCLE_TOML = """
[versions]
A = { version = "0.1.0", git_tag = "v0.1.0", requires = ["B=0.1.0"] }
B = { version = "0.1.0", git_tag = "v0.1.0", requires = ["A=0.1.0"] }
"""

MISSING_TOML = """
[versions]
protocol = { version = "0.1.0", git_tag = "v0.1.0", requires = ["consensus=0.1.0"] }
"""


@pytest.fixture
def chain_file(tmp_path):
    path = tmp_path / 'versions.toml'
    path.write_text(CHAIN_TOML)
    return path


@pytest.fixture
def cycle_file(tmp_path):
    path = tmp_path / 'cycle.toml'
    path.write_text(CYCLE_TOML)
    return path


@pytest.fixture
def missing_file(tmp_path):
    path = tmp_path / 'missing.toml'
    path.write_text(MISSING_TOML)
    return path
