"""
Tests for output formatting and exit code helpers.
"""
import json
import os
from unittest.mock import patch

import pytest
import yaml

from repoversions.errors import CircularDependencyError, LoadError, ParseError
from repoversions.exit_codes import (
    CYCLE_ERROR, GENERAL_ERROR, MANIFEST_ERROR, REPO_NOT_FOUND, VALIDATION_FAILED,
    RepoNotFoundError, ValidationFailedError, get_exit_code_for_exception,
)
from repoversions.format_utils import flatten_dict, format_output, get_format_from_env

RECORDS = [
    {'name': 'consensus', 'version': '0.1.0', 'requires': []},
    {'name': 'node', 'version': '0.2.0', 'requires': ['consensus', 'protocol']},
]


class TestFormatOutput:

    def test_jsonl(self):
        lines = list(format_output(RECORDS, 'jsonl'))
        assert [json.loads(line) for line in lines] == RECORDS

    def test_json(self):
        (text,) = format_output(RECORDS, 'json')
        assert json.loads(text) == RECORDS

    def test_yaml(self):
        (text,) = format_output(RECORDS, 'yaml')
        assert yaml.safe_load(text) == RECORDS

    def test_csv(self):
        (text,) = format_output(RECORDS, 'csv')
        assert text.splitlines() == [
            'name,version,requires',
            'consensus,0.1.0,',
            'node,0.2.0,"consensus,protocol"',
        ]

    def test_tsv_with_fields(self):
        (text,) = format_output(RECORDS, 'tsv', fields=['name'])
        assert text.splitlines() == ['name', 'consensus', 'node']

    def test_csv_empty(self):
        assert list(format_output([], 'csv')) == []

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            list(format_output(RECORDS, 'xml'))


class TestFlattenDict:

    def test_nested(self):
        assert flatten_dict({'a': {'b': 1}, 'c': ['x', 'y']}) == {'a.b': 1, 'c': 'x,y'}

    def test_complex_list_is_counted(self):
        assert flatten_dict({'items': [{'a': 1}, {'a': 2}]}) == {'items_count': 2}


class TestFormatFromEnv:

    @patch.dict(os.environ, {'REPOVERSIONS_FORMAT': 'CSV'})
    def test_env_value(self):
        assert get_format_from_env() == 'csv'

    @patch.dict(os.environ, {'REPOVERSIONS_FORMAT': 'xml'})
    def test_unknown_falls_back(self):
        assert get_format_from_env('json') == 'json'

    def test_default(self):
        assert get_format_from_env() == 'jsonl'


class TestExitCodes:

    def test_manifest_errors(self):
        assert get_exit_code_for_exception(LoadError("x")) == MANIFEST_ERROR
        assert get_exit_code_for_exception(ParseError("x")) == MANIFEST_ERROR

    def test_cycle_error(self):
        assert get_exit_code_for_exception(CircularDependencyError('A', ['A', 'A'])) == CYCLE_ERROR

    def test_unknown_exception(self):
        assert get_exit_code_for_exception(RuntimeError("x")) == GENERAL_ERROR

    def test_repo_not_found(self):
        error = RepoNotFoundError('ghost')
        assert error.exit_code == REPO_NOT_FOUND
        assert "ghost" in str(error)

    def test_validation_failed_counts_errors(self):
        error = ValidationFailedError(['one', 'two'])
        assert error.exit_code == VALIDATION_FAILED
        assert error.errors == ['one', 'two']
        assert "2 errors" in str(error)
        assert "1 error" in str(ValidationFailedError(['one']))
