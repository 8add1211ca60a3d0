"""
Output format utilities for repoversions CLI commands.

Formats record streams as JSONL, JSON, YAML, CSV or TSV.
"""

import csv
import io
import json
import os
from typing import Any, Dict, Iterable, Iterator, List, Optional

import yaml

OUTPUT_FORMATS = ('jsonl', 'json', 'yaml', 'csv', 'tsv')


def format_output(data: Iterable[Dict[str, Any]], format: str,
                  fields: Optional[List[str]] = None) -> Iterator[str]:
    """
    Format data according to the specified format.

    Args:
        data: Iterable of dictionaries to format
        format: Output format (jsonl, json, yaml, csv, tsv)
        fields: Optional list of fields to include (for CSV/TSV)

    Yields:
        Formatted strings for output
    """
    if format == "jsonl":
        for item in data:
            yield json.dumps(item, ensure_ascii=False)
    elif format == "json":
        yield json.dumps(list(data), ensure_ascii=False, indent=2)
    elif format == "yaml":
        yield yaml.safe_dump(list(data), default_flow_style=False,
                             allow_unicode=True, sort_keys=False).rstrip("\n")
    elif format == "csv":
        yield from format_delimited(data, fields, delimiter=',')
    elif format == "tsv":
        yield from format_delimited(data, fields, delimiter='\t')
    else:
        raise ValueError(f"Unknown format: {format}")


def format_delimited(data: Iterable[Dict[str, Any]], fields: Optional[List[str]] = None,
                     delimiter: str = ',') -> Iterator[str]:
    """
    Format data as CSV/TSV with a header row.

    Nested values are flattened; without ``fields`` the columns are the
    keys of all records in first-seen order.
    """
    rows = [flatten_dict(item) for item in data]
    if not rows:
        return

    if fields is None:
        fields = []
        for row in rows:
            for key in row:
                if key not in fields:
                    fields.append(key)

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fields, delimiter=delimiter,
                            extrasaction='ignore', lineterminator='\n')
    writer.writeheader()
    writer.writerows(rows)
    yield output.getvalue().rstrip("\n")


def flatten_dict(d: Dict[str, Any], parent_key: str = '', sep: str = '.') -> Dict[str, Any]:
    """
    Flatten a nested dictionary.

    Example:
        {'a': {'b': 1}, 'c': ['x', 'y']} -> {'a.b': 1, 'c': 'x,y'}
    """
    items: Dict[str, Any] = {}
    for k, v in d.items():
        new_key = f"{parent_key}{sep}{k}" if parent_key else k

        if isinstance(v, dict):
            items.update(flatten_dict(v, new_key, sep=sep))
        elif isinstance(v, list):
            if all(not isinstance(item, (dict, list)) for item in v):
                items[new_key] = ','.join(str(item) for item in v)
            else:
                # For complex lists, just use the count
                items[new_key + '_count'] = len(v)
        else:
            items[new_key] = v

    return items


def get_format_from_env(default: str = 'jsonl') -> str:
    """
    Get output format from the REPOVERSIONS_FORMAT environment variable.

    Unknown values fall back to ``default``.
    """
    format = os.environ.get('REPOVERSIONS_FORMAT', default).lower()
    if format not in OUTPUT_FORMATS:
        return default
    return format
