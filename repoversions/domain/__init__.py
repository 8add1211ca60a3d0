"""
Domain layer for repoversions.

Contains pure domain objects with no I/O or side effects:
- VersionsManifest: All repository version records plus metadata
- RepoVersion: Version record for one repository
- DependencySpec: Parsed ``requires`` entry
- ValidationResult: Errors and warnings found by the validator

These objects are immutable and provide to_dict() for serialization.
"""

from .manifest import DependencySpec, RepoVersion, VersionsManifest
from .validation import IssueKind, ValidationIssue, ValidationOutcome, ValidationResult

__all__ = [
    'DependencySpec',
    'RepoVersion',
    'VersionsManifest',
    'IssueKind',
    'ValidationIssue',
    'ValidationOutcome',
    'ValidationResult',
]
