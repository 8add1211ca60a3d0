"""
Validation result objects.

Validation problems are returned as data, never raised, so a caller can
report every problem at once.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class IssueKind(Enum):
    """Category of a validation problem."""
    INVALID_VERSION_FORMAT = "invalid_version_format"
    MISSING_DEPENDENCY = "missing_dependency"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    MISSING_REPOSITORY = "missing_repository"


class ValidationOutcome(Enum):
    VALID = "valid"
    VALID_WITH_WARNINGS = "valid_with_warnings"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidationIssue:
    """
    One validation problem.

    Attributes:
        kind: Problem category
        message: Human-readable description
        repo: Repository the problem belongs to (None for graph-wide issues)
        detail: Offending value: the bad version, the missing dependency
            or the rendered cycle
    """
    kind: IssueKind
    message: str
    repo: Optional[str] = None
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'kind': self.kind.value,
            'message': self.message,
            'repo': self.repo,
            'detail': self.detail,
        }
        return {k: v for k, v in result.items() if v is not None}

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a manifest.

    Any error makes the result INVALID. Warnings alone give
    VALID_WITH_WARNINGS.
    """
    errors: Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()

    @classmethod
    def valid(cls) -> 'ValidationResult':
        return cls()

    @classmethod
    def from_issues(cls, errors: Iterable[ValidationIssue],
                    warnings: Iterable[ValidationIssue] = ()) -> 'ValidationResult':
        return cls(errors=tuple(errors), warnings=tuple(warnings))

    @property
    def outcome(self) -> ValidationOutcome:
        if self.errors:
            return ValidationOutcome.INVALID
        if self.warnings:
            return ValidationOutcome.VALID_WITH_WARNINGS
        return ValidationOutcome.VALID

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_messages(self) -> List[str]:
        return [issue.message for issue in self.errors]

    def warning_messages(self) -> List[str]:
        return [issue.message for issue in self.warnings]

    def has_issue(self, kind: IssueKind) -> bool:
        return any(issue.kind == kind for issue in self.errors + self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'outcome': self.outcome.value,
            'valid': self.is_valid,
            'errors': [issue.to_dict() for issue in self.errors],
            'warnings': [issue.to_dict() for issue in self.warnings],
        }
