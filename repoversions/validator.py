"""
Manifest validation.

All checks run regardless of earlier failures and every problem is
collected into the result:

1. Each version must be X.Y.Z (three unsigned 32-bit integers).
2. Each ``requires`` name must be a repository in the manifest.
3. The dependency graph must be acyclic (one cycle is reported).

When several cycles exist, which one is reported depends on manifest
order.
"""

import logging
from typing import List

from .domain import IssueKind, ValidationIssue, ValidationResult, VersionsManifest
from .graph import find_cycle

logger = logging.getLogger(__name__)

U32_MAX = 2 ** 32 - 1


def is_valid_semver(version: str) -> bool:
    """
    Check for a plain X.Y.Z version.

    Each part must be ASCII digits fitting in an unsigned 32-bit integer.
    Prefixes ("v1.2.3"), suffixes ("1.2.3-rc1"), signs and any other number
    of parts are rejected.
    """
    parts = version.split('.')
    if len(parts) != 3:
        return False
    for part in parts:
        if not part or not (part.isascii() and part.isdigit()):
            return False
        if int(part) > U32_MAX:
            return False
    return True


def _version_issue(repo: str, version: str) -> ValidationIssue:
    return ValidationIssue(
        kind=IssueKind.INVALID_VERSION_FORMAT,
        message=f"Repository '{repo}' has invalid version '{version}' (must be X.Y.Z)",
        repo=repo,
        detail=version,
    )


def _missing_dependency_issue(repo: str, dep: str) -> ValidationIssue:
    return ValidationIssue(
        kind=IssueKind.MISSING_DEPENDENCY,
        message=f"Repository '{repo}' requires '{dep}' which is not defined",
        repo=repo,
        detail=dep,
    )


def _check_repo(manifest: VersionsManifest, repo: str) -> List[ValidationIssue]:
    record = manifest.versions[repo]
    issues = []
    if not is_valid_semver(record.version):
        issues.append(_version_issue(repo, record.version))
    for dep in record.dependency_names:
        if dep not in manifest:
            issues.append(_missing_dependency_issue(repo, dep))
    return issues


def validate(manifest: VersionsManifest) -> ValidationResult:
    """
    Validate a manifest.

    Returns:
        ValidationResult holding every error found. No exception is raised
        for validation problems.
    """
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    for repo in manifest:
        errors.extend(_check_repo(manifest, repo))

    cycle = find_cycle(manifest)
    if cycle is not None:
        rendered = " -> ".join(cycle)
        errors.append(ValidationIssue(
            kind=IssueKind.CIRCULAR_DEPENDENCY,
            message=f"Circular dependency detected: {rendered}",
            repo=cycle[0],
            detail=rendered,
        ))

    logger.debug(f"Validated {len(manifest)} repositories: "
                 f"{len(errors)} errors, {len(warnings)} warnings")
    return ValidationResult.from_issues(errors, warnings)


def verify_repo(manifest: VersionsManifest, repo: str) -> ValidationResult:
    """
    Check a single repository's version format and dependencies.

    Cycles are not checked here; use validate() for the whole graph.
    """
    if repo not in manifest:
        return ValidationResult.from_issues([ValidationIssue(
            kind=IssueKind.MISSING_REPOSITORY,
            message=f"Repository '{repo}' is not defined in the manifest",
            repo=repo,
        )])
    return ValidationResult.from_issues(_check_repo(manifest, repo))
