"""
repoversions - Version and dependency manifest for multi-repository projects.

A project split into independently versioned repositories declares each
repository's version, git tag and dependencies in one manifest. repoversions
loads that manifest, validates it and computes a dependency-respecting
build order.

Quick Start:
    import repoversions

    manifest = repoversions.load_manifest("versions.toml")

    result = repoversions.validate(manifest)
    if not result.is_valid:
        for message in result.error_messages():
            print(message)

    for name in repoversions.build_order(manifest):
        print(name)

Manifest format (TOML; JSON and YAML use the same schema):

    [versions]
    consensus = { version = "0.1.0", git_tag = "v0.1.0" }
    protocol = { version = "0.1.0", git_tag = "v0.1.0", requires = ["consensus=0.1.0"] }
    node = { version = "0.1.0", git_tag = "v0.1.0", requires = ["protocol"], binaries = ["node"] }
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    DependencySpec,
    RepoVersion,
    VersionsManifest,
    IssueKind,
    ValidationIssue,
    ValidationOutcome,
    ValidationResult,
)

# Errors
from .errors import ManifestError, LoadError, ParseError, CircularDependencyError

# Loading
from .loader import (
    load_manifest,
    load_manifest_toml,
    load_manifest_json,
    load_manifest_yaml,
    loads_manifest,
    parse_manifest,
    dumps_manifest,
    save_manifest,
    detect_format,
)

# Graph computations
from .graph import (
    build_order,
    build_levels,
    dependents_of,
    detect_circular_dependencies,
    find_cycle,
)

# Validation
from .validator import is_valid_semver, validate, verify_repo

__all__ = [
    "__version__",
    # Domain objects
    "DependencySpec",
    "RepoVersion",
    "VersionsManifest",
    "IssueKind",
    "ValidationIssue",
    "ValidationOutcome",
    "ValidationResult",
    # Errors
    "ManifestError",
    "LoadError",
    "ParseError",
    "CircularDependencyError",
    # Loading
    "load_manifest",
    "load_manifest_toml",
    "load_manifest_json",
    "load_manifest_yaml",
    "loads_manifest",
    "parse_manifest",
    "dumps_manifest",
    "save_manifest",
    "detect_format",
    # Graph computations
    "build_order",
    "build_levels",
    "dependents_of",
    "detect_circular_dependencies",
    "find_cycle",
    # Validation
    "is_valid_semver",
    "validate",
    "verify_repo",
]
