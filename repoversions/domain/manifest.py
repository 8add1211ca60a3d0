"""
Manifest domain objects for repoversions.

A VersionsManifest maps repository names to RepoVersion records. It is
built once by the loader and never mutated afterwards; the validator and
the graph computations only read it.

Example versions.toml:

    [versions]
    consensus = { version = "0.1.0", git_tag = "v0.1.0" }
    protocol = { version = "0.1.0", git_tag = "v0.1.0", requires = ["consensus=0.1.0"] }

    [metadata]
    release = "2024.1"
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..errors import ParseError

logger = logging.getLogger(__name__)

RECORD_FIELDS = ('version', 'git_tag', 'git_commit', 'requires', 'binaries')


@dataclass(frozen=True)
class DependencySpec:
    """
    A single ``requires`` entry: ``name`` or ``name=constraint``.

    Only the name takes part in the dependency graph. The constraint is
    carried verbatim for reporting and is never interpreted.
    """
    name: str
    constraint: Optional[str] = None

    @classmethod
    def parse(cls, spec: str) -> 'DependencySpec':
        """Split on the first '='; everything before it is the name."""
        if '=' in spec:
            name, constraint = spec.split('=', 1)
            return cls(name=name, constraint=constraint)
        return cls(name=spec)

    def __str__(self) -> str:
        if self.constraint is None:
            return self.name
        return f"{self.name}={self.constraint}"


@dataclass(frozen=True)
class RepoVersion:
    """Version record for one repository."""
    version: str
    git_tag: str
    git_commit: Optional[str] = None
    requires: Tuple[str, ...] = ()
    binaries: Tuple[str, ...] = ()

    @property
    def dependencies(self) -> Tuple[DependencySpec, ...]:
        return tuple(DependencySpec.parse(spec) for spec in self.requires)

    @property
    def dependency_names(self) -> Tuple[str, ...]:
        """Names from ``requires``, in declaration order."""
        return tuple(dep.name for dep in self.dependencies)

    @classmethod
    def from_dict(cls, data: Any, location: str = "record") -> 'RepoVersion':
        """
        Build a RepoVersion from a decoded table.

        Args:
            data: Mapping decoded from TOML/JSON/YAML
            location: Dotted position used in error messages

        Raises:
            ParseError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ParseError(
                f"{location}: expected a table, got {_type_name(data)}",
                field=location,
            )

        for key in data:
            if key not in RECORD_FIELDS:
                logger.debug(f"Ignoring unknown field {location}.{key}")

        return cls(
            version=_required_str(data, 'version', location),
            git_tag=_required_str(data, 'git_tag', location),
            git_commit=_optional_str(data, 'git_commit', location),
            requires=_str_list(data, 'requires', location),
            binaries=_str_list(data, 'binaries', location),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a plain dictionary.

        git_commit is left out when absent so a reloaded manifest keeps its
        default.
        """
        result: Dict[str, Any] = {
            'version': self.version,
            'git_tag': self.git_tag,
        }
        if self.git_commit is not None:
            result['git_commit'] = self.git_commit
        result['requires'] = list(self.requires)
        result['binaries'] = list(self.binaries)
        return result


@dataclass(frozen=True)
class VersionsManifest:
    """
    Immutable collection of repository version records.

    Repository order follows the source document. Consumers must not rely
    on that order for anything except reproducible output.
    """
    versions: Mapping[str, RepoVersion] = field(default_factory=dict)
    metadata: Optional[Mapping[str, str]] = None

    def __post_init__(self):
        # Freeze the mappings so the manifest cannot change under a computation
        object.__setattr__(self, 'versions', MappingProxyType(dict(self.versions)))
        if self.metadata is not None:
            object.__setattr__(self, 'metadata', MappingProxyType(dict(self.metadata)))

    @classmethod
    def from_dict(cls, data: Any) -> 'VersionsManifest':
        """
        Build a manifest from a decoded document.

        Raises:
            ParseError: If the document does not match the manifest schema
        """
        if not isinstance(data, dict):
            raise ParseError(f"Expected a table at top level, got {_type_name(data)}")
        if 'versions' not in data:
            raise ParseError("Missing required table 'versions'", field='versions')

        raw_versions = data['versions']
        if not isinstance(raw_versions, dict):
            raise ParseError(
                f"versions: expected a table, got {_type_name(raw_versions)}",
                field='versions',
            )

        versions = {}
        for name, record in raw_versions.items():
            if not isinstance(name, str) or not name:
                raise ParseError("versions: repository names must be non-empty strings",
                                 field='versions')
            versions[name] = RepoVersion.from_dict(record, location=f"versions.{name}")

        metadata = None
        raw_metadata = data.get('metadata')
        if raw_metadata is not None:
            if not isinstance(raw_metadata, dict):
                raise ParseError(
                    f"metadata: expected a table, got {_type_name(raw_metadata)}",
                    field='metadata',
                )
            for key, value in raw_metadata.items():
                if not isinstance(value, str):
                    raise ParseError(
                        f"metadata.{key}: expected a string, got {_type_name(value)}",
                        field=f"metadata.{key}",
                    )
            metadata = dict(raw_metadata)

        return cls(versions=versions, metadata=metadata)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary in manifest schema."""
        result: Dict[str, Any] = {
            'versions': {name: repo.to_dict() for name, repo in self.versions.items()},
        }
        if self.metadata is not None:
            result['metadata'] = dict(self.metadata)
        return result

    def names(self) -> List[str]:
        return list(self.versions)

    def get(self, name: str) -> Optional[RepoVersion]:
        return self.versions.get(name)

    def binary_repos(self) -> List[str]:
        """Repositories that produce at least one binary artifact."""
        return [name for name, repo in self.versions.items() if repo.binaries]

    def library_repos(self) -> List[str]:
        """Repositories that produce no binaries (libraries only)."""
        return [name for name, repo in self.versions.items() if not repo.binaries]

    def __contains__(self, name: object) -> bool:
        return name in self.versions

    def __iter__(self) -> Iterator[str]:
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self.versions)

    def __repr__(self) -> str:
        return f"VersionsManifest(repos={list(self.versions)!r})"


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _required_str(data: Dict[str, Any], key: str, location: str) -> str:
    if key not in data:
        raise ParseError(f"{location}: missing required field '{key}'",
                         field=f"{location}.{key}")
    value = data[key]
    if not isinstance(value, str):
        raise ParseError(
            f"{location}.{key}: expected a string, got {_type_name(value)}",
            field=f"{location}.{key}",
        )
    return value


def _optional_str(data: Dict[str, Any], key: str, location: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(
            f"{location}.{key}: expected a string, got {_type_name(value)}",
            field=f"{location}.{key}",
        )
    return value


def _str_list(data: Dict[str, Any], key: str, location: str) -> Tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ParseError(
            f"{location}.{key}: expected a list of strings, got {_type_name(value)}",
            field=f"{location}.{key}",
        )
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ParseError(
                f"{location}.{key}[{index}]: expected a string, got {_type_name(item)}",
                field=f"{location}.{key}",
            )
    return tuple(value)
