"""
Exceptions raised by the manifest core.

Loader errors (LoadError, ParseError) always abort the load; there is no
partial manifest. CircularDependencyError is raised by build-order
computations, which must not return a partial ordering.
"""

from typing import List, Optional, Sequence


class ManifestError(Exception):
    """Base class for all manifest errors."""


class LoadError(ManifestError):
    """The manifest file could not be read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ParseError(ManifestError):
    """
    The manifest content does not match the schema.

    Attributes:
        path: File the content came from (None for in-memory data)
        field: Dotted location of the offending value, e.g. "versions.A.requires"
    """

    def __init__(self, message: str, path: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.field = field


class CircularDependencyError(ManifestError):
    """A dependency cycle was hit while computing a build order."""

    def __init__(self, repo: str, path: Optional[Sequence[str]] = None):
        self.repo = repo
        self.path: List[str] = list(path) if path else []
        message = f"Circular dependency detected involving {repo}"
        if self.path:
            message += f": {self.cycle}"
        super().__init__(message)

    @property
    def cycle(self) -> str:
        """The cycle rendered as 'a -> b -> a'."""
        return " -> ".join(self.path)
