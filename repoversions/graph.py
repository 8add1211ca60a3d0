"""
Dependency graph computations over a VersionsManifest.

Edges run from a repository to each name in its ``requires`` list (the
version constraint after '=' is ignored). Two traversals live here with
different failure policies:

- find_cycle / detect_circular_dependencies report one cycle as data and
  are used by the validator, which collects every problem.
- build_order / build_levels raise CircularDependencyError on the first
  cycle, because a partial order is useless to a build orchestrator.

Repositories with no dependency relationship come out in manifest order.
Callers must only rely on dependencies preceding their dependents.
"""

import logging
from typing import Dict, List, Optional, Set

from .domain import VersionsManifest
from .errors import CircularDependencyError

logger = logging.getLogger(__name__)


def dependency_names(manifest: VersionsManifest, repo: str) -> List[str]:
    """
    Names required by ``repo``, in declaration order.

    Returns an empty list for a name that is not in the manifest, which is
    how dangling references end a walk.
    """
    record = manifest.get(repo)
    if record is None:
        return []
    return list(record.dependency_names)


def find_cycle(manifest: VersionsManifest) -> Optional[List[str]]:
    """
    Find one dependency cycle.

    Returns:
        The cycle as a list of names whose first and last entries are the
        same repository, or None if the graph is acyclic.
    """
    explored: Set[str] = set()

    for repo in manifest:
        if repo in explored:
            continue
        path: List[str] = []
        if _walk(manifest, repo, path, set(), explored):
            # Drop the lead-in so the cycle starts at the repeated node
            start = path.index(path[-1])
            cycle = path[start:]
            logger.debug(f"Found dependency cycle: {' -> '.join(cycle)}")
            return cycle

    return None


def _walk(manifest: VersionsManifest, repo: str, path: List[str],
          on_path: Set[str], explored: Set[str]) -> bool:
    if repo in on_path:
        path.append(repo)
        return True
    if repo in explored:
        return False

    path.append(repo)
    on_path.add(repo)

    for dep in dependency_names(manifest, repo):
        if _walk(manifest, dep, path, on_path, explored):
            return True

    path.pop()
    on_path.discard(repo)
    explored.add(repo)
    return False


def detect_circular_dependencies(manifest: VersionsManifest) -> Optional[str]:
    """Return one cycle rendered as 'a -> b -> a', or None."""
    cycle = find_cycle(manifest)
    if cycle is None:
        return None
    return " -> ".join(cycle)


def build_order(manifest: VersionsManifest) -> List[str]:
    """
    Topologically sort the manifest so dependencies come first.

    Dependencies that are not in the manifest are skipped; reporting them
    is the validator's job.

    Raises:
        CircularDependencyError: On the first cycle found. No partial order
            is returned.
    """
    result: List[str] = []
    done: Set[str] = set()
    stack: List[str] = []

    for repo in manifest:
        if repo not in done:
            _visit(manifest, repo, done, stack, result)

    return result


def _visit(manifest: VersionsManifest, repo: str, done: Set[str],
           stack: List[str], result: List[str]) -> None:
    if repo in stack:
        cycle = stack[stack.index(repo):] + [repo]
        raise CircularDependencyError(repo, cycle)
    if repo in done:
        return

    stack.append(repo)
    for dep in dependency_names(manifest, repo):
        if dep in manifest:
            _visit(manifest, dep, done, stack, result)
    stack.pop()

    done.add(repo)
    result.append(repo)


def build_levels(manifest: VersionsManifest) -> List[List[str]]:
    """
    Group repositories into waves that can be built in parallel.

    Level 0 holds repositories with no known dependencies; every later
    level depends only on earlier ones. Names within a level are sorted.

    Raises:
        CircularDependencyError: If the graph has a cycle
    """
    level: Dict[str, int] = {}
    for repo in build_order(manifest):
        deps = [dep for dep in dependency_names(manifest, repo) if dep in manifest]
        level[repo] = 1 + max(level[dep] for dep in deps) if deps else 0

    levels: List[List[str]] = [[] for _ in range(max(level.values(), default=-1) + 1)]
    for repo, index in level.items():
        levels[index].append(repo)
    return [sorted(names) for names in levels]


def dependents_of(manifest: VersionsManifest, name: str, transitive: bool = True) -> List[str]:
    """
    Repositories that require ``name``.

    ``name`` does not have to be in the manifest, so this also answers
    "who is affected by this missing dependency".

    Args:
        manifest: Manifest to search
        name: Repository whose dependents are wanted
        transitive: Also include repositories that depend on it indirectly

    Returns:
        Dependent names in manifest order, excluding ``name`` itself
    """
    reverse: Dict[str, List[str]] = {}
    for repo in manifest:
        for dep in dependency_names(manifest, repo):
            reverse.setdefault(dep, []).append(repo)

    found: Set[str] = set()
    pending = list(reverse.get(name, []))
    while pending:
        repo = pending.pop()
        if repo in found:
            continue
        found.add(repo)
        if transitive:
            pending.extend(reverse.get(repo, []))

    found.discard(name)
    return [repo for repo in manifest if repo in found]
