"""
Exit codes for repoversions commands.

0-2 follow shell conventions; the 64+ range is used for outcomes a build
script may want to branch on.
"""
from typing import Optional, Sequence

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2          # click reports bad arguments with this code

REPO_NOT_FOUND = 64      # named repository is not in the manifest
MANIFEST_ERROR = 65      # manifest missing, unreadable or malformed
CONFIG_ERROR = 66        # configuration file problem
VALIDATION_FAILED = 67   # manifest loaded but has validation errors
CYCLE_ERROR = 68         # circular dependency, no build order exists
DATA_ERROR = 70          # bad value reaching a command
INTERRUPTED = 130        # Ctrl+C

# Keyed by class name so the core never imports CLI code
EXCEPTION_EXIT_CODES = {
    'LoadError': MANIFEST_ERROR,
    'ParseError': MANIFEST_ERROR,
    'CircularDependencyError': CYCLE_ERROR,
    'ValueError': DATA_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: BaseException) -> int:
    """Map an exception to an exit code, GENERAL_ERROR if it is unknown."""
    return EXCEPTION_EXIT_CODES.get(type(exc).__name__, GENERAL_ERROR)


class CommandError(Exception):
    """A command failure that carries its own exit code."""

    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class RepoNotFoundError(CommandError):
    def __init__(self, repo: str):
        super().__init__(f"Repository '{repo}' is not defined in the manifest", REPO_NOT_FOUND)
        self.repo = repo


class ConfigError(CommandError):
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class ValidationFailedError(CommandError):
    """The manifest failed validation; ``errors`` holds every message."""

    def __init__(self, errors: Sequence[str], message: Optional[str] = None):
        count = len(errors)
        super().__init__(
            message or f"Manifest validation failed with {count} error{'' if count == 1 else 's'}",
            VALIDATION_FAILED,
        )
        self.errors = list(errors)
