"""Git operations for pkgsmith."""

from pkgsmith.git.repository import (
    GitBackend,
    GitError,
    GitRepository,
    RepositoryClosedError,
)

__all__ = [
    "GitBackend",
    "GitError",
    "GitRepository",
    "RepositoryClosedError",
]
