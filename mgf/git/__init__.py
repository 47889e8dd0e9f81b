"""Git queries.

Usage:
    from mgf.git import Repository

    repo = Repository(Path("/path/to/project"))
    repo.branch_exists("release/1.0.0")
"""

from .repository import GitError, Repository

__all__ = ["GitError", "Repository"]
