"""
Service layer for repostream.

Services orchestrate domain validation and infrastructure:
- RepositoryCollection: list, clone and delete repositories under a root
- RepositoryHandle: stream history, diffs, trees and blobs of one repository
"""

from .repository_service import RepositoryHandle
from .collection_service import RepositoryCollection, is_git_repo, remove_tree

__all__ = [
    'RepositoryHandle',
    'RepositoryCollection',
    'is_git_repo',
    'remove_tree',
]
