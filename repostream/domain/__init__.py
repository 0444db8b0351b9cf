"""
Domain layer for repostream.

Contains pure domain objects with no I/O or side effects:
- ErrorCode / RepoError: the closed failure taxonomy
- Validation of repository identifiers, revisions and tree paths
"""

from .errors import ErrorCode, RepoError
from .validation import (
    sanitize_repository_id,
    validate_revision,
    normalize_tree_path,
    validate_page_value,
)

__all__ = [
    'ErrorCode',
    'RepoError',
    'sanitize_repository_id',
    'validate_revision',
    'normalize_tree_path',
    'validate_page_value',
]
