"""
Validation of untrusted request parameters.

Repository identifiers, revisions and paths arrive from outside and end up
as filesystem paths or git arguments. Everything here is pure: no I/O and
no side effects.
"""

import posixpath
import re
from typing import Optional

from .errors import ErrorCode, RepoError

# Whitespace and ASCII control characters, including NUL and DEL
_UNSAFE_CHARS = re.compile(r'[\s\x00-\x1f\x7f]')


def sanitize_repository_id(name: Optional[str]) -> Optional[str]:
    """
    Normalize a repository identifier.

    Resolves '.' and '..' segments and appends a trailing separator.

    Args:
        name: Raw identifier from the caller

    Returns:
        Normalized identifier ending with '/', or None if it is empty,
        absolute, or escapes the repositories root
    """
    if not name or not name.strip():
        return None

    normalized = posixpath.normpath(name)
    if normalized in ('.', '..') or normalized.startswith('../'):
        return None
    if posixpath.isabs(normalized):
        return None

    return normalized + '/'


def validate_revision(revision: Optional[str]) -> str:
    """
    Check that a revision cannot be parsed by git as anything but a revision.

    Rejects option-like values ('-n1'), negations ('^main'), ranges
    ('a..b'), the rev:path separator and whitespace/control characters.

    Raises:
        RepoError: INVALID_ARGUMENT
    """
    if not revision:
        raise RepoError(ErrorCode.INVALID_ARGUMENT, "Revision must not be empty")
    if revision.startswith(('-', '^')):
        raise RepoError(ErrorCode.INVALID_ARGUMENT, f"Invalid revision: {revision}")
    if ':' in revision or '..' in revision or _UNSAFE_CHARS.search(revision):
        raise RepoError(ErrorCode.INVALID_ARGUMENT, f"Invalid revision: {revision}")
    return revision


def normalize_tree_path(path: Optional[str]) -> str:
    """
    Normalize a path inside a repository tree.

    Returns '' for the repository root. Leading and trailing slashes are
    dropped.

    Raises:
        RepoError: INVALID_ARGUMENT if the path escapes the tree or holds
            control characters
    """
    if not path:
        return ''

    stripped = path.strip('/')
    if not stripped:
        return ''
    if re.search(r'[\x00-\x1f\x7f]', stripped):
        raise RepoError(ErrorCode.INVALID_ARGUMENT, f"Invalid path: {path!r}")

    normalized = posixpath.normpath(stripped)
    if normalized == '.':
        return ''
    if normalized == '..' or normalized.startswith('../'):
        raise RepoError(ErrorCode.INVALID_ARGUMENT, f"Invalid path: {path}")
    return normalized


def validate_page_value(value: Optional[int], name: str) -> Optional[int]:
    """Validate an optional non-negative pagination value (skip/limit)."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RepoError(ErrorCode.INVALID_ARGUMENT, f"{name} must be a non-negative integer")
    return value
