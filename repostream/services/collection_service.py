"""
Repository collection service for repostream.

Handles the repositories that live directly under one root directory:
listing them, cloning new ones and deleting existing ones.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

from ..domain.errors import ErrorCode, RepoError
from ..domain.validation import sanitize_repository_id
from ..infra.classifier import CLONE_RULES, ErrorClassifier
from ..infra.git_client import GIT_DATA_FOLDER, GitClient
from .repository_service import RepositoryHandle

logger = logging.getLogger(__name__)

DEFAULT_CLONE_TIMEOUT = 60


def is_git_repo(root: str, repository_id: str) -> bool:
    """Check whether <root>/<repository_id> holds git metadata."""
    return os.path.isdir(os.path.join(root, repository_id, GIT_DATA_FOLDER))


def remove_tree(path: str) -> None:
    """
    Delete a directory tree depth-first.

    Files and symbolic links are unlinked; a link is never followed, even
    when it points at a directory. Directories are emptied before rmdir.
    """
    with os.scandir(path) as entries:
        for entry in entries:
            if entry.is_symlink():
                os.unlink(entry.path)
            elif entry.is_dir(follow_symlinks=False):
                remove_tree(entry.path)
            else:
                os.unlink(entry.path)
    os.rmdir(path)


class RepositoryCollection:
    """
    The git repositories under a root directory.

    Example:
        collection = RepositoryCollection("/srv/repos")
        print(collection.list())
        await collection.clone_repo("https://github.com/owner/project.git")
        await collection.remove_repo("project")
    """

    def __init__(
        self,
        root: str,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        """
        Initialize RepositoryCollection.

        Args:
            root: Directory containing the repositories
            config: Configuration dict (defaults apply if None)
            git_client: GitClient instance (created from config if None)

        Raises:
            RepoError: ROOT_NOT_FOUND if root does not exist
        """
        self.root = os.path.abspath(root)
        if not os.path.isdir(self.root):
            raise RepoError(ErrorCode.ROOT_NOT_FOUND, f"Repositories root not found: {root}")

        self.config = config or {}
        self.git = git_client or GitClient.from_config(self.config)
        self.clone_timeout = float(self.config.get("git", {}).get("clone_timeout", DEFAULT_CLONE_TIMEOUT))

    def list(self) -> List[str]:
        """Names of the immediate subdirectories that are git repositories."""
        with os.scandir(self.root) as entries:
            names = [
                entry.name for entry in entries
                if entry.is_dir(follow_symlinks=False) and is_git_repo(self.root, entry.name)
            ]
        return sorted(names)

    def open(self, repository_id: str) -> RepositoryHandle:
        """Create a handle for one repository of this collection."""
        return RepositoryHandle(self.root, repository_id, config=self.config, git_client=self.git)

    def _resolve(self, sanitized_id: str) -> str:
        path = os.path.realpath(os.path.join(self.root, sanitized_id))
        root = os.path.realpath(self.root)
        if path == root or not path.startswith(root + os.sep):
            raise RepoError(ErrorCode.INVALID_IDENTIFIER, f"{sanitized_id} resolves outside the root")
        return path

    async def remove_repo(self, repository_id: str) -> None:
        """
        Delete a repository and everything in it.

        Raises:
            RepoError: INVALID_IDENTIFIER or REPOSITORY_NOT_FOUND
        """
        sanitized_id = sanitize_repository_id(repository_id)
        if not sanitized_id:
            raise RepoError(ErrorCode.INVALID_IDENTIFIER, f"Invalid repository identifier: {repository_id!r}")
        if not is_git_repo(self.root, sanitized_id):
            raise RepoError(ErrorCode.REPOSITORY_NOT_FOUND, f"Repository not found: {repository_id}")

        path = self._resolve(sanitized_id)
        logger.info(f"Removing repository {path}")
        await asyncio.to_thread(remove_tree, path)

    async def clone_repo(self, url: str, repository_id: Optional[str] = None) -> str:
        """
        Clone a remote repository into the root.

        Args:
            url: Remote repository URL, handed to git unchanged
            repository_id: Destination name (git derives one from the URL if None)

        Returns:
            The destination name

        Raises:
            RepoError: INVALID_IDENTIFIER, INVALID_REMOTE_URL,
                REPOSITORY_ALREADY_EXISTS, TIMEOUT_EXCEEDED or UNEXPECTED_ERROR
        """
        destination = None
        if repository_id is not None:
            sanitized_id = sanitize_repository_id(repository_id)
            if not sanitized_id:
                raise RepoError(ErrorCode.INVALID_IDENTIFIER, f"Invalid repository identifier: {repository_id!r}")
            destination = sanitized_id.rstrip('/')

        if not url or not url.strip():
            raise RepoError(ErrorCode.INVALID_REMOTE_URL, "Remote URL must not be empty")

        logger.info(f"Cloning {url} into {self.root}")
        result = await self.git.run(
            GitClient.clone_args(url, destination),
            cwd=self.root,
            timeout=self.clone_timeout,
        )

        if result.timed_out:
            raise RepoError(ErrorCode.TIMEOUT_EXCEEDED, f"Clone of {url} exceeded {self.clone_timeout:g}s")

        code = ErrorClassifier(CLONE_RULES).classify(result.exit_code, result.diagnostics)
        if code is not None:
            raise RepoError(code, ErrorClassifier.last_line(result.diagnostics))

        return destination or _cloned_name(result.diagnostics, url)


def _cloned_name(diagnostics: str, url: str) -> str:
    """Directory git picked for the clone ("Cloning into 'name'..."), else a guess from the URL."""
    for line in diagnostics.splitlines():
        if line.startswith("Cloning into '") and "'" in line[len("Cloning into '"):]:
            return line[len("Cloning into '"):].split("'", 1)[0]
    name = url.rstrip('/').rsplit('/', 1)[-1].rsplit(':', 1)[-1]
    return name[:-len(".git")] if name.endswith(".git") else name
