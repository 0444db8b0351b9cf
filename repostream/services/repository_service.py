"""
Repository service for repostream.

RepositoryHandle binds a validated repository identifier to its directory
and runs the read-only browsing operations against it. Every operation
streams: chunks go to on_chunk while git is still running, followed by
exactly one terminal callback, on_done(exit_code) or on_error(RepoError).

Output emitted before a late failure is not taken back. The transcoder
still closes its wrapper, so a caller sees a terminated but incomplete
document followed by the error.
"""

import logging
import os
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from ..domain.errors import ErrorCode, RepoError
from ..domain.validation import (
    normalize_tree_path,
    sanitize_repository_id,
    validate_page_value,
    validate_revision,
)
from ..infra.classifier import (
    BLOB_RULES,
    DIFF_RULES,
    LOG_RULES,
    TREE_RULES,
    ClassifierRule,
    ErrorClassifier,
)
from ..infra.git_client import GIT_DATA_FOLDER, GitClient
from ..transcoders import (
    BlobTranscoder,
    DiffTranscoder,
    LogTranscoder,
    StreamTranscoder,
    TreeTranscoder,
)
from ..transcoders.base import Emit

logger = logging.getLogger(__name__)

OnError = Callable[[RepoError], None]
OnDone = Callable[[int], None]

DEFAULT_REVISION = "HEAD"


class RepositoryHandle:
    """
    One git repository under the repositories root.

    Example:
        handle = RepositoryHandle("/srv/repos", "project")
        await handle.get_commits("main", chunks.append, errors.append, done.append)
        commits = json.loads("".join(chunks))
    """

    def __init__(
        self,
        root: str,
        repository_id: str,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None
    ):
        """
        Initialize RepositoryHandle.

        Args:
            root: Repositories root directory
            repository_id: Untrusted repository identifier
            config: Configuration dict (defaults apply if None)
            git_client: GitClient instance (created from config if None)

        Raises:
            RepoError: ROOT_NOT_FOUND, INVALID_IDENTIFIER or REPOSITORY_NOT_FOUND
        """
        root = os.path.abspath(root)
        if not os.path.isdir(root):
            raise RepoError(ErrorCode.ROOT_NOT_FOUND, f"Repositories root not found: {root}")

        sanitized_id = sanitize_repository_id(repository_id)
        if not sanitized_id:
            raise RepoError(ErrorCode.INVALID_IDENTIFIER, f"Invalid repository identifier: {repository_id!r}")

        path = os.path.join(root, sanitized_id)
        if not os.path.isdir(os.path.join(path, GIT_DATA_FOLDER)):
            raise RepoError(ErrorCode.REPOSITORY_NOT_FOUND, f"Repository not found: {repository_id}")

        self.repository_id = sanitized_id.rstrip('/')
        self.path = os.path.normpath(path)
        self.git = git_client or GitClient.from_config(config or {})

    def __repr__(self) -> str:
        return f"RepositoryHandle({self.repository_id!r}, path={self.path!r})"

    async def _stream(
        self,
        args: List[str],
        transcoder: StreamTranscoder,
        rules: Sequence[ClassifierRule],
        on_error: OnError,
        on_done: OnDone,
        refine: Optional[Callable[[RepoError], Awaitable[RepoError]]] = None
    ) -> None:
        """
        Run git, feed stdout to the transcoder, then report the outcome.

        refine may replace a classified error with a more precise one.
        """
        try:
            result = await self.git.run(args, cwd=self.path, on_stdout=transcoder.feed)
        except RepoError as e:
            transcoder.close(success=False)
            on_error(e)
            return

        transcoder.close(success=result.success)

        code = ErrorClassifier(rules).classify(result.exit_code, result.diagnostics)
        if code is None:
            on_done(result.exit_code)
        else:
            error = RepoError(code, ErrorClassifier.last_line(result.diagnostics))
            if refine is not None:
                error = await refine(error)
            logger.debug(f"git {args[0]} in {self.repository_id} failed: {error.code.value}")
            on_error(error)

    async def get_commits(
        self,
        revision: str,
        on_chunk: Emit,
        on_error: OnError,
        on_done: OnDone,
        skip: Optional[int] = None,
        limit: Optional[int] = None
    ) -> None:
        """
        Stream the history reachable from revision as a JSON array of commits.

        Args:
            revision: Commit hash or branch name
            skip: Number of commits to skip (pagination)
            limit: Maximum number of commits (pagination)
        """
        try:
            validate_revision(revision)
            validate_page_value(skip, "skip")
            validate_page_value(limit, "limit")
        except RepoError as e:
            on_error(e)
            return

        transcoder = LogTranscoder(on_chunk)
        args = GitClient.log_args(revision, transcoder.record_format, skip=skip, limit=limit)
        await self._stream(args, transcoder, LOG_RULES, on_error, on_done)

    async def get_commit_diff(
        self,
        revision: str,
        on_chunk: Emit,
        on_error: OnError,
        on_done: OnDone
    ) -> None:
        """Stream the patch of one commit as {"diff": "..."}."""
        try:
            validate_revision(revision)
        except RepoError as e:
            on_error(e)
            return

        await self._stream(
            GitClient.show_diff_args(revision),
            DiffTranscoder(on_chunk),
            DIFF_RULES,
            on_error,
            on_done,
        )

    async def get_tree(
        self,
        revision: Optional[str],
        path: Optional[str],
        recursive: bool,
        on_chunk: Emit,
        on_error: OnError,
        on_done: OnDone
    ) -> None:
        """
        Stream the entries of a directory at a revision as a JSON array.

        Args:
            revision: Commit hash or branch name (HEAD if None)
            path: Directory inside the repository (root if None or empty)
            recursive: Descend into subdirectories
        """
        try:
            revision = validate_revision(revision or DEFAULT_REVISION)
            path = normalize_tree_path(path)
        except RepoError as e:
            on_error(e)
            return

        async def missing_path(error: RepoError) -> RepoError:
            # git reports "<rev>:<path>" as one unknown object name
            if path and error.code is ErrorCode.REVISION_NOT_FOUND and await self._is_tree_ish(revision):
                return RepoError(ErrorCode.FILE_NOT_FOUND, f"Path not found at {revision}: {path}")
            return error

        await self._stream(
            GitClient.ls_tree_args(revision, path, recursive=recursive),
            TreeTranscoder(on_chunk),
            TREE_RULES,
            on_error,
            on_done,
            refine=missing_path,
        )

    async def _is_tree_ish(self, revision: str) -> bool:
        result = await self.git.run(GitClient.verify_tree_args(revision), cwd=self.path)
        return result.success

    async def get_blob_content(
        self,
        revision: str,
        path: str,
        on_chunk: Emit,
        on_error: OnError,
        on_done: OnDone
    ) -> None:
        """Stream the raw bytes of a file at a revision."""
        try:
            validate_revision(revision)
            path = normalize_tree_path(path)
            if not path:
                raise RepoError(ErrorCode.INVALID_ARGUMENT, "A file path is required")
        except RepoError as e:
            on_error(e)
            return

        await self._stream(
            GitClient.cat_blob_args(revision, path),
            BlobTranscoder(on_chunk),
            BLOB_RULES,
            on_error,
            on_done,
        )
