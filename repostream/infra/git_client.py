"""
Git client infrastructure for repostream.

Builds git argument vectors and runs them through ProcessRunner.
All git invocations go through this client, making them:
- Easy to mock for testing
- Consistent in environment (no prompts, no pager, C locale diagnostics)
- Safe against argument injection: caller values are validated before
  they get here and are placed after '--' wherever git accepts one
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from .process import ProcessRunner, ProcessResult

logger = logging.getLogger(__name__)

GIT_DATA_FOLDER = ".git"

GIT_ENVIRONMENT = {
    "GIT_TERMINAL_PROMPT": "0",   # never block on credential prompts
    "GIT_PAGER": "cat",
    "LC_ALL": "C",                # diagnostics are matched literally
}


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        args = client.ls_tree_args("HEAD", "src", recursive=False)
        result = await client.run(args, cwd="/repos/demo", on_stdout=transcoder.feed)
    """

    def __init__(
        self,
        binary: str = "git",
        read_size: int = 65536,
        kill_grace: float = 5.0,
        max_diagnostic_bytes: int = 65536
    ):
        """
        Initialize GitClient.

        Args:
            binary: git executable
            read_size: Maximum bytes per pipe read
            kill_grace: Seconds between terminate and kill on timeout
            max_diagnostic_bytes: Newest stderr bytes kept for classification
        """
        self.runner = ProcessRunner(
            command=binary,
            read_size=read_size,
            kill_grace=kill_grace,
            max_diagnostic_bytes=max_diagnostic_bytes,
            env=GIT_ENVIRONMENT,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'GitClient':
        """Create a client from the 'general' and 'git' config sections."""
        git_config = config.get("git", {})
        return cls(
            binary=config.get("general", {}).get("git_binary", "git"),
            read_size=int(git_config.get("read_size", 65536)),
            kill_grace=float(git_config.get("kill_grace", 5)),
            max_diagnostic_bytes=int(git_config.get("max_diagnostic_bytes", 65536)),
        )

    async def run(
        self,
        args: List[str],
        cwd: str,
        on_stdout: Optional[Callable[[bytes], None]] = None,
        timeout: Optional[float] = None,
        on_timeout: Optional[Callable[[], None]] = None
    ) -> ProcessResult:
        """Run git with the given arguments in cwd."""
        return await self.runner.run(args, cwd, on_stdout=on_stdout, timeout=timeout, on_timeout=on_timeout)

    @staticmethod
    def clone_args(url: str, destination: Optional[str] = None) -> List[str]:
        """git clone -- <url> [<destination>]"""
        args = ["clone", "--", url]
        if destination:
            args.append(destination)
        return args

    @staticmethod
    def log_args(
        revision: str,
        record_format: str,
        skip: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[str]:
        """git log with a custom record template, restricted to one revision."""
        args = ["log", "--no-color", f"--format={record_format}"]
        if skip:
            args.append(f"--skip={skip}")
        if limit is not None:
            args.append(f"--max-count={limit}")
        args.extend([revision, "--"])
        return args

    @staticmethod
    def show_diff_args(revision: str) -> List[str]:
        """Patch of one commit; merges are diffed against every parent (-m)."""
        return ["show", "--no-color", "--no-ext-diff", "--format=", "-m", "--patch", revision, "--"]

    @staticmethod
    def ls_tree_args(revision: str, path: str = "", recursive: bool = False) -> List[str]:
        """
        Long-format, NUL-terminated tree listing.

        The tree-ish is '<revision>:<path>' so the entries of the directory
        itself are listed, with names relative to it.
        """
        args = ["ls-tree", "-l", "-z"]
        if recursive:
            args.append("-r")
        tree_ish = f"{revision}:{path}" if path else revision
        args.extend(["--", tree_ish])
        return args

    @staticmethod
    def cat_blob_args(revision: str, path: str) -> List[str]:
        """Raw content of <revision>:<path>; git refuses anything but a blob."""
        return ["cat-file", "blob", f"{revision}:{path}"]

    @staticmethod
    def verify_tree_args(revision: str) -> List[str]:
        """Exit 0 only if revision names a tree-ish."""
        return ["rev-parse", "--verify", "--quiet", f"{revision}^{{tree}}"]
