"""
Shared fixtures for repostream tests.

Repositories are built with the real git binary inside tmp_path; tests
that need one are skipped when git is not installed.
"""

import asyncio
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pytest

GIT = shutil.which("git")

requires_git = pytest.mark.skipif(GIT is None, reason="git is not installed")

TRICKY_SUBJECT = 'Fix "quoted" {braces} and back\\slash in naïve café ☕'
TRICKY_BODY = 'Line one with "quotes"\n\tTabbed {"json": "lookalike"}\nback\\\\slashes and 日本語\n'


def run_git(cwd, *args, input_text=None) -> str:
    """Run git with a fixed identity and no user/system configuration."""
    env = os.environ.copy()
    env.update({
        "GIT_AUTHOR_NAME": 'Zoë "Z" O\'Brien',
        "GIT_AUTHOR_EMAIL": "zoe@example.com",
        "GIT_COMMITTER_NAME": "Committer",
        "GIT_COMMITTER_EMAIL": "committer@example.com",
        "GIT_CONFIG_GLOBAL": os.devnull,
        "GIT_CONFIG_NOSYSTEM": "1",
        "LC_ALL": "C",
    })
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        env=env,
        input=input_text,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=True,
    )
    return result.stdout.strip()


def init_repo(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", "-q")
    run_git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    return path


def commit_all(path: Path, message: str) -> str:
    run_git(path, "add", "-A")
    run_git(path, "commit", "-q", "--allow-empty", "-F", "-", input_text=message)
    return run_git(path, "rev-parse", "HEAD")


@dataclass
class DemoRepos:
    """A repositories root holding one populated repository."""
    root: Path
    name: str
    path: Path
    commits: List[str] = field(default_factory=list)
    files: Dict[str, bytes] = field(default_factory=dict)


@pytest.fixture
def demo_repos(tmp_path) -> DemoRepos:
    """
    Root with:
      demo/   two commits (README.md, src/app.py, binary.dat)
      plain/  an ordinary directory
    """
    root = tmp_path / "repos"
    root.mkdir()
    (root / "plain").mkdir()

    repo = init_repo(root / "demo")
    files = {
        "README.md": b"# Demo\n",
        "src/app.py": b"print('hello')\n",
        "binary.dat": bytes(range(256)),
    }
    for name, content in files.items():
        target = repo / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    first = commit_all(repo, "Initial commit\n")

    files["README.md"] = b"# Demo\n\nNow with \"quotes\" and caf\xc3\xa9.\n"
    (repo / "README.md").write_bytes(files["README.md"])
    second = commit_all(repo, f"{TRICKY_SUBJECT}\n\n{TRICKY_BODY}")

    return DemoRepos(root=root, name="demo", path=repo, commits=[first, second], files=files)


@pytest.fixture
def collect():
    """
    Run a streaming operation and gather what it reports.

    Returns (chunks, errors, done) lists.
    """
    def _collect(operation, *args, **kwargs):
        chunks, errors, done = [], [], []
        asyncio.run(operation(*args, chunks.append, errors.append, done.append, **kwargs))
        return chunks, errors, done

    return _collect
