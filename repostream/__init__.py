"""
repostream - Streaming access to a directory of git repositories.

repostream runs git as a subprocess and converts its output into JSON
while git is still writing it, so commit histories, diffs and tree
listings of any size stream in constant memory.

Quick Start:
    import asyncio
    import repostream

    collection = repostream.RepositoryCollection("/srv/repos")
    print(collection.list())

    handle = collection.open("project")
    chunks = []
    asyncio.run(handle.get_commits(
        "main",
        on_chunk=chunks.append,
        on_error=print,
        on_done=lambda code: None,
    ))
    history = "".join(chunks)

Domain Objects:
    ErrorCode - Closed set of failure kinds
    RepoError - Exception carrying an ErrorCode

Services:
    RepositoryCollection - List, clone, remove
    RepositoryHandle - Commits, diff, tree, blob
"""

__version__ = "0.1.0"

# Domain objects
from .domain import ErrorCode, RepoError, sanitize_repository_id

# Services
from .services import RepositoryCollection, RepositoryHandle

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "ErrorCode",
    "RepoError",
    "sanitize_repository_id",
    # Services
    "RepositoryCollection",
    "RepositoryHandle",
    # Configuration
    "load_config",
    "save_config",
]
