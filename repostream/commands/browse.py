"""
Browsing commands: log, diff, tree and blob.

These stream git output as it is produced. log, diff and tree write JSON;
blob writes the raw file content. A failure after partial output is
reported as a JSON error object on the following line.
"""

import functools

import click

from ..cli_utils import AppContext, standard_command, stream_to_stdout
from ..services.repository_service import RepositoryHandle


def _open(app: AppContext, repository_id: str) -> RepositoryHandle:
    return RepositoryHandle(app.root, repository_id, config=app.config)


@click.command('log')
@click.argument('repository_id')
@click.argument('revision')
@click.option('--skip', type=click.IntRange(min=0), help='Skip this many commits')
@click.option('--limit', type=click.IntRange(min=0), help='Return at most this many commits')
@click.pass_obj
@standard_command
def log_handler(app: AppContext, repository_id, revision, skip, limit):
    """Stream the commit history of REVISION as a JSON array.

    \b
    Examples:
      repostream log myrepo main
      repostream log myrepo main --skip 20 --limit 20
    """
    handle = _open(app, repository_id)
    stream_to_stdout(functools.partial(handle.get_commits, revision, skip=skip, limit=limit))


@click.command('diff')
@click.argument('repository_id')
@click.argument('revision')
@click.pass_obj
@standard_command
def diff_handler(app: AppContext, repository_id, revision):
    """Stream the patch introduced by commit REVISION as {"diff": ...}."""
    handle = _open(app, repository_id)
    stream_to_stdout(functools.partial(handle.get_commit_diff, revision))


@click.command('tree')
@click.argument('repository_id')
@click.argument('revision', required=False)
@click.argument('path', required=False)
@click.option('-r', '--recursive', is_flag=True, help='Descend into subdirectories')
@click.pass_obj
@standard_command
def tree_handler(app: AppContext, repository_id, revision, path, recursive):
    """Stream the entries of PATH at REVISION (default: HEAD, root) as a JSON array."""
    handle = _open(app, repository_id)
    stream_to_stdout(functools.partial(handle.get_tree, revision, path, recursive))


@click.command('blob')
@click.argument('repository_id')
@click.argument('revision')
@click.argument('path')
@click.pass_obj
@standard_command
def blob_handler(app: AppContext, repository_id, revision, path):
    """Write the content of file PATH at REVISION to stdout, byte for byte."""
    handle = _open(app, repository_id)
    stream_to_stdout(functools.partial(handle.get_blob_content, revision, path), raw=True)
