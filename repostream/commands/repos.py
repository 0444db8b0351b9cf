"""
Repository lifecycle commands: list, clone and remove.

Output is a single JSON line on stdout; --pretty on list renders a table.
"""

import asyncio

import click

from ..cli_utils import AppContext, standard_command
from ..render import render_repo_table
from ..services.collection_service import RepositoryCollection


@click.command('list')
@click.option('--pretty', is_flag=True, help='Display as a formatted table')
@click.pass_obj
@standard_command
def list_handler(app: AppContext, pretty):
    """List the git repositories under the root directory.

    \b
    Examples:
      repostream list
      repostream --root /srv/repos list --pretty
    """
    collection = RepositoryCollection(app.root, config=app.config)
    names = collection.list()
    if pretty:
        render_repo_table(collection.root, names)
        return None
    return names


@click.command('clone')
@click.argument('url')
@click.argument('repository_id', required=False)
@click.pass_obj
@standard_command
def clone_handler(app: AppContext, url, repository_id):
    """Clone URL into the root directory, optionally as REPOSITORY_ID.

    The clone is aborted after git.clone_timeout seconds (default 60).
    """
    collection = RepositoryCollection(app.root, config=app.config)
    name = asyncio.run(collection.clone_repo(url, repository_id))
    return {"status": "OK", "repository": name}


@click.command('remove')
@click.argument('repository_id')
@click.pass_obj
@standard_command
def remove_handler(app: AppContext, repository_id):
    """Delete the repository REPOSITORY_ID and all of its files."""
    collection = RepositoryCollection(app.root, config=app.config)
    asyncio.run(collection.remove_repo(repository_id))
    return {"status": "OK"}
