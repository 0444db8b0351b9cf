#!/usr/bin/env python3

import json

import click

from repostream.cli_utils import AppContext
from repostream.config import load_config, configure_logging
from repostream.exit_codes import ConfigError

from repostream.commands.repos import list_handler, clone_handler, remove_handler
from repostream.commands.browse import log_handler, diff_handler, tree_handler, blob_handler
from repostream.commands.config import config_cmd


@click.group()
@click.version_option(package_name="repostream")
@click.option('--root', type=click.Path(file_okay=False),
              help='Repositories root directory (default: general.repos_dir)')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging on stderr')
@click.pass_context
def cli(ctx, root, verbose):
    """repostream - Browse and manage a directory of git repositories.

    Git output is transcoded to JSON while git is still running, so large
    histories and diffs stream instead of buffering.
    """
    try:
        config = load_config()
    except ConfigError as e:
        click.echo(json.dumps({"error": str(e), "type": "ConfigError", "exit_code": e.exit_code}))
        ctx.exit(e.exit_code)

    configure_logging(config, verbose)
    ctx.obj = AppContext(config=config, root_override=root)


# Repository lifecycle
cli.add_command(list_handler, name='list')
cli.add_command(clone_handler, name='clone')
cli.add_command(remove_handler, name='remove')

# Browsing
cli.add_command(log_handler, name='log')
cli.add_command(diff_handler, name='diff')
cli.add_command(tree_handler, name='tree')
cli.add_command(blob_handler, name='blob')

# Command groups
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
