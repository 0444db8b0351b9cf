import click
import json

from ..cli_utils import AppContext, standard_command
from ..config import get_config_path, get_default_config, save_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.pass_obj
def show_config(app: AppContext, pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    if pretty:
        # Pretty print for human readability
        print(json.dumps(app.config, indent=2, ensure_ascii=False))
    else:
        # Default: single-line JSON (JSONL)
        print(json.dumps(app.config, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file")
@standard_command
def init_config(force):
    """Write the default configuration to ~/.repostream/config.json."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        return {"status": "exists", "config_path": str(config_path)}
    written = save_config(get_default_config())
    return {"status": "OK", "config_path": str(written)}
