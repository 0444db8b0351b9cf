"""
Rendering functions for repostream output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

import os
from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

console = Console()


def render_repo_table(root: str, names: List[str]) -> None:
    """
    Render the repositories of a root as a pretty table.

    Args:
        root: Repositories root directory
        names: Repository names under root
    """
    if not names:
        console.print(f"[yellow]No repositories found in {root}.[/yellow]")
        return

    table = Table(
        title=f"Repositories in {root}",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Repository", style="cyan")
    table.add_column("Path", style="dim")

    for name in names:
        table.add_row(name, os.path.join(root, name))

    console.print(table)
