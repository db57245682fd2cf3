"""Subcommand modules for corpusctl.

Provides register_commands(), which imports command modules lazily so
``corpusctl --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command group and standalone commands on the root CLI group."""
    # --- Groups ---
    from corpusctl.commands.graph import graph

    cli.add_command(graph)

    # --- Standalone commands ---
    from corpusctl.commands.build import build
    from corpusctl.commands.export import export
    from corpusctl.commands.paths import paths

    cli.add_command(build)
    cli.add_command(paths)
    cli.add_command(export)
