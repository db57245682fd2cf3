"""Command: export the validated corpus as a JSON manifest."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from corpusctl.commands._base import CorpusCommand

if TYPE_CHECKING:
    from corpusctl.commands._context import AppContext


@click.command(
    cls=CorpusCommand,
    examples="""\
  corpusctl --json export > manifest.json
  corpusctl export""",
)
@click.pass_obj
def export(app: AppContext) -> None:
    """Export documents, nodes and edges for the site renderer.

    Refuses to export unless the build is validated.
    """
    from corpusctl.services.export import ExportService

    app.emit(ExportService(app.corpus).export())
