"""Command: audit learning paths against the corpus."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from corpusctl.commands._base import CorpusCommand

if TYPE_CHECKING:
    from corpusctl.commands._context import AppContext


@click.command(
    cls=CorpusCommand,
    examples="""\
  corpusctl paths
  corpusctl --json paths
  CORPUSCTL_PATHS__DIR=site/src/data/learning-paths corpusctl paths""",
)
@click.pass_obj
def paths(app: AppContext) -> None:
    """Check that every learning-path step points at existing content."""
    from corpusctl.services.paths import PathAuditService

    app.emit(PathAuditService(app.corpus).audit())
