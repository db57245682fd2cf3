"""Command: validate the content corpus end to end."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from corpusctl.commands._base import CorpusCommand

if TYPE_CHECKING:
    from corpusctl.commands._context import AppContext


@click.command(
    cls=CorpusCommand,
    examples="""\
  corpusctl build
  corpusctl build site/src/content/docs
  corpusctl --json build
  corpusctl -q build && echo ok
  CORPUSCTL_BUILD__STRICT=true corpusctl build""",
)
@click.argument(
    "content_dir",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
@click.pass_obj
def build(app: AppContext, content_dir: Path | None) -> None:
    """Validate frontmatter, build the content graph and check its integrity.

    Exits 0 when validated, 2 on schema errors, 3 on duplicate nodes and
    4 on dangling references or prerequisite cycles.
    """
    from corpusctl.services.build import BuildService

    corpus = app.use_content_root(content_dir) if content_dir else app.corpus
    app.emit(BuildService(corpus).build())
