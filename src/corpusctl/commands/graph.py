"""Command group: content graph queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from corpusctl.commands._base import CorpusGroup
from corpusctl.domain.types import EdgeKind
from corpusctl.services.graph import GraphService

if TYPE_CHECKING:
    from corpusctl.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  corpusctl graph nodes
  corpusctl graph edges authentication/mid-depth
  corpusctl graph neighbors authentication/deep-water --kind prerequisite
  corpusctl --json graph neighbors authentication/surface --kind related"""


@click.group(cls=CorpusGroup, examples=_GRAPH_EXAMPLES)
@click.pass_obj
def graph(app: AppContext) -> None:
    """Query the prerequisite and related-topic graph."""


@graph.command(
    examples="""\
  corpusctl graph nodes
  corpusctl -v graph nodes
  corpusctl -q graph nodes"""
)
@click.pass_obj
def nodes(app: AppContext) -> None:
    """List every document node."""
    app.emit(GraphService(app.corpus).nodes())


@graph.command(
    examples="""\
  corpusctl graph edges authentication/mid-depth
  corpusctl --json graph edges authentication/deep-water"""
)
@click.argument("node_id")
@click.pass_obj
def edges(app: AppContext, node_id: str) -> None:
    """List outgoing edges of NODE_ID, unresolved targets included."""
    app.emit(GraphService(app.corpus).edges_from(node_id))


@graph.command(
    examples="""\
  corpusctl graph neighbors authentication/deep-water
  corpusctl graph neighbors authentication/surface --kind related"""
)
@click.argument("node_id")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in EdgeKind]),
    default=EdgeKind.PREREQUISITE.value,
    show_default=True,
    help="Edge kind to follow.",
)
@click.pass_obj
def neighbors(app: AppContext, node_id: str, kind: str) -> None:
    """List nodes adjacent to NODE_ID through edges of one kind."""
    app.emit(GraphService(app.corpus).neighbors(node_id, kind))
