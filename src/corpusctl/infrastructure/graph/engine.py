"""Content graph — NetworkX MultiDiGraph over validated documents.

Rebuilt per invocation from the corpus snapshot, never cached. Nodes are
``topic/depth`` ids (bare ``topic`` for depthless documents); edges are
keyed by :class:`EdgeKind` so a prerequisite and a related link between
the same pair stay distinct.

References that resolve to nothing are kept as edges to a node flagged
``missing``. They are not part of :meth:`ContentGraph.nodes` and are what
the dangling-reference check reports.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import networkx as nx

from corpusctl.domain.document import SourcedDocument
from corpusctl.domain.ids import reference_candidates
from corpusctl.domain.issues import GraphConstructionError
from corpusctl.domain.types import Depth, EdgeKind

logger = logging.getLogger(__name__)

type _Graph = nx.MultiDiGraph


@dataclass(frozen=True, order=True)
class Edge:
    """A declared relation between two nodes.

    Attributes:
        source: Node id of the declaring document.
        target: Resolved node id, or the raw identifier if unresolved.
        kind: ``prerequisite`` or ``related``.
        reference: The identifier as written in frontmatter.
        origin: File that declared the edge.
    """

    source: str
    target: str
    kind: EdgeKind
    reference: str
    origin: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "kind": str(self.kind),
            "reference": self.reference,
            "origin": self.origin,
        }


class ContentGraph:
    """Read-only view over the built graph."""

    def __init__(self, graph: _Graph) -> None:
        self._graph = graph

    @property
    def graph(self) -> _Graph:
        """The underlying NetworkX graph (includes missing-target nodes)."""
        return self._graph

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def nodes(self) -> list[str]:
        """Ids of all document nodes, sorted."""
        return sorted(n for n, missing in self._graph.nodes(data="missing") if not missing)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._graph and not self._graph.nodes[node_id]["missing"]

    def node(self, node_id: str) -> SourcedDocument:
        """The document behind *node_id*.

        Raises:
            KeyError: If no document defines the node.
        """
        self._require(node_id)
        entry: SourcedDocument = self._graph.nodes[node_id]["entry"]
        return entry

    def topics(self) -> dict[str, list[Depth]]:
        """Depths present per topic, in reading order. Depthless nodes excluded."""
        present: dict[str, set[Depth]] = {}
        for node_id in self.nodes():
            doc = self.node(node_id).document
            if doc.depth is not None:
                present.setdefault(doc.topic, set()).add(doc.depth)
        return {
            topic: sorted(depths, key=lambda d: d.rank)
            for topic, depths in sorted(present.items())
        }

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def edges(self, kind: EdgeKind | None = None) -> list[Edge]:
        """All declared edges (including dangling ones), sorted."""
        result = [
            self._edge(u, v, k, data)
            for u, v, k, data in self._graph.edges(keys=True, data=True)
            if kind is None or k == kind
        ]
        return sorted(result)

    def edges_from(self, node_id: str) -> list[Edge]:
        """Outgoing edges of a document node, sorted."""
        self._require(node_id)
        return sorted(
            self._edge(u, v, k, data)
            for u, v, k, data in self._graph.out_edges(node_id, keys=True, data=True)
        )

    def neighbors(self, node_id: str, kind: EdgeKind | str) -> list[str]:
        """Existing nodes adjacent to *node_id* through *kind* edges.

        Prerequisite neighbours are the nodes it lists as prerequisites.
        Related edges are undirected: both declared and incoming links count.
        """
        self._require(node_id)
        kind = EdgeKind(kind)
        found = {v for _, v, k in self._graph.out_edges(node_id, keys=True) if k == kind}
        if kind is EdgeKind.RELATED:
            found |= {u for u, _, k in self._graph.in_edges(node_id, keys=True) if k == kind}
        return sorted(n for n in found if self.has_node(n))

    def prerequisite_successors(self, node_id: str) -> list[str]:
        """Prerequisite targets of *node_id* that exist, sorted."""
        return sorted(
            v
            for _, v, k in self._graph.out_edges(node_id, keys=True)
            if k == EdgeKind.PREREQUISITE and self.has_node(v)
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        nodes: list[dict[str, Any]] = []
        for node_id in self.nodes():
            entry = self.node(node_id)
            nodes.append(
                {
                    "id": node_id,
                    "topic": entry.document.topic,
                    "depth": str(entry.document.depth) if entry.document.depth else None,
                    "phase": entry.document.phase,
                    "title": entry.document.title,
                    "source": entry.source,
                }
            )
        return {"nodes": nodes, "edges": [e.to_dict() for e in self.edges()]}

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, node_id: str) -> None:
        if not self.has_node(node_id):
            msg = f"Node '{node_id}' not found in graph"
            raise KeyError(msg)

    @staticmethod
    def _edge(u: str, v: str, k: str, data: dict[str, Any]) -> Edge:
        return Edge(
            source=u,
            target=v,
            kind=EdgeKind(k),
            reference=data["reference"],
            origin=data["origin"],
        )


@dataclass(frozen=True)
class GraphBuild:
    """Outcome of graph construction: the graph plus duplicate-node errors."""

    graph: ContentGraph
    errors: tuple[GraphConstructionError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build_graph(documents: Iterable[SourcedDocument]) -> GraphBuild:
    """Assemble validated documents into a :class:`ContentGraph`.

    Input order does not matter: documents are sorted by node id and source
    before insertion. When several files claim one node, the first by
    source path defines it and every other claimant is reported.
    """
    ordered = sorted(documents, key=lambda d: (d.node_id, d.source))

    claims: dict[str, list[SourcedDocument]] = {}
    for entry in ordered:
        claims.setdefault(entry.node_id, []).append(entry)

    g: _Graph = nx.MultiDiGraph()
    errors: list[GraphConstructionError] = []
    for nid, entries in claims.items():
        g.add_node(nid, entry=entries[0], missing=False)
        errors.extend(_duplicate_errors(nid, entries))

    entry_points = _topic_entry_points(claims)

    for nid, entries in claims.items():
        entry = entries[0]
        doc = entry.document
        for kind, references in (
            (EdgeKind.PREREQUISITE, doc.prerequisites),
            (EdgeKind.RELATED, doc.related_topics),
        ):
            for reference in references:
                target = _resolve(reference, claims, entry_points)
                if target is None:
                    target = reference.strip()
                    if target not in g:
                        g.add_node(target, entry=None, missing=True)
                if g.has_edge(nid, target, key=kind):
                    continue
                g.add_edge(nid, target, key=kind, reference=reference, origin=entry.source)

    logger.debug(
        "Built graph: %d nodes, %d edges, %d duplicate claims",
        len(claims),
        g.number_of_edges(),
        len(errors),
    )
    return GraphBuild(graph=ContentGraph(g), errors=tuple(errors))


def _duplicate_errors(nid: str, entries: list[SourcedDocument]) -> list[GraphConstructionError]:
    if len(entries) < 2:
        return []
    first = entries[0]
    sources = [e.source for e in entries]
    field = "depth" if first.document.depth is not None else "topic"
    return [
        GraphConstructionError(
            source=dup.source,
            field=field,
            message=f"duplicate node '{nid}' (already defined in {first.source})",
            detail={"node": nid, "sources": sources},
        )
        for dup in entries[1:]
    ]


def _topic_entry_points(claims: dict[str, list[SourcedDocument]]) -> dict[str, str]:
    """Map each topic to its shallowest depth-tagged node."""
    best: dict[str, tuple[int, str]] = {}
    for nid, entries in claims.items():
        doc = entries[0].document
        if doc.depth is None:
            continue
        current = best.get(doc.topic)
        if current is None or doc.depth.rank < current[0]:
            best[doc.topic] = (doc.depth.rank, nid)
    return {topic: nid for topic, (_, nid) in best.items()}


def _resolve(
    reference: str,
    claims: dict[str, list[SourcedDocument]],
    entry_points: dict[str, str],
) -> str | None:
    """Resolve a reference to a node id: exact id, content path, then topic."""
    for candidate in reference_candidates(reference):
        if candidate in claims:
            return candidate
    return entry_points.get(reference.strip())
