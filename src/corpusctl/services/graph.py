"""GraphService — read-only queries over the content graph.

Queries need a graph, so they run the pipeline first and refuse to answer
when schema validation or graph construction failed. Integrity failures
do not block queries: a dangling reference is still a useful thing to
look at.
"""

from __future__ import annotations

from typing import Any

from corpusctl.domain.types import BuildState, EdgeKind
from corpusctl.infrastructure.graph.engine import ContentGraph
from corpusctl.services.base import BaseService
from corpusctl.services.build import BuildService
from corpusctl.services.result import ServiceResult
from corpusctl.services.telemetry import traced

_BLOCKING_STATES = frozenset({BuildState.SCHEMA_FAILED, BuildState.GRAPH_FAILED})


class GraphService(BaseService):
    """Handles node and edge queries."""

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _load_graph(self, op: str) -> ContentGraph | ServiceResult:
        """Return the graph, or a failed result explaining why there is none."""
        report = BuildService(self._corpus).run()
        if report.state in _BLOCKING_STATES or report.graph is None:
            return ServiceResult.failure(
                op,
                report.state.error_code,
                f"Graph unavailable: build is {report.state} "
                f"({len(report.errors)} error(s)); run 'corpusctl build' for details",
                state=str(report.state),
                exit_code=report.state.exit_code,
            )
        return report.graph

    @staticmethod
    def _not_found(op: str, node_id: str) -> ServiceResult:
        return ServiceResult.failure(op, "NOT_FOUND", f"Node '{node_id}' not found in graph")

    @staticmethod
    def _node_item(graph: ContentGraph, node_id: str) -> dict[str, Any]:
        entry = graph.node(node_id)
        doc = entry.document
        return {
            "id": node_id,
            "title": doc.title,
            "topic": doc.topic,
            "depth": str(doc.depth) if doc.depth else None,
            "phase": doc.phase,
            "source": entry.source,
        }

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @traced
    def nodes(self) -> ServiceResult:
        """List every document node."""
        graph = self._load_graph("graph_nodes")
        if isinstance(graph, ServiceResult):
            return graph
        items = [self._node_item(graph, n) for n in graph.nodes()]
        return ServiceResult(ok=True, op="graph_nodes", data={"count": len(items), "items": items})

    @traced
    def edges_from(self, node_id: str) -> ServiceResult:
        """List the outgoing edges of *node_id*, dangling ones included."""
        graph = self._load_graph("graph_edges")
        if isinstance(graph, ServiceResult):
            return graph
        if not graph.has_node(node_id):
            return self._not_found("graph_edges", node_id)

        items = []
        for edge in graph.edges_from(node_id):
            item = edge.to_dict()
            item["resolved"] = graph.has_node(edge.target)
            items.append(item)
        return ServiceResult(
            ok=True,
            op="graph_edges",
            data={"source_id": node_id, "count": len(items), "items": items},
        )

    @traced
    def neighbors(self, node_id: str, kind: EdgeKind | str) -> ServiceResult:
        """List nodes adjacent to *node_id* through *kind* edges."""
        graph = self._load_graph("graph_neighbors")
        if isinstance(graph, ServiceResult):
            return graph
        if not graph.has_node(node_id):
            return self._not_found("graph_neighbors", node_id)

        edge_kind = EdgeKind(kind)
        items = [self._node_item(graph, n) for n in graph.neighbors(node_id, edge_kind)]
        return ServiceResult(
            ok=True,
            op="graph_neighbors",
            data={
                "source_id": node_id,
                "kind": str(edge_kind),
                "count": len(items),
                "items": items,
            },
        )
