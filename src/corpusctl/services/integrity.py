"""Graph integrity checks — corpus-wide invariants over the built graph.

Three independent checks, all read-only and all run to completion:

- dangling references: every edge target must be a document node
- prerequisite cycles: prerequisite edges must form a DAG
- depth progression: present depths of a multi-depth topic form a
  prefix of surface → mid-depth → deep-water (gaps are warnings)

Plus the per-file layout check, which compares frontmatter with the
``phase/topic/depth/index.md`` location of the file.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum

from corpusctl.domain.document import SourcedDocument
from corpusctl.domain.ids import node_id
from corpusctl.domain.issues import IntegrityError, IntegrityWarning, sort_issues
from corpusctl.domain.types import DEPTH_ORDER, Depth, EdgeKind
from corpusctl.infrastructure.filesystem import layout_from_source
from corpusctl.infrastructure.graph.engine import ContentGraph
from corpusctl.services.telemetry import trace_span

_EDGE_FIELDS: dict[EdgeKind, str] = {
    EdgeKind.PREREQUISITE: "prerequisites",
    EdgeKind.RELATED: "related_topics",
}


class _Mark(IntEnum):
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


@dataclass(frozen=True)
class IntegrityReport:
    """Combined output of every integrity check."""

    errors: tuple[IntegrityError, ...] = ()
    warnings: tuple[IntegrityWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def check_integrity(graph: ContentGraph, *, check_layout: bool = False) -> IntegrityReport:
    """Run every integrity check over *graph* and combine the findings."""
    errors: list[IntegrityError] = []
    warnings: list[IntegrityWarning] = []

    with trace_span("dangling_references") as span:
        dangling = check_dangling_references(graph)
        errors.extend(dangling)
        if span:
            span.annotate("issues", len(dangling))

    with trace_span("prerequisite_cycles") as span:
        cycles = check_prerequisite_cycles(graph)
        errors.extend(cycles)
        if span:
            span.annotate("issues", len(cycles))

    with trace_span("depth_progression") as span:
        gaps = check_depth_progression(graph)
        warnings.extend(gaps)
        if span:
            span.annotate("issues", len(gaps))

    warnings.extend(check_self_references(graph))

    if check_layout:
        with trace_span("layout"):
            warnings.extend(
                check_layout_consistency(graph.node(n) for n in graph.nodes())
            )

    return IntegrityReport(errors=sort_issues(errors), warnings=sort_issues(warnings))


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def check_dangling_references(graph: ContentGraph) -> list[IntegrityError]:
    """One error per edge whose target is not a document node."""
    issues: list[IntegrityError] = []
    for edge in graph.edges():
        if graph.has_node(edge.target):
            continue
        issues.append(
            IntegrityError(
                source=edge.origin,
                field=_EDGE_FIELDS[edge.kind],
                message=f"unresolved reference '{edge.reference}'",
                detail={"node": edge.source, "reference": edge.reference, "kind": str(edge.kind)},
            )
        )
    return issues


def find_prerequisite_cycles(graph: ContentGraph) -> list[list[str]]:
    """Find prerequisite cycles with an iterative three-colour DFS.

    Every back-edge to an in-progress node yields one cycle, returned as
    the node path from the re-entered node back to itself
    (``[a, b, c, a]``). Roots and successors are visited in sorted order
    so the result is deterministic.
    """
    marks = dict.fromkeys(graph.nodes(), _Mark.UNVISITED)
    cycles: list[list[str]] = []

    for root in graph.nodes():
        if marks[root] is not _Mark.UNVISITED:
            continue
        marks[root] = _Mark.IN_PROGRESS
        path = [root]
        stack = [iter(graph.prerequisite_successors(root))]
        while stack:
            for child in stack[-1]:
                if marks[child] is _Mark.UNVISITED:
                    marks[child] = _Mark.IN_PROGRESS
                    path.append(child)
                    stack.append(iter(graph.prerequisite_successors(child)))
                    break
                if marks[child] is _Mark.IN_PROGRESS:
                    start = path.index(child)
                    cycles.append([*path[start:], child])
            else:
                marks[path.pop()] = _Mark.DONE
                stack.pop()
    return cycles


def check_prerequisite_cycles(graph: ContentGraph) -> list[IntegrityError]:
    """One error per prerequisite cycle, reported on the file closing it."""
    issues: list[IntegrityError] = []
    for cycle in find_prerequisite_cycles(graph):
        closing = graph.node(cycle[-2])
        issues.append(
            IntegrityError(
                source=closing.source,
                field="prerequisites",
                message=f"prerequisite cycle: {' -> '.join(cycle)}",
                detail={"cycle": cycle},
            )
        )
    return issues


def check_depth_progression(graph: ContentGraph) -> list[IntegrityWarning]:
    """One warning per topic whose depths are not a prefix of the order.

    A topic with a single depth is only checked when that depth is
    ``deep-water``. Documents without a depth take no part in this check.
    """
    issues: list[IntegrityWarning] = []
    for topic, depths in graph.topics().items():
        if len(depths) == 1 and depths[0] is not Depth.DEEP_WATER:
            continue
        if tuple(depths) == DEPTH_ORDER[: len(depths)]:
            continue
        deepest = depths[-1]
        missing = [d for d in DEPTH_ORDER[: deepest.rank] if d not in depths]
        owner = graph.node(node_id(topic, deepest))
        issues.append(
            IntegrityWarning(
                source=owner.source,
                field="depth",
                message=(
                    f"topic '{topic}' skips {', '.join(missing)} "
                    f"(present: {', '.join(depths)})"
                ),
                detail={
                    "topic": topic,
                    "present": [str(d) for d in depths],
                    "missing": [str(d) for d in missing],
                },
            )
        )
    return issues


def check_self_references(graph: ContentGraph) -> list[IntegrityWarning]:
    """Related links that resolve back to the declaring node."""
    return [
        IntegrityWarning(
            source=edge.origin,
            field="related_topics",
            message=f"'{edge.reference}' refers to the document itself",
            detail={"node": edge.source},
        )
        for edge in graph.edges(EdgeKind.RELATED)
        if edge.source == edge.target
    ]


def check_layout_consistency(documents: Iterable[SourcedDocument]) -> list[IntegrityWarning]:
    """Compare frontmatter with the ``phase/topic/depth/index.md`` path."""
    issues: list[IntegrityWarning] = []
    for entry in documents:
        layout = layout_from_source(entry.source)
        if layout is None:
            continue
        doc = entry.document
        declared = {
            "phase": doc.phase,
            "topic": doc.topic,
            "depth": str(doc.depth) if doc.depth else None,
        }
        for field, expected in (
            ("phase", layout.phase),
            ("topic", layout.topic),
            ("depth", layout.depth),
        ):
            if declared[field] != expected:
                issues.append(
                    IntegrityWarning(
                        source=entry.source,
                        field=field,
                        message=f"frontmatter says {declared[field]!r}, path says {expected!r}",
                    )
                )
    return issues
