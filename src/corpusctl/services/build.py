"""BuildService — Parse → Schema-Validate → Build-Graph → Integrity-Check.

Each stage consumes the previous stage's immutable output. The pipeline
stops at the first stage that reports a fatal issue and lands in the
matching terminal state; later stages are meaningless without a valid
input. Within a stage, every issue is collected before returning.

=================  =========  ===========================================
State              Exit code  Reached when
=================  =========  ===========================================
validated          0          all stages pass (warnings allowed)
schema-failed      2          any file fails parsing or schema validation
graph-failed       3          two files claim the same node
integrity-failed   4          dangling reference or prerequisite cycle
=================  =========  ===========================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from corpusctl.domain.issues import Issue, sort_issues
from corpusctl.domain.types import BuildState
from corpusctl.infrastructure.corpus import CorpusSnapshot
from corpusctl.infrastructure.graph.engine import ContentGraph, build_graph
from corpusctl.services.base import BaseService
from corpusctl.services.integrity import check_integrity
from corpusctl.services.result import ServiceError, ServiceResult
from corpusctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildReport:
    """Terminal state of one pipeline run plus everything it found.

    ``graph`` is None when the pipeline stopped at schema validation.
    ``errors`` holds the fatal issues of the stage that failed.
    """

    state: BuildState
    snapshot: CorpusSnapshot
    graph: ContentGraph | None = None
    errors: tuple[Issue, ...] = ()
    warnings: tuple[Issue, ...] = ()

    @property
    def ok(self) -> bool:
        return self.state is BuildState.VALIDATED

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self.errors + self.warnings


class BuildService(BaseService):
    """Runs the validation pipeline over the corpus."""

    @traced
    def build(self) -> ServiceResult:
        """Run the full pipeline and report the terminal state."""
        if not self._corpus.content_root.is_dir():
            return ServiceResult.failure(
                "build",
                "CONTENT_NOT_FOUND",
                f"Content directory not found: {self._corpus.content_root}",
                path=str(self._corpus.content_root),
            )

        report = self.run()
        data = build_summary(report)
        warnings = [w.format() for w in report.warnings]

        if report.ok:
            return ServiceResult(ok=True, op="build", data=data, warnings=warnings)

        if report.errors:
            message = f"{report.state}: {len(report.errors)} error(s)"
        else:
            message = f"{report.state}: {len(report.warnings)} warning(s) promoted by strict mode"

        return ServiceResult(
            ok=False,
            op="build",
            data=data,
            warnings=warnings,
            error=ServiceError(
                code=report.state.error_code,
                message=message,
                detail={"state": str(report.state), "exit_code": report.state.exit_code},
            ),
        )

    def run(self) -> BuildReport:
        """Run the pipeline and return the typed report."""
        with trace_span("schema") as span:
            snapshot = self._corpus.load()
            if span:
                span.annotate("files", len(snapshot.outcomes))

        if not snapshot.ok:
            logger.info("Schema validation failed for %d file(s)", _failed_files(snapshot))
            return BuildReport(
                state=BuildState.SCHEMA_FAILED,
                snapshot=snapshot,
                errors=sort_issues(snapshot.errors),
            )

        with trace_span("graph") as span:
            built = build_graph(snapshot.documents)
            if span:
                span.annotate("nodes", len(built.graph.nodes()))

        if not built.ok:
            return BuildReport(
                state=BuildState.GRAPH_FAILED,
                snapshot=snapshot,
                graph=built.graph,
                errors=sort_issues(built.errors),
            )

        with trace_span("integrity"):
            integrity = check_integrity(
                built.graph, check_layout=self._corpus.settings.content.check_layout
            )

        state = BuildState.VALIDATED
        if not integrity.ok:
            state = BuildState.INTEGRITY_FAILED
        elif integrity.warnings and self._corpus.settings.build.strict:
            logger.info("Strict build: %d warning(s) are fatal", len(integrity.warnings))
            state = BuildState.INTEGRITY_FAILED

        return BuildReport(
            state=state,
            snapshot=snapshot,
            graph=built.graph,
            errors=integrity.errors,
            warnings=integrity.warnings,
        )


def build_summary(report: BuildReport) -> dict[str, Any]:
    """Serializable summary of a build report (ServiceResult.data)."""
    graph = report.graph
    return {
        "state": str(report.state),
        "exit_code": report.state.exit_code,
        "content_root": str(report.snapshot.content_root),
        "files": len(report.snapshot.outcomes),
        "documents": len(report.snapshot.documents),
        "nodes": len(graph.nodes()) if graph is not None else 0,
        "edges": len(graph.edges()) if graph is not None else 0,
        "error_count": len(report.errors),
        "warning_count": len(report.warnings),
        "issues": [issue.to_dict() for issue in report.issues],
    }


def _failed_files(snapshot: CorpusSnapshot) -> int:
    return sum(1 for o in snapshot.outcomes if not o.ok)
