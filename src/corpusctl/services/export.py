"""ExportService — JSON manifest of the validated corpus for the site renderer.

The renderer consumes documents and graph as data; corpusctl never renders
HTML. The manifest is printed, not written: nothing is persisted.
"""

from __future__ import annotations

from corpusctl.services.base import BaseService
from corpusctl.services.build import BuildService, build_summary
from corpusctl.services.result import ServiceResult
from corpusctl.services.telemetry import traced


class ExportService(BaseService):
    """Builds the renderer manifest."""

    @traced
    def export(self) -> ServiceResult:
        """Export documents and graph; refuses unless the build is validated."""
        report = BuildService(self._corpus).run()
        if not report.ok or report.graph is None:
            return ServiceResult.failure(
                "export",
                report.state.error_code,
                f"Refusing to export: build is {report.state}",
                data=build_summary(report),
                warnings=[w.format() for w in report.warnings],
                state=str(report.state),
                exit_code=report.state.exit_code,
            )

        documents = [
            {
                "source": entry.source,
                "node": entry.node_id,
                **entry.document.model_dump(mode="json"),
            }
            for entry in sorted(report.snapshot.documents, key=lambda e: e.source)
        ]
        graph = report.graph.to_dict()
        return ServiceResult(
            ok=True,
            op="export",
            data={
                "count": len(documents),
                "documents": documents,
                "nodes": graph["nodes"],
                "edges": graph["edges"],
            },
            warnings=[w.format() for w in report.warnings],
        )
