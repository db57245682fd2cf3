"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from corpusctl.output.console import create_console, get_output, style_for_depth
from corpusctl.output.renderers import render_quiet, render_result
from corpusctl.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: object) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


_NODE = {
    "id": "auth/surface",
    "title": "Auth Basics",
    "topic": "auth",
    "depth": "surface",
    "phase": "develop",
    "source": "develop/auth/surface/index.md",
}


# ── Console ──────────────────────────────────────────────────────────


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_depth_styles(self) -> None:
        assert style_for_depth("mid-depth") == "corpus.depth.mid-depth"
        assert style_for_depth(None) == ""


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("build", "SCHEMA_FAILED", "schema-failed: 2 error(s)"))
        assert "ERROR" in output
        assert "build" in output
        assert "schema-failed: 2 error(s)" in output

    def test_verbose_shows_detail(self) -> None:
        output = render_result(_err("build", "GRAPH_FAILED", "x", exit_code=3), verbose=True)
        assert "detail" in output
        assert "exit_code: 3" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="build"))


# ── Op renderers ─────────────────────────────────────────────────────


class TestBuildRenderer:
    def test_summary(self) -> None:
        output = render_result(
            _ok("build", state="validated", files=3, nodes=3, edges=2, warning_count=1)
        )
        assert "validated" in output
        assert "nodes: 3" in output
        assert "warnings: 1" in output

    def test_verbose_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="build",
            data={"state": "validated"},
            meta={
                "telemetry": {
                    "name": "BuildService.build",
                    "duration_ms": 12.5,
                    "children": [
                        {"name": "schema", "duration_ms": 4.0, "annotations": {"files": 3}}
                    ],
                }
            },
        )
        output = render_result(result, verbose=True)
        assert "BuildService.build" in output
        assert "files=3" in output


class TestGraphRenderers:
    def test_node_table(self) -> None:
        output = render_result(_ok("graph_nodes", count=1, items=[_NODE]))
        assert "auth/surface" in output
        assert "Auth Basics" in output
        assert "1 nodes" in output

    def test_neighbors_header(self) -> None:
        output = render_result(
            _ok("graph_neighbors", source_id="auth/mid-depth", kind="prerequisite", items=[_NODE])
        )
        assert "prerequisite neighbours of auth/mid-depth" in output

    def test_edges_mark_missing(self) -> None:
        items = [
            {
                "source": "auth/surface",
                "target": "ghost",
                "kind": "prerequisite",
                "reference": "ghost",
                "origin": "a.md",
                "resolved": False,
            }
        ]
        output = render_result(_ok("graph_edges", source_id="auth/surface", count=1, items=items))
        assert "ghost" in output
        assert "(missing)" in output


class TestGenericRenderer:
    def test_unknown_op(self) -> None:
        output = render_result(_ok("something", alpha=1, nested={"a": [1]}))
        assert "alpha: 1" in output
        assert '{"a":[1]}' in output


# ── Quiet mode ───────────────────────────────────────────────────────


class TestQuiet:
    def test_ids_only(self) -> None:
        assert render_quiet(_ok("graph_nodes", items=[_NODE])) == "auth/surface"

    def test_state(self) -> None:
        assert render_quiet(_ok("build", state="integrity-failed")) == "integrity-failed"

    def test_error(self) -> None:
        assert render_quiet(_err("paths", "PATHS_NOT_FOUND", "gone")) == "ERROR: paths - gone"

    def test_fallback(self) -> None:
        assert render_quiet(_ok("export", count=0)) == "OK: export"
