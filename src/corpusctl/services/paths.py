"""PathAuditService — check learning paths against the validated corpus.

A learning path is a JSON file listing steps, each naming a
``phase``/``topic``/``depth`` triple. Steps are gathered from
``milestones[].steps``, ``journey_steps`` and ``steps``. A step without
the triple is a warning unless it is a dynamic step (``note`` or
``problem``), which is skipped. Every complete step also needs topic
metadata at ``<metadata_dir>/topics/<topic>.json``; each missing file is
one warning listing the paths that reference it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from corpusctl.domain.issues import LearningPathError, LearningPathWarning, sort_issues
from corpusctl.domain.types import BuildState
from corpusctl.infrastructure.filesystem import relative_source
from corpusctl.services.base import BaseService
from corpusctl.services.build import BuildService
from corpusctl.services.result import ServiceError, ServiceResult
from corpusctl.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)

_STEP_KEYS = ("phase", "topic", "depth")
_DYNAMIC_KEYS = ("note", "problem")


def find_path_files(paths_dir: Path) -> list[Path]:
    """All learning-path JSON files below *paths_dir*, sorted."""
    return sorted(p for p in paths_dir.rglob("*.json") if p.is_file())


def collect_steps(data: Any) -> list[tuple[str, Any]]:
    """Return ``(label, step)`` pairs from a learning-path document.

    Labels locate the step in the file (``milestones[0].steps[2]``).
    """
    if not isinstance(data, dict):
        return []
    steps: list[tuple[str, Any]] = []
    milestones = data.get("milestones")
    if isinstance(milestones, list):
        for i, milestone in enumerate(milestones):
            if isinstance(milestone, dict) and isinstance(milestone.get("steps"), list):
                steps.extend(
                    (f"milestones[{i}].steps[{j}]", step)
                    for j, step in enumerate(milestone["steps"])
                )
    for key in ("journey_steps", "steps"):
        if isinstance(data.get(key), list):
            steps.extend((f"{key}[{j}]", step) for j, step in enumerate(data[key]))
    return steps


class PathAuditService(BaseService):
    """Validates learning-path references."""

    @traced
    def audit(self) -> ServiceResult:
        """Check every learning-path step against the corpus content index."""
        paths_dir = self._corpus.settings.paths_dir
        if not paths_dir.is_dir():
            return ServiceResult.failure(
                "paths",
                "PATHS_NOT_FOUND",
                f"Learning paths directory not found: {paths_dir}",
                path=str(paths_dir),
            )

        report = BuildService(self._corpus).run()
        if report.state in (BuildState.SCHEMA_FAILED, BuildState.GRAPH_FAILED):
            return ServiceResult.failure(
                "paths",
                report.state.error_code,
                f"Cannot audit learning paths: build is {report.state}",
                state=str(report.state),
                exit_code=report.state.exit_code,
            )

        content_index = {
            (e.document.phase, e.document.topic, str(e.document.depth)): e.source
            for e in report.snapshot.documents
            if e.document.depth is not None
        }

        errors: list[LearningPathError] = []
        warnings: list[LearningPathWarning] = []
        referenced: set[str] = set()
        missing: dict[str, list[str]] = {}
        metadata_refs: dict[str, list[str]] = {}
        path_files = find_path_files(paths_dir)
        parsed_paths = 0
        total_steps = 0
        valid = 0

        with trace_span("audit_paths") as span:
            for path_file in path_files:
                source = relative_source(path_file, self._corpus.root)
                try:
                    data = json.loads(path_file.read_text(encoding="utf-8"))
                except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
                    warnings.append(
                        LearningPathWarning(
                            source=source, field="file", message=f"cannot parse: {exc}"
                        )
                    )
                    continue

                parsed_paths += 1
                steps = collect_steps(data)
                total_steps += len(steps)
                for label, step in steps:
                    key = _step_key(step)
                    if key is None:
                        if isinstance(step, dict) and any(k in step for k in _DYNAMIC_KEYS):
                            continue
                        warnings.append(
                            LearningPathWarning(
                                source=source,
                                field=label,
                                message="step is missing phase/topic/depth",
                            )
                        )
                        continue

                    refs = metadata_refs.setdefault(key[1], [])
                    if source not in refs:
                        refs.append(source)

                    target = content_index.get(key)
                    if target is not None:
                        valid += 1
                        referenced.add(target)
                        continue
                    phase, topic, depth = key
                    missing.setdefault(f"{phase}/{topic}", [])
                    if depth not in missing[f"{phase}/{topic}"]:
                        missing[f"{phase}/{topic}"].append(depth)
                    errors.append(
                        LearningPathError(
                            source=source,
                            field=label,
                            message=f"missing content: {phase}/{topic}/{depth}",
                            detail={"phase": phase, "topic": topic, "depth": depth},
                        )
                    )
            metadata_warnings = self._missing_metadata(metadata_refs)
            warnings.extend(metadata_warnings)
            if span:
                span.annotate("paths", parsed_paths)
                span.annotate("steps", total_steps)

        unreferenced = len(report.snapshot.documents) - len(referenced)
        logger.debug("%d document(s) not referenced by any learning path", unreferenced)

        issues = [*sort_issues(errors), *sort_issues(warnings)]
        data = {
            "paths": parsed_paths,
            "steps": total_steps,
            "valid": valid,
            "invalid": len(errors),
            "missing": {k: missing[k] for k in sorted(missing)},
            "missing_metadata": len(metadata_warnings),
            "unreferenced_documents": unreferenced,
            "issues": [i.to_dict() for i in issues],
        }
        warning_lines = [w.format() for w in sort_issues(warnings)]

        if errors:
            return ServiceResult(
                ok=False,
                op="paths",
                data=data,
                warnings=warning_lines,
                error=ServiceError(
                    code="INVALID_REFERENCES",
                    message=f"{len(errors)} learning-path step(s) reference missing content",
                    detail={"exit_code": 1},
                ),
            )
        return ServiceResult(ok=True, op="paths", data=data, warnings=warning_lines)

    def _missing_metadata(self, metadata_refs: dict[str, list[str]]) -> list[LearningPathWarning]:
        """One warning per referenced topic without a metadata file."""
        topics_dir = self._corpus.settings.metadata_dir / "topics"
        issues: list[LearningPathWarning] = []
        for topic in sorted(metadata_refs):
            metadata_file = topics_dir / f"{topic}.json"
            if metadata_file.is_file():
                continue
            refs = metadata_refs[topic]
            issues.append(
                LearningPathWarning(
                    source=relative_source(metadata_file, self._corpus.root),
                    field="topic",
                    message=f"missing topic metadata (referenced by {', '.join(refs)})",
                    detail={"topic": topic, "referenced_by": refs},
                )
            )
        return issues


def _step_key(step: Any) -> tuple[str, str, str] | None:
    if not isinstance(step, dict):
        return None
    values = [step.get(k) for k in _STEP_KEYS]
    if not all(isinstance(v, str) and v for v in values):
        return None
    phase, topic, depth = values
    return phase, topic, depth
