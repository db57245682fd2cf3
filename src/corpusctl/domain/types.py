"""Classification enums shared across the pipeline."""

from __future__ import annotations

from enum import StrEnum


class Depth(StrEnum):
    """Progressive-disclosure level of a document within its topic.

    Declaration order is the reading order: surface < mid-depth < deep-water.
    """

    SURFACE = "surface"
    MID_DEPTH = "mid-depth"
    DEEP_WATER = "deep-water"

    @property
    def rank(self) -> int:
        return DEPTH_ORDER.index(self)


DEPTH_ORDER: tuple[Depth, ...] = tuple(Depth)


class EdgeKind(StrEnum):
    """Relation carried by a graph edge."""

    PREREQUISITE = "prerequisite"
    RELATED = "related"


class Severity(StrEnum):
    """Whether an issue blocks publishing."""

    ERROR = "error"
    WARNING = "warning"


class BuildState(StrEnum):
    """Terminal states of the build pipeline."""

    VALIDATED = "validated"
    SCHEMA_FAILED = "schema-failed"
    GRAPH_FAILED = "graph-failed"
    INTEGRITY_FAILED = "integrity-failed"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]

    @property
    def error_code(self) -> str:
        """ServiceError code for a failed state (e.g. ``SCHEMA_FAILED``)."""
        return self.name


_EXIT_CODES: dict[BuildState, int] = {
    BuildState.VALIDATED: 0,
    BuildState.SCHEMA_FAILED: 2,
    BuildState.GRAPH_FAILED: 3,
    BuildState.INTEGRITY_FAILED: 4,
}
