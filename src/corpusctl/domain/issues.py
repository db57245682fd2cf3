"""Issue taxonomy reported by every pipeline stage.

Each issue renders to one stable, greppable line::

    <file>: <field>: <message>

Stages accumulate issues rather than raising, so a single build reports
every problem across the corpus.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar

from corpusctl.domain.types import Severity


@dataclass(frozen=True)
class Issue:
    """A single problem tied to a source file and frontmatter field."""

    category: ClassVar[str] = "issue"
    severity: ClassVar[Severity] = Severity.ERROR

    source: str
    field: str
    message: str
    detail: dict[str, Any] = dataclasses.field(default_factory=dict, compare=False)

    @property
    def fatal(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        return f"{self.source}: {self.field}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "category": self.category,
            "severity": str(self.severity),
            "source": self.source,
            "field": self.field,
            "message": self.message,
        }
        if self.detail:
            payload["detail"] = self.detail
        return payload

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True)
class SchemaError(Issue):
    """Frontmatter is missing, unparseable, or violates the schema."""

    category: ClassVar[str] = "schema"


@dataclass(frozen=True)
class GraphConstructionError(Issue):
    """Two or more documents claim the same ``(topic, depth)`` node."""

    category: ClassVar[str] = "graph"


@dataclass(frozen=True)
class IntegrityError(Issue):
    """Dangling reference or prerequisite cycle."""

    category: ClassVar[str] = "integrity"


@dataclass(frozen=True)
class IntegrityWarning(Issue):
    """Non-fatal integrity finding (depth gap, layout mismatch)."""

    category: ClassVar[str] = "integrity"
    severity: ClassVar[Severity] = Severity.WARNING


@dataclass(frozen=True)
class LearningPathError(Issue):
    """A learning-path step points at content that does not exist."""

    category: ClassVar[str] = "learning_path"


@dataclass(frozen=True)
class LearningPathWarning(Issue):
    """A learning-path file or step that cannot be checked."""

    category: ClassVar[str] = "learning_path"
    severity: ClassVar[Severity] = Severity.WARNING


def sort_issues[T: Issue](issues: list[T] | tuple[T, ...]) -> tuple[T, ...]:
    """Stable report order: by source, then field, then message."""
    return tuple(sorted(issues, key=lambda i: (i.source, i.field, i.message)))
