"""Document frontmatter schema and the total validator built on it.

The :class:`Document` model is the validated shape of one content file's
frontmatter. :func:`validate_frontmatter` never raises: it turns whatever
the YAML loader produced into a :class:`SchemaOutcome` carrying either the
document or every schema error found, so one build pass can report all
problems in a file at once.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    StrictStr,
    StringConstraints,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from corpusctl.domain.ids import node_id
from corpusctl.domain.issues import SchemaError
from corpusctl.domain.types import DEPTH_ORDER, Depth

NonEmptyStr = Annotated[str, StringConstraints(strict=True, min_length=1)]

REQUIRED_FIELDS: tuple[str, ...] = ("title", "phase", "topic")
LIST_FIELDS: tuple[str, ...] = ("keywords", "prerequisites", "related_topics", "personas")

_DEPTH_CHOICES = ", ".join(d.value for d in DEPTH_ORDER)


class Document(BaseModel):
    """Validated frontmatter of a single content unit.

    Unknown keys are ignored. List fields are stored as tuples so a
    document is fully immutable once validated.
    """

    model_config = {"frozen": True, "extra": "ignore"}

    title: NonEmptyStr
    phase: NonEmptyStr
    topic: NonEmptyStr
    depth: Depth | None = None
    type: StrictStr | None = None
    domain: StrictStr | None = None
    industry: StrictStr | None = None
    keywords: tuple[StrictStr, ...] = ()
    reading_time: float | None = None
    prerequisites: tuple[StrictStr, ...] = ()
    related_topics: tuple[StrictStr, ...] = ()
    personas: tuple[StrictStr, ...] = ()
    updated: StrictStr | None = None

    @model_validator(mode="before")
    @classmethod
    def _drop_null_optionals(cls, data: Any) -> Any:
        """Treat ``key:`` with no value as absent for optional fields."""
        if not isinstance(data, dict):
            return data
        return {
            k: v for k, v in data.items() if not (v is None and k not in REQUIRED_FIELDS)
        }

    @field_validator("reading_time", mode="before")
    @classmethod
    def _number_only(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError(
                "number_type",
                "expected number, got {received}",
                {"received": type_name(value)},
            )
        return value

    @field_validator("updated", mode="before")
    @classmethod
    def _date_to_iso(cls, value: Any) -> Any:
        # Unquoted YAML dates load as date objects.
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return value

    @property
    def node_id(self) -> str:
        return node_id(self.topic, self.depth)


@dataclass(frozen=True)
class SourcedDocument:
    """A validated document paired with the file it came from."""

    source: str
    document: Document

    @property
    def node_id(self) -> str:
        return self.document.node_id


@dataclass(frozen=True)
class SchemaOutcome:
    """Result of validating one document: the document, or its errors."""

    source: str
    document: Document | None = None
    errors: tuple[SchemaError, ...] = ()

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.errors

    @property
    def entry(self) -> SourcedDocument | None:
        if self.document is None:
            return None
        return SourcedDocument(source=self.source, document=self.document)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_frontmatter(raw: Any, *, source: str = "") -> SchemaOutcome:
    """Validate a loosely typed frontmatter value against :class:`Document`.

    Args:
        raw: Whatever the YAML loader produced. ``None`` (an empty block) is
            treated as an empty mapping.
        source: File the frontmatter came from, used in error reports.

    Returns:
        A :class:`SchemaOutcome` with either the document or every error.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        return SchemaOutcome(
            source=source,
            errors=(
                SchemaError(
                    source=source,
                    field="frontmatter",
                    message=f"expected mapping, got {type_name(raw)}",
                ),
            ),
        )

    data = {k: v for k, v in raw.items() if isinstance(k, str)}
    try:
        document = Document.model_validate(data)
    except ValidationError as exc:
        errors = tuple(_to_schema_error(err, source) for err in exc.errors())
        return SchemaOutcome(source=source, errors=errors)
    return SchemaOutcome(source=source, document=document)


def type_name(value: Any) -> str:
    """Human name of a YAML value's type (``null`` for None).

    Examples:
        >>> type_name(None)
        'null'
        >>> type_name(["a"])
        'list'
    """
    if value is None:
        return "null"
    if isinstance(value, Mapping):
        return "mapping"
    return type(value).__name__


def _field_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as ``field`` or ``field[index]``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path or "frontmatter"


def _to_schema_error(err: Any, source: str) -> SchemaError:
    field = _field_path(tuple(err["loc"]))
    kind = err["type"]
    received = err.get("input")
    received_name = "missing" if kind == "missing" else type_name(received)

    if kind == "missing":
        message = "required field missing (expected string)"
    elif kind == "string_type":
        message = f"expected string, got {received_name}"
    elif kind == "string_too_short":
        message = "must not be empty"
    elif kind == "enum":
        message = f"expected one of {_DEPTH_CHOICES}, got {received!r}"
    elif kind in ("tuple_type", "list_type"):
        message = f"expected list of strings, got {received_name}"
    else:
        message = str(err["msg"])

    return SchemaError(
        source=source,
        field=field,
        message=message,
        detail={"type": kind, "received": received_name},
    )
