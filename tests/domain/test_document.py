"""Tests for the frontmatter schema validator."""

from __future__ import annotations

import datetime

import pytest

from corpusctl.domain.document import Document, validate_frontmatter
from corpusctl.domain.types import Depth

VALID = {"title": "Auth Basics", "phase": "develop", "topic": "authentication"}


def _fields(outcome) -> list[str]:
    return [e.field for e in outcome.errors]


class TestValidDocuments:
    def test_minimal_document(self) -> None:
        outcome = validate_frontmatter(VALID, source="a.md")
        assert outcome.ok
        assert outcome.document == Document(**VALID)
        assert outcome.document.depth is None
        assert outcome.document.keywords == ()

    def test_full_document(self) -> None:
        raw = {
            **VALID,
            "depth": "mid-depth",
            "type": "guide",
            "domain": "security",
            "industry": "fintech",
            "keywords": ["oauth", "jwt"],
            "reading_time": 7,
            "prerequisites": ["http/surface"],
            "related_topics": ["sessions"],
            "personas": ["new-dev"],
            "updated": "2024-05-01",
        }
        doc = validate_frontmatter(raw).document
        assert doc is not None
        assert doc.depth is Depth.MID_DEPTH
        assert doc.reading_time == 7.0
        assert doc.prerequisites == ("http/surface",)
        assert doc.node_id == "authentication/mid-depth"

    def test_unknown_keys_ignored(self) -> None:
        outcome = validate_frontmatter({**VALID, "sidebar": {"order": 3}, "draft": True})
        assert outcome.ok

    def test_null_optional_treated_as_absent(self) -> None:
        outcome = validate_frontmatter({**VALID, "depth": None, "keywords": None})
        assert outcome.ok
        assert outcome.document.depth is None
        assert outcome.document.keywords == ()

    def test_yaml_date_becomes_iso_string(self) -> None:
        outcome = validate_frontmatter({**VALID, "updated": datetime.date(2024, 5, 1)})
        assert outcome.document.updated == "2024-05-01"

    def test_node_id_without_depth(self) -> None:
        assert Document(**VALID).node_id == "authentication"


class TestSchemaErrors:
    def test_missing_title_and_topic_reports_both(self) -> None:
        outcome = validate_frontmatter({"phase": "develop"}, source="a.md")
        assert not outcome.ok
        assert outcome.document is None
        assert sorted(_fields(outcome)) == ["title", "topic"]
        assert all("required field missing" in e.message for e in outcome.errors)

    def test_missing_title_and_phase_is_exactly_two_errors(self) -> None:
        outcome = validate_frontmatter({"topic": "authentication"}, source="a.md")
        assert not outcome.ok
        assert len(outcome.errors) == 2
        assert sorted(_fields(outcome)) == ["phase", "title"]
        assert [e.format() for e in outcome.errors] == [
            "a.md: title: required field missing (expected string)",
            "a.md: phase: required field missing (expected string)",
        ]

    def test_empty_title(self) -> None:
        outcome = validate_frontmatter({"title": "", "phase": "x", "topic": "y"}, source="a.md")
        assert _fields(outcome) == ["title"]
        assert outcome.errors[0].message == "must not be empty"
        assert outcome.errors[0].format() == "a.md: title: must not be empty"

    def test_non_string_title(self) -> None:
        outcome = validate_frontmatter({**VALID, "title": 42})
        assert outcome.errors[0].message == "expected string, got int"

    def test_null_title_is_not_absent(self) -> None:
        outcome = validate_frontmatter({**VALID, "title": None})
        assert outcome.errors[0].field == "title"
        assert outcome.errors[0].message == "expected string, got null"

    def test_invalid_depth(self) -> None:
        outcome = validate_frontmatter({**VALID, "depth": "shallow"})
        assert _fields(outcome) == ["depth"]
        assert "surface, mid-depth, deep-water" in outcome.errors[0].message
        assert "'shallow'" in outcome.errors[0].message

    def test_list_field_given_string(self) -> None:
        outcome = validate_frontmatter({**VALID, "keywords": "oauth"})
        assert _fields(outcome) == ["keywords"]
        assert outcome.errors[0].message == "expected list of strings, got str"

    def test_list_element_errors_are_indexed(self) -> None:
        outcome = validate_frontmatter({**VALID, "prerequisites": ["ok", 3, "fine", None]})
        assert _fields(outcome) == ["prerequisites[1]", "prerequisites[3]"]

    @pytest.mark.parametrize("value", [True, "ten", [5]])
    def test_reading_time_must_be_number(self, value: object) -> None:
        outcome = validate_frontmatter({**VALID, "reading_time": value})
        assert _fields(outcome) == ["reading_time"]
        assert outcome.errors[0].message.startswith("expected number, got ")

    def test_every_error_collected(self) -> None:
        outcome = validate_frontmatter(
            {"title": "", "topic": 5, "depth": "x", "keywords": "y"}, source="a.md"
        )
        assert sorted(_fields(outcome)) == ["depth", "keywords", "phase", "title", "topic"]


class TestTotality:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("just a string", "expected mapping, got str"),
            (["a", "b"], "expected mapping, got list"),
            (3.5, "expected mapping, got float"),
        ],
    )
    def test_non_mapping_frontmatter(self, raw: object, expected: str) -> None:
        outcome = validate_frontmatter(raw, source="a.md")
        assert [e.field for e in outcome.errors] == ["frontmatter"]
        assert outcome.errors[0].message == expected

    def test_empty_block_reports_required_fields(self) -> None:
        outcome = validate_frontmatter(None)
        assert sorted(_fields(outcome)) == ["phase", "title", "topic"]

    def test_non_string_keys_ignored(self) -> None:
        outcome = validate_frontmatter({**VALID, 1: "one", None: "none"})
        assert outcome.ok

    def test_errors_carry_detail(self) -> None:
        outcome = validate_frontmatter({**VALID, "title": 1})
        assert outcome.errors[0].detail == {"type": "string_type", "received": "int"}
        assert outcome.errors[0].to_dict()["category"] == "schema"
