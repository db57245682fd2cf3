"""Tests for ServiceResult and ServiceError."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from corpusctl.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="build")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="build")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_failure_shorthand(self) -> None:
        result = ServiceResult.failure("graph_edges", "NOT_FOUND", "gone", node="x")
        assert not result.ok
        assert result.error == ServiceError(code="NOT_FOUND", message="gone", detail={"node": "x"})

    def test_json_round_trip(self) -> None:
        result = ServiceResult(ok=True, op="build", data={"state": "validated"}, warnings=["w"])
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result
