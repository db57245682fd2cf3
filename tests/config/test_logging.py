"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest

from corpusctl.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    corpus = logging.getLogger("corpusctl")
    corpus_level = corpus.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    corpus.setLevel(corpus_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("corpusctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("corpusctl").level == logging.WARNING

    def test_stdlib_logger_renders_json(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("corpusctl.services.build").debug("built %d nodes", 3)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "built 3 nodes"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "corpusctl.services.build"

    def test_debug_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("corpusctl.infrastructure.corpus").debug("hidden")
        assert capfd.readouterr().err == ""
