"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Provides lazy Corpus construction and centralized
result emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from corpusctl.output.formatters import OutputSettings, format_result, issue_lines

if TYPE_CHECKING:
    from corpusctl.config.settings import CorpusSettings
    from corpusctl.infrastructure.corpus import Corpus
    from corpusctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The corpus is created on first use so ``--help``, ``--version`` and
    ``--examples`` never touch the content tree.
    """

    def __init__(self, settings: CorpusSettings) -> None:
        self.settings = settings
        self._corpus: Corpus | None = None

        from corpusctl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from corpusctl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def corpus(self) -> Corpus:
        """The corpus described by the settings (created lazily)."""
        if self._corpus is None:
            from corpusctl.infrastructure.corpus import Corpus

            self._corpus = Corpus(self.settings)
        return self._corpus

    def use_content_root(self, content_root: Path) -> Corpus:
        """Point the corpus at an explicit content directory."""
        from corpusctl.infrastructure.corpus import Corpus

        self._corpus = Corpus(self.settings, content_root=content_root)
        return self._corpus

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Issue lines go to stderr as ``<file>: <field>: <message>`` in
          every mode except ``--json``, where they are part of the payload.
        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr and exits with the code carried in
          ``error.detail["exit_code"]`` (1 when absent).
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if not settings.json_output:
            for line in issue_lines(result):
                click.echo(line, err=True)

        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            return

        click.echo(output, err=True)
        exit_code = result.error.detail.get("exit_code", 1) if result.error else 1
        raise SystemExit(exit_code)
