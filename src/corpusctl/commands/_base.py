"""Click base classes that add an ``--examples`` flag.

``--help`` stays short; ``corpusctl <cmd> --examples`` prints usage
examples declared next to the command and exits.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Register an eager ``--examples`` option when examples are given."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return
        assert isinstance(self, click.Command)
        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=self._show_examples,
                help="Show usage examples.",
            )
        )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or self.examples is None:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class CorpusCommand(_ExamplesMixin, click.Command):
    """Click Command accepting ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class CorpusGroup(_ExamplesMixin, click.Group):
    """Click Group accepting ``examples=``.

    Subcommands default to :class:`CorpusCommand`.
    """

    command_class = CorpusCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)
