"""Rich/JSON output helpers.

The CLI renders a ServiceResult for humans (Rich tables, colored states)
or machines (``--json``). The formatter layer picks the output mode;
issue lines are routed separately by the command context.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from corpusctl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags taken from the global CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    json_output: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        settings: Output mode; takes precedence over *json_output*.
        json_output: Shorthand for ``OutputSettings(json_output=True)``.
    """
    if settings is None:
        settings = OutputSettings(json_output=json_output)

    if settings.json_output:
        return result.model_dump_json(indent=2)

    from corpusctl.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)


def issue_lines(result: ServiceResult) -> list[str]:
    """Return the ``<file>: <field>: <message>`` lines carried by *result*.

    Results that report issues keep them under ``data["issues"]`` (errors
    first, then warnings); anything else falls back to ``result.warnings``.
    """
    issues: list[dict[str, Any]] | None = result.data.get("issues")
    if issues is None:
        return list(result.warnings)
    return [f"{i['source']}: {i['field']}: {i['message']}" for i in issues]
