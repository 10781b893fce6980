"""Colorized terminal rendering of drift outcomes."""

from __future__ import annotations

import click

from helm_drift.core.reconcile import ResourceOutcome
from helm_drift.diff.engine import DiffLine

_PREFIX = {"added": "+ ", "removed": "- ", "unchanged": "  "}
_COLOR = {"added": "bright_green", "removed": "bright_red"}


def format_line(line: DiffLine, no_color: bool = False) -> str:
    text = _PREFIX[line.tag] + line.text
    color = _COLOR.get(line.tag)
    if color is None or no_color:
        return text
    return click.style(text, fg=color)


def render_terminal(
    outcomes: list[ResourceOutcome],
    no_color: bool = False,
    show_summary: bool = False,
) -> None:
    """Print a header and the annotated diff of every resource, in order.

    Failed resources (continue-on-error mode) are reported on stderr.
    """
    for outcome in outcomes:
        res = outcome.resource
        if outcome.error is not None:
            click.echo(f"Error: {outcome.error}", err=True)
            continue

        click.echo(f"=== {res.kind} {res.name} ===")
        for line in outcome.lines:
            # color=True keeps escape sequences when stdout is not a tty
            click.echo(format_line(line, no_color=no_color), color=not no_color)

        if show_summary and outcome.changes:
            click.echo(f"# {len(outcome.changes)} field(s) drifted:")
            for fc in outcome.changes:
                click.echo(f"#   {fc.path}: {fc.old_value!r} -> {fc.new_value!r}")
