"""Rich console output utilities for provider-azure-validate.

Respects the NO_COLOR environment variable and the --no-color flag.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from provider_azure.validation.field import FieldError

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console instance with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(force_terminal=force_terminal, no_color=no_color or _force_no_color)


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}", **kwargs)


def _format_bad_value(err: FieldError) -> str:
    if err.bad_value is None:
        return ""
    return str(err.bad_value)


def print_field_errors(errors: Sequence[FieldError], *, title: str | None = None) -> None:
    """Print field errors as a table of field, type, value and detail.

    Example:
        >>> print_field_errors([required(Path("spec", "region"), "must be set")])
    """
    table = Table(title=title, show_lines=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Value")
    table.add_column("Detail")

    for err in errors:
        table.add_row(
            Text(err.field),
            Text(err.type.description),
            Text(_format_bad_value(err)),
            Text(err.detail),
        )

    console.print(table)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.
    """
    global console
    console = create_console(no_color=no_color)
