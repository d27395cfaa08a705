"""CLI error handling for provider-azure-validate.

Exit codes:
- 0: the manifest is valid
- 1: the manifest has validation errors
- 2: a manifest could not be read, parsed or decoded
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from pydantic import ValidationError as PydanticValidationError

from provider_azure.cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

EXIT_INVALID = 1
EXIT_UNREADABLE_INPUT = 2


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI.
    """

    def __init__(self, message: str, exit_code: int = EXIT_UNREADABLE_INPUT) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format a pydantic validation error as one line per finding.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - spec.networking.nodes: Input should be a valid string"
    """
    details: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]
    for detail in details:
        loc = ".".join(str(x) for x in detail["loc"])
        lines.append(f"  - {loc}: {detail['msg']}")
    return "\n".join(lines)
