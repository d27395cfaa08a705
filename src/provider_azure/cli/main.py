"""CLI entry point for provider-azure-validate.

Each subcommand loads one or more YAML manifests, runs the admission
validation for them and prints the findings as a table.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

import click
import rich_click as rclick
from pydantic import ValidationError as PydanticValidationError

from provider_azure import __version__
from provider_azure.admission import (
    SECRET_KIND_INFRASTRUCTURE,
    SECRET_KINDS,
    validate_cloud_profile,
    validate_seed,
    validate_secret,
    validate_shoot,
)
from provider_azure.cli.errors import EXIT_INVALID, CLIError, format_pydantic_error
from provider_azure.cli.output import error, print_field_errors, set_no_color, success
from provider_azure.errors import ConfigurationError
from provider_azure.observability import configure_logging
from provider_azure.schemas.core import CloudProfile, Seed, Shoot
from provider_azure.schemas.secret import Secret
from provider_azure.validation.field import ErrorList

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True

T = TypeVar("T")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_manifest_path = click.Path(dir_okay=False, path_type=Path)


def _load(loader: Callable[[Path], T], path: Path) -> T:
    try:
        return loader(path)
    except ConfigurationError as e:
        raise CLIError(str(e)) from None
    except PydanticValidationError as e:
        raise CLIError(f"Invalid manifest {path}:\n{format_pydantic_error(e)}") from None


def _report(errors: ErrorList, path: Path) -> None:
    if not errors:
        success(f"{path} is valid")
        return
    print_field_errors(errors, title=str(path))
    error(f"{len(errors)} validation error(s) in {path}")
    raise SystemExit(EXIT_INVALID)


@click.group(cls=rclick.RichGroup)
@click.version_option(version=__version__, prog_name="provider-azure-validate")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Minimum level of log events.",
)
@click.option("--json-logs", is_flag=True, default=False, help="Write log events as JSON.")
def cli(log_level: str, json_logs: bool) -> None:
    """Validate Azure provider configuration of Gardener objects.

    Exit code 0 means valid, 1 means validation errors were found and 2
    means a manifest could not be read.

    **Examples:**

    - `provider-azure-validate shoot shoot.yaml --cloud-profile cloudprofile.yaml`
    - `provider-azure-validate seed seed.yaml --old seed-old.yaml`
    - `provider-azure-validate secret secret.yaml --kind dns`
    """
    configure_logging(log_level=log_level, json_format=json_logs)


@cli.command("shoot")
@click.argument("file", type=_manifest_path)
@click.option("--old", "old_file", type=_manifest_path, default=None, help="Stored shoot, to validate an update.")
@click.option(
    "--cloud-profile",
    "cloud_profile_file",
    type=_manifest_path,
    required=True,
    help="Cloud profile referenced by the shoot.",
)
def shoot_cmd(file: Path, old_file: Path | None, cloud_profile_file: Path) -> None:
    """Validate a Shoot manifest."""
    shoot = _load(Shoot.from_yaml, file)
    cloud_profile = _load(CloudProfile.from_yaml, cloud_profile_file)
    old_shoot = _load(Shoot.from_yaml, old_file) if old_file is not None else None
    _report(validate_shoot(shoot, cloud_profile, old_shoot), file)


@cli.command("seed")
@click.argument("file", type=_manifest_path)
@click.option("--old", "old_file", type=_manifest_path, default=None, help="Stored seed, to validate an update.")
def seed_cmd(file: Path, old_file: Path | None) -> None:
    """Validate the backup configuration of a Seed manifest."""
    seed = _load(Seed.from_yaml, file)
    old_seed = _load(Seed.from_yaml, old_file) if old_file is not None else None
    _report(validate_seed(seed, old_seed), file)


@cli.command("cloudprofile")
@click.argument("file", type=_manifest_path)
def cloudprofile_cmd(file: Path) -> None:
    """Validate the provider configuration of a CloudProfile manifest."""
    _report(validate_cloud_profile(_load(CloudProfile.from_yaml, file)), file)


@cli.command("secret")
@click.argument("file", type=_manifest_path)
@click.option("--old", "old_file", type=_manifest_path, default=None, help="Stored secret, to validate an update.")
@click.option(
    "--kind",
    type=click.Choice(SECRET_KINDS),
    default=SECRET_KIND_INFRASTRUCTURE,
    show_default=True,
    help="What the credentials are used for.",
)
def secret_cmd(file: Path, old_file: Path | None, kind: str) -> None:
    """Validate an Azure credentials Secret manifest."""
    secret = _load(Secret.from_yaml, file)
    old_secret = _load(Secret.from_yaml, old_file) if old_file is not None else None
    _report(validate_secret(secret, old_secret, kind=kind), file)


if __name__ == "__main__":
    cli()
