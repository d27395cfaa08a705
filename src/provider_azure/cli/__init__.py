"""Command-line interface: validate manifests from files."""

from __future__ import annotations

from provider_azure.cli.main import cli

__all__ = ["cli"]
