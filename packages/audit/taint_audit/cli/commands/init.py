"""Init command for creating configuration files."""

import sys
from pathlib import Path

import click
from rich.console import Console

from taint_audit.config.settings import create_default_config

console = Console()


@click.command()
@click.option('--force', '-f', is_flag=True, help='Overwrite existing config')
def init(force: bool):
    """
    Initialize taint-audit configuration.

    Creates a .taint-audit.yaml file in the current directory with the
    default sink, sanitizer and scan settings.

    Examples:

        taint-audit init

        taint-audit init --force
    """
    config_path = Path('.taint-audit.yaml')

    if config_path.exists() and not force:
        console.print(f"[yellow]Configuration file already exists: {config_path}[/yellow]")
        console.print("Use --force to overwrite")
        sys.exit(1)

    config_path.write_text(create_default_config(), encoding="utf-8")

    console.print(f"[green]Created configuration file: {config_path}[/green]")
    console.print()
    console.print("Edit this file to:")
    console.print("  - Add sink and sanitizer functions")
    console.print("  - Point at extra rule directories")
    console.print("  - Set scan exclusion patterns")
