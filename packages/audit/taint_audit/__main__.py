"""Entry point for running taint-audit as a module."""

from taint_audit.cli.main import cli

if __name__ == "__main__":
    cli()
