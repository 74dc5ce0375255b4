"""CLI main entry point for taint-audit."""

import click

from taint_audit.cli.logging_setup import configure_logging
from taint_audit.version import __version__


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Only show errors')
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool):
    """Taint Audit - find tainted arguments reaching dangerous functions."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
from taint_audit.cli.commands.inspect import inspect
from taint_audit.cli.commands.scan import scan
from taint_audit.cli.commands.init import init

cli.add_command(inspect)
cli.add_command(scan)
cli.add_command(init)


if __name__ == '__main__':
    cli()
