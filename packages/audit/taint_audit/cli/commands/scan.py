"""Scan command implementation."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import click
from rich.console import Console
from rich.markup import escape

from taint_core.models.finding import Finding
from taint_audit.analysis import run_analysis
from taint_audit.cli.formatters.terminal import format_scan_results
from taint_audit.cli.logging_setup import configure_logging
from taint_audit.config.settings import (
    ConfigManager, load_baseline, filter_by_baseline, save_baseline
)
from taint_audit.frontends import (
    FrontendError, collect_files, default_frontends, frontend_for
)

logger = logging.getLogger(__name__)

console = Console(stderr=True)

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_NOTHING_ANALYZED = 2


def run_scan(
    path: Path,
    output_format: str = "terminal",
    output_path: Optional[Path] = None,
    extra_sinks: Sequence[str] = (),
    extra_sanitizers: Sequence[str] = (),
    rules_dir: Optional[Path] = None,
    baseline_path: Optional[Path] = None,
    save_baseline_path: Optional[Path] = None,
    exit_zero: bool = False,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    no_color: bool = False
) -> int:
    """
    Run the taint analysis over every supported file under `path`.

    Returns exit code: 0 when clean, 1 when findings remain, 2 when no
    file could be analyzed.
    """
    show_progress = not quiet and output_format == "terminal"

    config_manager = ConfigManager()
    if config_manager.load(path) and verbose and show_progress:
        console.print(f"[dim]Loaded config from: {escape(str(config_manager.loaded_from))}[/dim]")

    analysis_config = config_manager.build_analysis_config(
        extra_sinks=extra_sinks,
        extra_sanitizers=extra_sanitizers,
        rules_dirs=[rules_dir] if rules_dir else [],
        debug=debug,
    )
    if analysis_config.debug:
        configure_logging(debug=True)

    logger.info(
        f"Sinks: {', '.join(sorted(analysis_config.sinks)) or '-'}; "
        f"sanitizers: {', '.join(sorted(analysis_config.sanitizers)) or '-'}"
    )

    files = collect_files(path, default_frontends(), config_manager.get_exclude_patterns())

    all_findings: List[Finding] = []
    analyzed_files = 0
    skipped_files = 0

    for file_path in files:
        frontend = frontend_for(file_path)
        if frontend is None:
            logger.warning(f"No front-end for {file_path}, skipped")
            skipped_files += 1
            continue

        if show_progress:
            console.print(f"[dim]Analyzing {escape(str(file_path))}...[/dim]")

        try:
            program = frontend.load(file_path)
        except FrontendError as e:
            logger.warning(str(e))
            skipped_files += 1
            continue

        all_findings.extend(run_analysis(program, analysis_config))
        analyzed_files += 1

    if analyzed_files == 0:
        console.print(f"[red]No analyzable files found in {escape(str(path))}[/red]")
        return EXIT_NOTHING_ANALYZED

    if baseline_path and baseline_path.exists():
        all_findings = filter_by_baseline(all_findings, load_baseline(baseline_path))
        if show_progress:
            console.print(f"[dim]Filtered by baseline: {escape(str(baseline_path))}[/dim]")

    if save_baseline_path:
        save_baseline(all_findings, save_baseline_path)
        if show_progress:
            console.print(f"[dim]Saved baseline to: {escape(str(save_baseline_path))}[/dim]")

    _output(all_findings, output_format, output_path, str(path),
            analyzed_files, skipped_files, verbose, quiet, no_color)

    if all_findings and not exit_zero and config_manager.fail_on_findings():
        return EXIT_FINDINGS
    return EXIT_CLEAN


def _output(
    findings: List[Finding],
    output_format: str,
    output_path: Optional[Path],
    scan_path: str,
    analyzed_files: int,
    skipped_files: int,
    verbose: bool,
    quiet: bool,
    no_color: bool
):
    if output_format == "terminal":
        format_scan_results(
            findings,
            scan_path,
            analyzed_files,
            skipped_files,
            verbose=verbose,
            quiet=quiet,
            no_color=no_color
        )
    elif output_format == "text":
        from taint_audit.cli.formatters.text import format_text, save_text
        if output_path:
            save_text(findings, output_path)
        else:
            click.echo(format_text(findings), nl=False)
    elif output_format == "json":
        from taint_audit.cli.formatters.json import JSONFormatter
        formatter = JSONFormatter()
        if output_path:
            formatter.save(findings, output_path, scan_path, analyzed_files)
        else:
            click.echo(formatter.format_to_string(findings, scan_path, analyzed_files))
    elif output_format == "sarif":
        from taint_audit.cli.formatters.sarif import SARIFFormatter
        formatter = SARIFFormatter()
        if output_path:
            formatter.save(findings, output_path)
        else:
            click.echo(formatter.format_to_string(findings))


@click.command()
@click.argument('path', type=click.Path(exists=True), default='.')
@click.option('--format', '-f', 'output_format',
              type=click.Choice(['terminal', 'text', 'json', 'sarif']),
              default='terminal', help='Output format')
@click.option('--output', '-o', type=click.Path(), help='Output file path')
@click.option('--sink', 'sinks', multiple=True,
              help='Additional sink function name (repeatable)')
@click.option('--sanitizer', 'sanitizers', multiple=True,
              help='Additional sanitizer function name (repeatable)')
@click.option('--rules-dir', type=click.Path(exists=True, file_okay=False),
              help='Directory containing YAML function rule files')
@click.option('--baseline', type=click.Path(),
              help='Baseline file - only report new findings')
@click.option('--save-baseline', type=click.Path(),
              help='Save current findings as baseline')
@click.option('--exit-zero', is_flag=True, default=False,
              help='Exit with 0 even when findings are reported')
@click.option('--debug', is_flag=True, default=False,
              help='Print the per-instruction analysis trace')
@click.option('--no-color', is_flag=True, default=False,
              help='Disable colored output (for CI/CD environments)')
@click.pass_context
def scan(ctx: click.Context, path: str, output_format: str, output: Optional[str],
         sinks: tuple, sanitizers: tuple, rules_dir: Optional[str],
         baseline: Optional[str], save_baseline: Optional[str],
         exit_zero: bool, debug: bool, no_color: bool):
    """
    Scan compiled programs for tainted arguments reaching sink functions.

    PATH is an LLVM IR (.ll) or program document (.json, .yaml) file, or a
    directory containing them. Defaults to current directory.

    Examples:

        taint-audit scan module.ll

        taint-audit scan build/ --format sarif --output results.sarif

        taint-audit scan . --sink sprintf --sanitizer strnlen

        taint-audit scan . --save-baseline baseline.json
    """
    ctx.ensure_object(dict)
    exit_code = run_scan(
        path=Path(path),
        output_format=output_format,
        output_path=Path(output) if output else None,
        extra_sinks=list(sinks),
        extra_sanitizers=list(sanitizers),
        rules_dir=Path(rules_dir) if rules_dir else None,
        baseline_path=Path(baseline) if baseline else None,
        save_baseline_path=Path(save_baseline) if save_baseline else None,
        exit_zero=exit_zero,
        debug=debug,
        verbose=ctx.obj.get('verbose', False),
        quiet=ctx.obj.get('quiet', False),
        no_color=no_color
    )

    ctx.exit(exit_code)
