"""Terminal formatter with Rich output."""

from collections import Counter
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from taint_core.models.finding import Finding, REPORT_HEADER

console = Console()


class TerminalFormatter:
    """Rich terminal output formatter for scan results."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        no_color: bool = False,
        output: Optional[Console] = None
    ):
        self.verbose = verbose
        self.quiet = quiet
        if output is not None:
            self.console = output
        elif no_color:
            self.console = Console(no_color=True, highlight=False)
        else:
            self.console = console

    def format_findings(
        self,
        findings: List[Finding],
        scan_path: str,
        analyzed_files: int = 0,
        skipped_files: int = 0
    ):
        """Format and display findings in discovery order."""
        if self.quiet and not findings:
            return

        self._print_header(scan_path, analyzed_files, skipped_files, findings)

        if not findings:
            self.console.print("[green]No tainted arguments reach a sink.[/green]")
            return

        self.console.print(f"[yellow bold]{escape(REPORT_HEADER)}[/yellow bold]")
        current_file = None
        for finding in findings:
            if finding.file_path and finding.file_path != current_file and analyzed_files > 1:
                current_file = finding.file_path
                self.console.print(f"[dim]{escape(current_file)}[/dim]")
            self._print_finding(finding)

        self.console.print()
        self._print_summary(findings)

    def _print_header(
        self,
        scan_path: str,
        analyzed_files: int,
        skipped_files: int,
        findings: List[Finding]
    ):
        color = "red" if findings else "green"

        header = Text()
        header.append("Taint Audit Report\n", style="bold")
        header.append(f"Scanned: {scan_path}\n", style="dim")
        header.append(f"Files analyzed: {analyzed_files}", style="dim")
        if skipped_files:
            header.append(f"\nFiles skipped: {skipped_files}", style="yellow")

        self.console.print(Panel(header, border_style=color))
        self.console.print()

    def _print_finding(self, finding: Finding):
        line = f"  [red]{escape(finding.render())}[/red]"
        if self.verbose:
            details = []
            if finding.function:
                details.append(f"in {finding.function}")
            if finding.tainted_arguments:
                details.append("tainted: " + ", ".join(finding.tainted_arguments))
            if finding.cwe_id:
                details.append(finding.cwe_id)
            if details:
                line += f" [dim]({escape('; '.join(details))})[/dim]"
        self.console.print(line)

    def _print_summary(self, findings: List[Finding]):
        by_sink = Counter(f.sink for f in findings)
        parts = " | ".join(f"{sink}: {count}" for sink, count in by_sink.items())
        self.console.print(f"[bold]Summary:[/bold] {len(findings)} findings ({escape(parts)})")


def format_scan_results(
    findings: List[Finding],
    scan_path: str,
    analyzed_files: int = 0,
    skipped_files: int = 0,
    verbose: bool = False,
    quiet: bool = False,
    no_color: bool = False
):
    """Convenience function to format scan results."""
    formatter = TerminalFormatter(verbose=verbose, quiet=quiet, no_color=no_color)
    formatter.format_findings(findings, scan_path, analyzed_files, skipped_files)
