"""Inspect command: show how a file is decoded into functions and instructions."""

import json
from pathlib import Path
from typing import Any, Dict

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from taint_core.models.program import InstructionKind, Program
from taint_audit.frontends import FrontendError, frontend_for

console = Console()

KIND_STYLES = {
    InstructionKind.ASSIGN: "cyan",
    InstructionKind.COPY: "cyan",
    InstructionKind.CALL: "yellow",
    InstructionKind.OTHER: "dim",
}


def program_to_dict(program: Program) -> Dict[str, Any]:
    """Convert a Program to a document the JSON/YAML front-end reads back."""
    return {
        "source_file": program.source_file,
        "functions": [
            {
                "name": func.name,
                "params": list(func.params),
                "blocks": [
                    {
                        "label": block.label,
                        "instructions": [
                            {
                                "kind": inst.kind.value,
                                "line": inst.line,
                                "operands": list(inst.operands),
                                "result": inst.result,
                                "callee": inst.callee,
                            }
                            for inst in block.instructions
                        ],
                    }
                    for block in func.blocks
                ],
            }
            for func in program.functions
        ],
    }


def render_program(program: Program, show_other: bool = False):
    """Render a decoded program as Rich tables, one per function."""
    header = (
        f"[bold]Program Inspection[/bold]\n"
        f"File: {escape(program.source_file)}\n"
        f"Functions: {len(program.functions)}"
    )
    console.print(Panel.fit(header, border_style="blue"))

    for func in program.functions:
        params = ", ".join(p or "<unnamed>" for p in func.params) or "none"
        console.print(
            f"\n[bold]{escape(func.name)}[/bold]({escape(params)}) "
            f"[dim]{len(func.blocks)} blocks, {func.instruction_count} instructions[/dim]"
        )

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Block", style="dim")
        table.add_column("Line", justify="right")
        table.add_column("Kind")
        table.add_column("From / Args")
        table.add_column("To / Callee")

        for block in func.blocks:
            for inst in block.instructions:
                if inst.kind == InstructionKind.OTHER and not show_other:
                    continue
                style = KIND_STYLES[inst.kind]
                if inst.kind == InstructionKind.CALL:
                    left = ", ".join(a or "<unnamed>" for a in inst.arguments)
                    right = inst.callee or "<indirect>"
                elif inst.kind == InstructionKind.OTHER:
                    left, right = inst.text, inst.result
                else:
                    left = inst.source or "<unnamed>"
                    right = inst.destination or "<unnamed>"
                table.add_row(
                    escape(block.label),
                    str(inst.line),
                    f"[{style}]{inst.kind.value}[/{style}]",
                    escape(left),
                    escape(right),
                )

        console.print(table)


@click.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', '-f', 'output_format',
              type=click.Choice(['terminal', 'json']),
              default='terminal', help='Output format')
@click.option('--all', 'show_other', is_flag=True, default=False,
              help='Also list instructions that do not affect taint')
def inspect(path: str, output_format: str, show_other: bool):
    """
    Show how a file is decoded for the analysis.

    Lists each function's parameters and the store, load and call
    instructions the analysis sees, with their operand names.

    Examples:

        taint-audit inspect module.ll

        taint-audit inspect module.ll --format json > module.json
    """
    file_path = Path(path)
    frontend = frontend_for(file_path)
    if frontend is None:
        console.print(f"[red]Unsupported file type: {escape(path)}[/red]")
        raise SystemExit(1)

    try:
        program = frontend.load(file_path)
    except FrontendError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    if output_format == "json":
        click.echo(json.dumps(program_to_dict(program), indent=2))
    else:
        render_program(program, show_other=show_other)
