"""CLI application using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

app = typer.Typer(
    name="edss",
    help="Expanded Disability Status Scale scoring from examination findings",
    no_args_is_help=True,
)
console = Console()

# Sub-applications
config_app = typer.Typer(help="Configuration management")

app.add_typer(config_app, name="config")


# ============================================================================
# Config commands
# ============================================================================


@config_app.command("show")
def config_show():
    """Show current configuration."""
    from edss_calculator.core.config import get_settings

    settings = get_settings()
    data = settings.to_dict()

    console.print("[bold]Current Configuration[/bold]\n")

    for section, values in data.items():
        console.print(f"[cyan]{section}:[/cyan]")
        if isinstance(values, dict):
            for key, value in values.items():
                console.print(f"  {key}: {value}")
        else:
            console.print(f"  {values}")
        console.print()


@config_app.command("init")
def config_init(
    path: Annotated[Path, typer.Option("--path", "-p", help="Config file path")] = Path(
        "config/settings.yaml"
    ),
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite without asking")] = False,
):
    """Initialize configuration file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Abort()

    yaml_content = """# EDSS Calculator Configuration

scoring:
  # EDSS used when the FS pattern is not in the table and max FS <= 3
  low_edss_fallback: 4.0
  # EDSS used when neither the FS nor the ambulation path yields a value
  default_edss: 4.0
  # Upper bound for the unaided walking distance, in metres
  max_distance: 2000

report:
  include_corrected: true
  include_warnings: true
  date_format: "%Y-%m-%d"
  output_dir: reports
"""

    path.write_text(yaml_content)
    console.print(f"[green]Created config at {path}[/green]")


# ============================================================================
# Scoring commands
# ============================================================================


def _fs_table(assessment) -> Table:
    from edss_calculator.collection.scales import FS_LABELS
    from edss_calculator.report.generator import SUMMARY_ORDER

    table = Table(title="Functional Systems")
    table.add_column("FS", style="cyan")
    table.add_column("Name")
    table.add_column("Suggested", justify="center")
    table.add_column("Grade", justify="center")
    table.add_column("Corrected", justify="center")
    table.add_column("Rule", max_width=50)

    for domain in SUMMARY_ORDER:
        grade = assessment.raw_fs[domain]
        suggested = assessment.suggested_fs[domain]
        table.add_row(
            domain.value,
            FS_LABELS[domain],
            str(suggested),
            f"[bold]{grade}[/bold]" if grade != suggested else str(grade),
            str(assessment.corrected_fs[domain]),
            assessment.fs_rules.get(domain, ""),
        )
    return table


def _candidates_table(assessment) -> Table:
    table = Table(title="EDSS Derivation")
    table.add_column("Path", style="cyan")
    table.add_column("EDSS", justify="right")
    table.add_column("Rationale", max_width=60)

    for label, result in (
        ("FS pattern", assessment.low_edss),
        ("Ambulation", assessment.ambulation_edss),
        ("Final", assessment.result),
    ):
        if result is None:
            table.add_row(label, "-", "not applicable")
        else:
            table.add_row(label, f"{result.edss:.1f}", result.rationale)
    return table


def _print_warnings(assessment) -> None:
    if not assessment.warnings:
        console.print("[green]No plausibility warnings[/green]")
        return

    table = Table(title="Plausibility")
    table.add_column("Severity")
    table.add_column("Category")
    table.add_column("Message", max_width=70)

    for w in assessment.warnings:
        style = "yellow" if w.severity.value == "warning" else "blue"
        table.add_row(f"[{style}]{w.severity.value}[/{style}]", w.category.value, w.message)

    console.print(table)


@app.command("score")
def score(
    case_file: Annotated[Path, typer.Argument(help="Case YAML file")],
    summary: Annotated[bool, typer.Option("--summary", "-s", help="Print the quick summary")] = False,
    narrative: Annotated[
        bool, typer.Option("--narrative", "-n", help="Print the examination narrative")
    ] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full assessment as JSON")] = False,
    report: Annotated[
        Optional[Path], typer.Option("--report", "-r", help="Write a Markdown report to this path")
    ] = None,
    save: Annotated[
        bool, typer.Option("--save", help="Write a Markdown report to the configured output directory")
    ] = False,
):
    """Score a case file and show the EDSS with its derivation."""
    from edss_calculator.collection.forms import FormError, load_case
    from edss_calculator.core.config import get_settings
    from edss_calculator.report import ReportGenerator
    from edss_calculator.scoring import assess

    settings = get_settings()

    try:
        case = load_case(case_file, max_distance=settings.scoring.max_distance)
    except FormError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    assessment = assess(
        case.findings,
        case.assistance,
        case.distance,
        case.overrides,
        fallback=settings.scoring.low_edss_fallback,
        default=settings.scoring.default_edss,
    )

    if as_json:
        data = {"name": case.name, **assessment.to_dict()}
        if not settings.report.include_warnings:
            data.pop("warnings")
        typer.echo(json.dumps(data, indent=2))
        return

    generator = ReportGenerator(include_corrected=settings.report.include_corrected)

    if save and report is None:
        settings.ensure_directories()
        report = settings.report.output_dir / f"{case.name}.md"

    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        generator.assessment_report(
            assessment,
            title=f"EDSS Assessment: {case.name}",
            output_path=report,
            date_format=settings.report.date_format,
        )
        console.print(f"[green]Report saved to: {report}[/green]")

    if summary or narrative:
        if summary:
            typer.echo(generator.summary(assessment))
        if narrative:
            if summary:
                typer.echo("")
            typer.echo(generator.narrative(assessment))
        return

    console.print(f"[bold]{case.name}[/bold]  EDSS [bold cyan]{assessment.edss:.1f}[/bold cyan]\n")
    console.print(_fs_table(assessment))
    console.print(_candidates_table(assessment))
    if assessment.overridden:
        codes = ", ".join(d.value for d in assessment.overridden)
        console.print(f"[yellow]Manual override: {codes}[/yellow]")
    if settings.report.include_warnings:
        _print_warnings(assessment)


@app.command("new")
def new_case(
    path: Annotated[Path, typer.Argument(help="Case YAML file to create")],
    name: Annotated[str, typer.Option("--name", help="Case name")] = "",
):
    """Write a case file with a normal examination to fill in."""
    from edss_calculator.collection.forms import Case, dump_case

    if path.exists():
        console.print(f"[red]File already exists: {path}[/red]")
        raise typer.Exit(1)

    dump_case(Case(name=name or path.stem), path)
    console.print(f"[green]Created case at {path}[/green]")


@app.command("scales")
def scales(
    name: Annotated[Optional[str], typer.Argument(help="Scale name or abbreviation")] = None,
):
    """View the Functional System and ambulation scales."""
    from edss_calculator.collection.scales import format_scale, get_scale, list_scales

    if not name:
        table = Table(title="EDSS Scales")
        table.add_column("Abbreviation", style="cyan")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Items")
        table.add_column("Range")

        for s in list_scales():
            table.add_row(
                s.abbreviation,
                s.name,
                s.scale_type.value,
                str(s.item_count),
                f"{s.total_min:g}-{s.total_max:g}",
            )

        console.print(table)
        return

    scale = get_scale(name)
    if not scale:
        console.print(f"[red]Scale not found: {name}[/red]")
        raise typer.Exit(1)

    console.print(format_scale(scale), markup=False)


# ============================================================================
# Main entry point
# ============================================================================


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
    config: Annotated[
        Optional[Path], typer.Option("--config", "-c", help="Settings YAML file")
    ] = None,
):
    """Expanded Disability Status Scale scoring from examination findings."""
    from edss_calculator.core.config import reload_settings

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )

    if config is not None:
        if not config.exists():
            console.print(f"[red]Config file not found: {config}[/red]")
            raise typer.Exit(1)
        reload_settings(config)


if __name__ == "__main__":
    app()
