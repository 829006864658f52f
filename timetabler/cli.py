"""
Command-line interface for the timetabler.

Usage:
    python -m timetabler sample roster.json --classes 4
    python -m timetabler generate c001 --data roster.json --seed 7
    python -m timetabler check --data roster.json
    python -m timetabler view c001 --data roster.json
    python -m timetabler export --format csv -o timetable.csv
    python -m timetabler template save "Term 1" --class c001
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .constraints import ConflictDetector
from .data.lookups import LookupTables
from .data.models import GeneratorConfig
from .data.sample import SampleRosterConfig, generate_sample_roster, save_sample_roster
from .data.store import JsonTimetableStore
from .engine.generator import GenerationResult
from .errors import TimetablerError
from .output.formatters import (
    comparison_detail,
    comparison_summary_table,
    conflict_panel,
    format_csv,
    format_json,
    week_grid_table,
)
from .settings import configure_logging, get_settings
from .templates import TemplateStore
from .workflow import ProposalWorkflow

# Create Typer app
app = typer.Typer(
    name="timetabler",
    help="Generate school timetables and audit them for conflicts.",
    add_completion=False,
)
template_app = typer.Typer(help="Save, list, load and delete timetable templates.")
app.add_typer(template_app, name="template")

# Rich console for pretty output
console = Console()


# =============================================================================
# Helper Functions
# =============================================================================

@contextmanager
def handle_errors() -> Iterator[None]:
    """Print package errors in red and exit with code 1."""
    try:
        yield
    except TimetablerError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def open_store(data: Optional[Path]) -> JsonTimetableStore:
    """Open the roster file given on the command line, or the configured one."""
    path = data or get_settings().roster_path
    if not path.exists():
        console.print(f"[red]Error:[/red] Roster file not found: {path}")
        raise typer.Exit(code=1)
    return JsonTimetableStore(path)


def open_templates(templates: Optional[Path]) -> TemplateStore:
    return TemplateStore(templates or get_settings().templates_path)


def store_lookups(store: JsonTimetableStore) -> LookupTables:
    return LookupTables.from_roster(store.roster)


def print_generation_summary(result: GenerationResult) -> None:
    """Print how the proposal was derived."""
    table = Table(title="Generation", show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")

    summary = result.summary()
    table.add_row("Grid slots", str(summary["grid_cells"]))
    table.add_row("Periods per subject", str(summary["periods_per_subject"]))
    table.add_row("Demand pool", str(summary["pool_size"]))
    table.add_row("Teaching entries", str(summary["teaching_entries"]))
    table.add_row("Break entries", str(summary["break_entries"]))
    table.add_row("Unfilled slots", str(summary["unfilled_cells"]))
    table.add_row("Swaps", str(summary["swaps"]))

    console.print(table)

    if result.skipped:
        console.print(
            f"[yellow]{len(result.skipped)} period(s) could not be placed: "
            f"no free teacher at the slot[/yellow]"
        )


def review_and_apply(workflow: ProposalWorkflow, yes: bool, dry_run: bool, details: bool) -> None:
    """Show comparison and conflicts, then apply or reject the proposal."""
    lookups = workflow.lookups()

    comparisons = workflow.compare(lookups)
    console.print(comparison_summary_table(comparisons))
    if details:
        for comparison in comparisons:
            console.print(comparison_detail(comparison))

    console.print(conflict_panel(workflow.conflicts(lookups)))

    if dry_run:
        workflow.reject()
        console.print("[dim]Dry run: proposal discarded.[/dim]")
        return

    if not yes and not typer.confirm(
        "Apply the proposed timetable? Existing entries will be replaced", default=False
    ):
        workflow.reject()
        console.print("[yellow]Proposal rejected.[/yellow]")
        return

    result = workflow.apply()
    console.print(
        f"[green]Applied {result.inserted_count} timetable entries[/green] "
        f"({result.deleted_count} replaced)"
    )


# =============================================================================
# Commands
# =============================================================================

@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default from TIMETABLER_LOG_LEVEL)",
    ),
) -> None:
    """Generate school timetables and audit them for conflicts."""
    configure_logging((log_level or get_settings().log_level).upper())


@app.command()
def sample(
    output: Path = typer.Argument(..., help="Path to write the roster JSON"),
    classes: int = typer.Option(3, "--classes", min=1, max=40, help="Number of classes"),
    subjects: int = typer.Option(5, "--subjects", min=1, max=10, help="Subjects per class"),
    teachers: int = typer.Option(6, "--teachers", min=1, max=60, help="Number of teachers"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """
    Write a sample roster with an empty timetable.

    Example:
        python -m timetabler sample roster.json --classes 4 --seed 1
    """
    roster = generate_sample_roster(SampleRosterConfig(
        num_classes=classes,
        subjects_per_class=subjects,
        num_teachers=teachers,
        seed=seed,
    ))
    save_sample_roster(roster, output)
    console.print(
        f"[green]Sample roster written to:[/green] {output} "
        f"({len(roster.classes)} classes, {len(roster.subjects)} subjects, "
        f"{len(roster.teachers)} teachers)"
    )


@app.command()
def validate(
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
) -> None:
    """
    Validate a roster file and print entity counts.

    Example:
        python -m timetabler validate --data roster.json
    """
    with handle_errors():
        store = open_store(data)

    summary = store.roster.summary()
    table = Table(title="Roster", show_header=False, box=None)
    table.add_column("Entity", style="cyan")
    table.add_column("Count", style="white")

    table.add_row("Classes", str(summary["classes"]))
    table.add_row("Subjects", str(summary["subjects"]))
    table.add_row("Teachers", str(summary["teachers"]))
    table.add_row("Timetable entries", str(summary["timetable_entries"]))
    table.add_row("Break entries", str(summary["break_entries"]))
    table.add_row("Classes without subjects", str(summary["classes_without_subjects"]))

    console.print(table)
    console.print("[green]Validation complete.[/green]")


@app.command()
def generate(
    class_id: str = typer.Argument(..., help="Class to generate a timetable for"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
    periods_per_day: int = typer.Option(6, "--periods-per-day", min=4, max=8),
    days_per_week: int = typer.Option(6, "--days-per-week", min=5, max=6),
    min_periods: int = typer.Option(2, "--min-periods", min=1, max=10, help="Weekly minimum per subject"),
    max_periods: int = typer.Option(5, "--max-periods", min=1, max=15, help="Weekly maximum per subject"),
    breakfast: str = typer.Option("10:00", "--breakfast", help="Breakfast break start (HH:MM)"),
    lunch: str = typer.Option("13:00", "--lunch", help="Lunch break start (HH:MM)"),
    short_break_after: int = typer.Option(3, "--short-break-after", min=2, max=5),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for the shuffle"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Never apply the proposal"),
    details: bool = typer.Option(False, "--details", help="Show slot-level changes"),
) -> None:
    """
    Generate a proposed timetable for one class, review it and apply it.

    Example:
        python -m timetabler generate c001 --data roster.json --seed 7 --yes
    """
    with handle_errors():
        store = open_store(data)
        config = GeneratorConfig(
            selected_class_id=class_id,
            periods_per_day=periods_per_day,
            days_per_week=days_per_week,
            min_periods_per_subject=min_periods,
            max_periods_per_subject=max_periods,
            breakfast_time=breakfast,
            lunch_time=lunch,
            short_break_after_period=short_break_after,
        )

        workflow = ProposalWorkflow(store, config)
        result = workflow.generate(seed=seed if seed is not None else get_settings().seed)

        lookups = workflow.lookups()
        console.print(Panel(f"[bold]{lookups.class_label(class_id)}[/bold] ({class_id})", title="Proposed Timetable"))
        console.print(week_grid_table(result.entries, lookups))
        print_generation_summary(result)

        review_and_apply(workflow, yes=yes, dry_run=dry_run, details=details)


@app.command()
def check(
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
    class_id: Optional[str] = typer.Option(None, "--class", "-C", help="Only this class"),
    format: str = typer.Option("table", "--format", "-f", help="Output format: table or json"),
) -> None:
    """
    Audit the live timetable for teacher double-bookings and missing breaks.

    Exits with code 1 when a high-severity conflict is found.

    Example:
        python -m timetabler check --data roster.json
    """
    with handle_errors():
        store = open_store(data)
        entries = store.list_entries(class_id)
        report = ConflictDetector(store_lookups(store)).detect(entries)

    if format == "json":
        console.print_json(json.dumps(report.to_dict()))
    else:
        console.print(conflict_panel(report))

    if report.has_critical:
        raise typer.Exit(code=1)


@app.command()
def view(
    class_id: str = typer.Argument(..., help="Class to show"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
) -> None:
    """
    Display the live weekly timetable of a class.

    Example:
        python -m timetabler view c001 --data roster.json
    """
    with handle_errors():
        store = open_store(data)

    lookups = store_lookups(store)
    if store.get_class(class_id) is None:
        console.print(f"[red]Error:[/red] Class '{class_id}' not found")
        console.print(f"Available classes: {', '.join(c.class_id for c in store.list_classes())}")
        raise typer.Exit(code=1)

    entries = store.list_entries(class_id)
    console.print(Panel(f"[bold]{lookups.class_label(class_id)}[/bold] ({class_id})", title="Class Timetable"))
    if not entries:
        console.print("[yellow]No timetable entries[/yellow]")
        return
    console.print(week_grid_table(entries, lookups))


@app.command()
def export(
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
    class_id: Optional[str] = typer.Option(None, "--class", "-C", help="Only this class"),
    format: str = typer.Option("json", "--format", "-f", help="Output format: json or csv"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write (default stdout)"),
) -> None:
    """
    Export live timetable entries as JSON or CSV.

    Example:
        python -m timetabler export --format csv -o timetable.csv
    """
    if format not in ("json", "csv"):
        console.print(f"[red]Error:[/red] Unknown format '{format}' (use json or csv)")
        raise typer.Exit(code=1)

    with handle_errors():
        store = open_store(data)

    entries = store.list_entries(class_id)
    if format == "csv":
        text = format_csv(entries, store_lookups(store))
    else:
        text = format_json(entries)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        console.print(f"[green]Exported {len(entries)} entries to:[/green] {output}")
    else:
        typer.echo(text)


# =============================================================================
# Template Commands
# =============================================================================

@template_app.command("save")
def template_save(
    name: str = typer.Argument(..., help="Template name"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
    templates: Optional[Path] = typer.Option(None, "--templates", help="Templates JSON file"),
    class_id: Optional[str] = typer.Option(None, "--class", "-C", help="Only this class"),
    description: Optional[str] = typer.Option(None, "--description", help="Description"),
) -> None:
    """Save the live timetable as a named template."""
    with handle_errors():
        store = open_store(data)
        template = open_templates(templates).save(name, store.list_entries(class_id), description)

    console.print(
        f"[green]Template \"{template.template_name}\" saved[/green] "
        f"({template.metadata.total_entries} entries, id {template.template_id})"
    )


@template_app.command("list")
def template_list(
    templates: Optional[Path] = typer.Option(None, "--templates", help="Templates JSON file"),
) -> None:
    """List saved templates, newest first."""
    with handle_errors():
        saved = open_templates(templates).list_templates()

    if not saved:
        console.print("[yellow]No templates saved[/yellow]")
        return

    table = Table(title="Templates", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Name", no_wrap=True)
    table.add_column("Entries", justify="right")
    table.add_column("Saved")
    table.add_column("Description")

    for template in saved:
        table.add_row(
            template.template_id,
            template.template_name,
            str(template.metadata.total_entries),
            template.created_at.strftime("%Y-%m-%d %H:%M"),
            template.description or "",
        )

    console.print(table)


@template_app.command("load")
def template_load(
    template_id: str = typer.Argument(..., help="Template ID"),
    data: Optional[Path] = typer.Option(None, "--data", "-d", help="Roster JSON file"),
    templates: Optional[Path] = typer.Option(None, "--templates", help="Templates JSON file"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply without asking"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Never apply the proposal"),
    details: bool = typer.Option(False, "--details", help="Show slot-level changes"),
) -> None:
    """Propose a template's entries as the timetable, review and apply."""
    with handle_errors():
        store = open_store(data)
        template = open_templates(templates).get(template_id)

        workflow = ProposalWorkflow(store)
        workflow.propose(template.configuration)
        console.print(f"[bold]Template \"{template.template_name}\" loaded[/bold]")

        review_and_apply(workflow, yes=yes, dry_run=dry_run, details=details)


@template_app.command("delete")
def template_delete(
    template_id: str = typer.Argument(..., help="Template ID"),
    templates: Optional[Path] = typer.Option(None, "--templates", help="Templates JSON file"),
) -> None:
    """Delete a saved template."""
    with handle_errors():
        open_templates(templates).delete(template_id)

    console.print(f"[green]Template {template_id} deleted[/green]")


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
