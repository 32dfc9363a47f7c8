"""
veritrace CLI

Build verification queries for the answers recorded in a scenario file
"""
import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from veritrace.export import export_queries
from veritrace.lookup.loader import load_scenario
from veritrace.reconstruction.batch import BatchDriver
from veritrace.settings import get_settings, reload_settings
from veritrace.utils import VeritraceError, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version="0.1.0")
@click.option("--config", "config_path", type=click.Path(exists=True), help="YAML settings file")
def main(config_path):
    """
    veritrace - verification queries for inferred answers

    Reconstructs, for every answer a rule-based reasoner returns, a
    standalone pattern a verifier can check without the reasoner.
    """
    try:
        settings = reload_settings(config_path) if config_path else get_settings()
    except ValidationError as e:
        console.print(f"\n[red]✗ Invalid settings: {escape(str(e))}[/red]")
        raise SystemExit(1)
    setup_logging(settings.log_level, settings.log_file)


# ═══════════════════════════════════════════════════════════════════
# SCENARIO COMMANDS
# ═══════════════════════════════════════════════════════════════════

@main.command()
@click.argument("scenario_path", type=click.Path(exists=True))
def show(scenario_path):
    """List the queries in a scenario file"""
    try:
        scenario = load_scenario(scenario_path)
    except VeritraceError as e:
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    table = Table(title="Scenario Queries")
    table.add_column("Name", style="cyan")
    table.add_column("Query")
    table.add_column("Answers", style="magenta", justify="right")

    for name, query in scenario.queries.items():
        table.add_row(name, query, str(scenario.answer_counts.get(name, 0)))

    console.print(table)


@main.command()
@click.argument("scenario_path", type=click.Path(exists=True))
@click.option("--query", "-q", "query_name", help="Only this named query")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None, help="Answers reconstructed concurrently")
@click.option("--output", "-o", type=click.Path(), help="Output JSON file")
def verify(scenario_path, query_name, workers, output):
    """Build one verification query per answer"""
    try:
        scenario = load_scenario(scenario_path)
        names = [query_name] if query_name else list(scenario.queries)
        driver = BatchDriver(scenario.lookup, max_workers=workers)

        for name in names:
            query = scenario.query(name)
            console.print(f"\n[bold blue]Query:[/bold blue] {name}  [dim]{escape(query)}[/dim]")

            queries = driver.build_verification_queries(query)
            for i, verification in enumerate(queries):
                console.print(f"\n[bold green]Answer {i}[/bold green] ({len(verification.pattern)} statements)")
                console.print(str(verification), markup=False)

            if output:
                path = export_queries(query, queries, _output_path(output, name, len(names)))
                console.print(f"\n[green]✓ Saved to {path}[/green]")

    except VeritraceError as e:
        console.print(f"\n[red]✗ Error: {escape(str(e))}[/red]")
        raise SystemExit(1)

    console.print("\n[green]✓ Verification queries built[/green]")


def _output_path(output: str, name: str, total: int) -> str:
    """One file per query when several queries are exported"""
    if total == 1:
        return output
    stem, dot, suffix = output.rpartition(".")
    if not dot:
        return f"{output}_{name}"
    return f"{stem}_{name}.{suffix}"


if __name__ == "__main__":
    main()
