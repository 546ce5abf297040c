"""CLI for the trade-off referee.

Provides a command-line interface for comparing two options from a
reference catalog and inspecting the catalog.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import find_config_file, get_config, load_config
from .engine import ComparisonEngine
from .exceptions import OptionNotFoundError, RefereeError
from .explainer import ATTRIBUTE_NAMES
from .schema import ATTRIBUTE_TYPES, CompareResponse, ScalabilityPriority

console = Console()

RATING_COLORS = {
    "high": "green",
    "medium": "yellow",
    "low": "red",
}


def setup_logging(verbose: bool) -> None:
    """Route log records through rich, once per process."""
    level = logging.DEBUG if verbose else get_config().logging.level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="referee")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True),
    help="Path to referee-config.yaml (default: search standard locations)"
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str]):
    """Trade-off Referee.

    Compares two technical options against weighted attributes and your
    constraints, and explains the trade-off without declaring a winner.
    """
    # init-config never reads the file it may overwrite
    if ctx.invoked_subcommand == "init-config":
        return

    path = Path(config_path) if config_path else find_config_file()
    if not path:
        return
    try:
        load_config(path)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        console.print(f"[red]Error loading config {escape(str(path))}:[/red] {escape(str(e))}")
        sys.exit(1)


def _load_engine(catalog: str) -> ComparisonEngine:
    engine = ComparisonEngine()
    engine.load_catalog(catalog)
    return engine


@main.command("compare")
@click.argument("option_a")
@click.argument("option_b")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the reference catalog (JSON or YAML)"
)
@click.option("--budget-min", type=float, default=0, show_default=True, help="Minimum budget")
@click.option("--budget-max", type=float, default=1000, show_default=True, help="Maximum budget")
@click.option(
    "--priority", "-p",
    type=click.Choice([p.value for p in ScalabilityPriority]),
    default=ScalabilityPriority.MEDIUM.value,
    show_default=True,
    help="How much scalability matters"
)
@click.option(
    "--integration", "-i", "integrations",
    multiple=True,
    help="Required integration id (repeatable)"
)
@click.option("--ai/--no-ai", default=None, help="Overlay AI-generated explanations if available")
@click.option("--context", "additional_context", help="Who the comparison is for (AI mode only)")
@click.option("--out", "-o", type=click.Path(), help="Output file for JSON results")
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON instead of formatted text")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def compare_cmd(
    option_a: str,
    option_b: str,
    catalog: str,
    budget_min: float,
    budget_max: float,
    priority: str,
    integrations: tuple,
    ai: Optional[bool],
    additional_context: Optional[str],
    out: Optional[str],
    json_output: bool,
    verbose: bool,
):
    """Compare two options by id.

    Examples:
        referee compare -c catalog.json LAMBDA_ID EC2_ID -p high
        referee compare -c catalog.json LAMBDA_ID EC2_ID -i S3_ID -i DOCKER_ID
        referee compare -c catalog.json LAMBDA_ID EC2_ID --ai --context "startup team"
    """
    setup_logging(verbose)
    use_ai = get_config().enhancement.enabled if ai is None else ai

    request = {
        "optionIds": [option_a, option_b],
        "constraints": {
            "budgetMin": budget_min,
            "budgetMax": budget_max,
            "scalabilityPriority": priority,
            "requiredIntegrations": list(integrations),
        },
        "additionalContext": additional_context,
    }

    try:
        engine = _load_engine(catalog)
        if use_ai and not json_output:
            with console.status("Comparing (AI enhancement enabled)..."):
                response = engine.compare(request, use_ai=True)
        else:
            response = engine.compare(request, use_ai=use_ai)
    except RefereeError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        for field, message in e.details.items():
            console.print(f"  - {field}: {escape(message)}")
        sys.exit(1)

    if json_output:
        output_json(response, out)
    else:
        display_response(response)
        if out:
            output_json(response, out)
            console.print(f"\n[green]Results saved to {out}[/green]")


@main.command("options")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the reference catalog (JSON or YAML)"
)
def options_cmd(catalog: str):
    """List the options available for comparison."""
    try:
        engine = _load_engine(catalog)
    except RefereeError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category")

    for option in sorted(engine.catalog.options, key=lambda o: o.name):
        table.add_row(option.id, option.name, option.category)

    console.print(table)


@main.command("integrations")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the reference catalog (JSON or YAML)"
)
@click.option(
    "--option", "option_ids",
    multiple=True,
    help="Only show integrations supported by this option id (repeatable)"
)
def integrations_cmd(catalog: str, option_ids: tuple):
    """List integrations and how many options support each.

    With --option, only integrations supported by every given option are
    listed; these are the ones usable as --integration in compare.

    Example:
        referee integrations -c catalog.json --option LAMBDA_ID --option EC2_ID
    """
    try:
        engine = _load_engine(catalog)
        missing = [i for i in option_ids if engine.catalog.get_option(i) is None]
        if missing:
            raise OptionNotFoundError(missing)
    except RefereeError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)

    selected = list(option_ids) or None
    counts = engine.catalog.integration_counts(selected)
    integrations = engine.catalog.supported_integrations(selected)

    if selected and not integrations:
        console.print("[yellow]No integration is supported by all selected options[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Options", justify="right")

    for integration in sorted(integrations, key=lambda i: i.name):
        table.add_row(
            integration.id,
            integration.name,
            integration.category,
            str(counts.get(integration.id, 0)),
        )

    console.print(table)


@main.command("weights")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the reference catalog (JSON or YAML)"
)
@click.option(
    "--priority", "-p",
    type=click.Choice([p.value for p in ScalabilityPriority]),
    default=ScalabilityPriority.MEDIUM.value,
    show_default=True,
    help="Scalability priority to resolve weights for"
)
def weights_cmd(catalog: str, priority: str):
    """Show effective attribute weights for a scalability priority."""
    try:
        engine = _load_engine(catalog)
    except RefereeError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)

    scalability_priority = ScalabilityPriority(priority)
    effective = engine.effective_weights(scalability_priority)
    primary = engine.primary_attribute(scalability_priority)

    console.print(f"\n[bold]Effective weights[/bold] (scalability priority: {priority})\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Attribute")
    table.add_column("Weight", justify="right")
    table.add_column("")

    for attribute_type, weight in effective.items():
        marker = "[bold cyan]primary[/bold cyan]" if attribute_type == primary else ""
        table.add_row(ATTRIBUTE_NAMES[attribute_type], f"{weight:.3f}", marker)

    console.print(table)


def display_response(response: CompareResponse):
    """Display a comparison in formatted text."""
    comparison = response.comparison
    explanation = response.explanation

    console.print(Panel(
        explanation.summary,
        title="Trade-off Summary" + (" (AI enhanced)" if response.ai_enhanced else ""),
    ))

    # Attribute matrix
    table = Table(show_header=True, header_style="bold")
    table.add_column("Attribute")
    for option in comparison.options:
        table.add_column(option.name)

    for attribute_type in ATTRIBUTE_TYPES:
        cells = []
        for option in comparison.options:
            value = option.attributes.get(attribute_type)
            color = RATING_COLORS.get(value.rating.value, "white")
            cells.append(f"{value.icon} {value.value} [{color}]({value.rating.value})[/{color}]")
        table.add_row(ATTRIBUTE_NAMES[attribute_type], *cells)

    table.add_row("[bold]Fit score[/bold]", *[f"[bold]{o.score}[/bold]" for o in comparison.options])
    console.print(table)

    # Per-option analysis
    for analysis in explanation.option_analysis:
        console.print(f"\n[bold cyan]{analysis.name}[/bold cyan] [bold]{analysis.fit_score}[/bold]")
        console.print(f"  {analysis.fit_reason}")
        for strength in analysis.strengths:
            console.print(f"  [green]+[/green] {strength}")
        for weakness in analysis.weaknesses:
            console.print(f"  [yellow]-[/yellow] {weakness}")

    if explanation.constraint_impact:
        console.print("\n[bold]Constraint Impact:[/bold]")
        for impact in explanation.constraint_impact:
            console.print(f"  • {impact.constraint}: {impact.impact}")

    console.print(f"\n[bold]Pivot:[/bold] {response.pivot.statement}")

    if response.ai_analysis:
        ai = response.ai_analysis
        console.print(f"\n[bold]AI Recommendation:[/bold] {ai.recommendation}")
        if ai.decision_guidance:
            console.print(f"[bold]Decision Guidance:[/bold] {ai.decision_guidance}")
        for insight in ai.personalized_insights or []:
            console.print(f"  [cyan]•[/cyan] {insight}")
        console.print(f"[dim]Confidence: {ai.confidence_score:.0f}%[/dim]")


def output_json(response: CompareResponse, out_path: Optional[str]):
    """Output response as camelCase JSON."""
    json_str = response.model_dump_json(indent=2, by_alias=True)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="referee-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default referee configuration file.

    Example:
        referee init-config --out my-config.yaml
    """
    from .config import save_default_config

    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
    except OSError as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Config file created: {out}")
    console.print("\nThis file configures:")
    console.print("  • explanation - Score thresholds used in explanation wording")
    console.print("  • enhancement - Optional AI providers, timeout and sampling")
    console.print("  • logging - Log level")
    console.print("\nThe referee will look for config in this order:")
    console.print("  1. REFEREE_CONFIG environment variable")
    console.print("  2. ./referee-config.yaml (current directory)")
    console.print("  3. ~/.config/referee/config.yaml")


if __name__ == "__main__":
    main()
