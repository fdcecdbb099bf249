"""Command-line interface for concept graph extraction using Typer.

Commands:
    extract       - Run one extraction engine over a text
    validate      - Check a raw model response against the graph schema
    prompt        - Print the system prompt the LLM engine would send
    analyze       - Score each graph kind from signal words in a text
    list engines  - Show the registered extraction engines

Examples:
    concept-graph extract --engine keywords --input notes.txt
    concept-graph extract --engine llm --variant storyboard --text "Once upon a time..."
    concept-graph validate --input response.json
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .analyzer import analyze_text, top_recommendation
from .config import LLMConfig
from .extractors import ExtractorRegistry, available_engines
from .parser import parse_visualization_response
from .prompts import build_system_prompt
from .schema import VisualizationGraph, VisualizationKind
from .text import content_fingerprint

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Initialize Typer apps
app = typer.Typer(
    help="Concept graph extraction CLI. Use 'extract' to build a graph, 'validate' to check a model response.",
    no_args_is_help=True,
)
list_app = typer.Typer(help="List available resources.", no_args_is_help=True)
app.add_typer(list_app, name="list")

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging")):
    """Load .env settings and configure logging for every command."""
    load_dotenv()
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def _build_llm_config(
    endpoint: Optional[str],
    model: Optional[str],
    api_key: Optional[str],
    timeout: Optional[int],
) -> LLMConfig:
    """Environment settings, overridden by whatever was passed on the command line."""
    overrides = {}
    if endpoint:
        overrides["endpoint"] = endpoint
    if model:
        overrides["model"] = model
    if api_key:
        overrides["api_key"] = api_key
    if timeout:
        overrides["timeout"] = timeout
    return replace(LLMConfig.from_env(), **overrides)


def _read_text(input_file: Optional[Path], text: Optional[str]) -> str:
    if input_file is not None and text is not None:
        raise typer.BadParameter("Use either --input or --text, not both")
    if input_file is not None:
        return input_file.read_text(encoding="utf-8")
    if text is not None:
        return text
    raise typer.BadParameter("One of --input or --text is required")


def _summary_table(graph: VisualizationGraph, source_text: str) -> Table:
    table = Table(title="Extraction Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Kind", str(graph.kind))
    table.add_row("Title", graph.title)
    table.add_row("Nodes", str(len(graph.nodes)))
    table.add_row("Edges", str(len(graph.edges)))
    table.add_row("Fingerprint", content_fingerprint(source_text))
    return table


# =============================================================================
# EXTRACT Command
# =============================================================================

@app.command()
def extract(
    engine: str = typer.Option(..., "--engine", "-e", help=f"Extraction engine (Available: {', '.join(available_engines())})"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Path to a UTF-8 text file", exists=True, file_okay=True, dir_okay=False),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to analyze"),
    variant: Optional[VisualizationKind] = typer.Option(None, "--variant", "-v", help="Requested graph kind (LLM engine only)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the graph JSON here instead of stdout"),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", help="Chat completions base URL"),
    model: Optional[str] = typer.Option(None, "--model", help="Model name for the LLM engine"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Bearer token for the model server"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Request timeout (seconds)"),
):
    """Extract a concept graph from text with one engine.

    \b
    Examples:
        concept-graph extract -e keywords -i notes.txt
        concept-graph extract -e llm -v logical-flow -t "All men are mortal..."
    """
    try:
        source_text = _read_text(input_file, text)
        registry = ExtractorRegistry(_build_llm_config(endpoint, model, api_key, timeout))
        extractor = registry.get_engine(engine)

        err_console.print(f"[bold blue]Extracting with {extractor.name}[/bold blue]")
        graph = asyncio.run(extractor.extract(source_text, variant.value if variant else None))
    except typer.BadParameter:
        raise
    except Exception as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)

    payload = graph.to_json(indent=2)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        err_console.print(f"Graph written to [dim]{output}[/dim]")
    else:
        typer.echo(payload)

    err_console.print(_summary_table(graph, source_text))


# =============================================================================
# VALIDATE Command
# =============================================================================

@app.command()
def validate(
    input_file: Path = typer.Option(..., "--input", "-i", help="Raw model response (JSON, optionally fenced)", exists=True, file_okay=True, dir_okay=False),
):
    """Validate a raw model response against the concept graph schema."""
    try:
        graph = parse_visualization_response(input_file.read_text(encoding="utf-8"))
    except ValueError as e:
        field = getattr(e, "field", None)
        where = f" [dim]({escape(field)})[/dim]" if field else ""
        console.print(f"[bold red]Invalid:[/bold red] {escape(str(e))}{where}")
        raise typer.Exit(code=1)

    console.print(
        f"[bold green]✓ Valid[/bold green] {graph.kind} '{escape(graph.title)}' "
        f"with {len(graph.nodes)} nodes and {len(graph.edges)} edges"
    )


# =============================================================================
# PROMPT Command
# =============================================================================

@app.command()
def prompt(
    variant: Optional[VisualizationKind] = typer.Option(None, "--variant", "-v", help="Graph kind to request"),
):
    """Print the system prompt the LLM engine would send."""
    typer.echo(build_system_prompt(variant.value if variant else None))


# =============================================================================
# ANALYZE Command
# =============================================================================

@app.command()
def analyze(
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Path to a UTF-8 text file", exists=True, file_okay=True, dir_okay=False),
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Text to analyze"),
):
    """Recommend a graph kind for a text, e.g. as the --variant for the LLM engine."""
    scores = analyze_text(_read_text(input_file, text))
    best = top_recommendation(scores)

    table = Table(title="Kind Scores")
    table.add_column("Kind", style="cyan")
    table.add_column("Score", style="magenta")
    for kind, score in scores.items():
        marker = " *" if kind == best.kind else ""
        table.add_row(f"{kind.value}{marker}", f"{score:.2f}")
    console.print(table)
    console.print(f"Recommended: [bold green]{best.kind.value}[/bold green] ({best.confidence:.2f})")


# =============================================================================
# LIST Subcommands
# =============================================================================

@list_app.command("engines")
def list_engines():
    """Show the registered extraction engines."""
    registry = ExtractorRegistry()
    table = Table(title="Extraction Engines")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="magenta")
    for engine in registry.list_engines():
        table.add_row(engine.id, engine.name)
    console.print(table)


if __name__ == "__main__":
    app()
