"""
Discount functions CLI: run a function the way checkout does.

Function input JSON is read from stdin (or --input), the result JSON is
written to stdout, logs go to stderr.
"""
import json
import sys
from pathlib import Path
from typing import Optional

import typer

from core.engine.function_engine import FunctionEngine
from core.observability.logging_setup import configure_logging
from core.observability.otel_setup import setup_otel
from patterns.domain_config import FunctionSettings

# Import functions so they register with the engine
import verticals.tiers_discount.function as tiers_discount
import verticals.volume_discount.function as volume_discount

_INPUT_QUERIES = {
    tiers_discount.HANDLE: tiers_discount.INPUT_QUERY,
    volume_discount.HANDLE: volume_discount.INPUT_QUERY,
}

app = typer.Typer(help="Discount functions: evaluate checkout discounts from function input JSON.")


def _read_payload(path: Optional[Path]):
    try:
        text = path.read_text(encoding="utf-8") if path else sys.stdin.read()
    except (OSError, UnicodeError) as exc:
        typer.echo(f"Function input could not be read: {exc}", err=True)
        raise typer.Exit(code=1)
    try:
        return json.loads(text)
    except ValueError as exc:
        typer.echo(f"Function input is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def run(
    handle: str = typer.Argument(..., help="Function handle, e.g. volume-discount"),
    input_path: Optional[Path] = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="Read input JSON from a file instead of stdin"
    ),
    explain: bool = typer.Option(False, "--explain", help="Print why the run ended the way it did to stderr"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override DISCOUNT_FUNCTIONS_LOG_LEVEL"),
) -> None:
    """Run a discount function and print its result JSON."""
    settings = FunctionSettings.from_env()
    configure_logging((log_level or settings.log_level).upper())

    if handle not in FunctionEngine.list_functions():
        typer.echo(f"Function not found: {handle}", err=True)
        raise typer.Exit(code=2)

    payload = _read_payload(input_path)
    engine = FunctionEngine(tracer=setup_otel(settings))
    evaluation = engine.evaluate(handle, payload)

    typer.echo(json.dumps(evaluation.result.to_wire(), sort_keys=True))
    if explain:
        typer.echo(f"{handle}: {evaluation.current_state.value} ({evaluation.reason})", err=True)
        for note in evaluation.notes:
            typer.echo(f"  - {note}", err=True)


@app.command("list")
def list_functions() -> None:
    """List registered function handles."""
    for handle in FunctionEngine.list_functions():
        typer.echo(handle)


@app.command()
def query(handle: str = typer.Argument(..., help="Function handle")) -> None:
    """Print the GraphQL input query for a function."""
    input_query = _INPUT_QUERIES.get(handle)
    if input_query is None:
        typer.echo(f"Function not found: {handle}", err=True)
        raise typer.Exit(code=2)
    typer.echo(input_query, nl=False)


if __name__ == "__main__":
    app()
