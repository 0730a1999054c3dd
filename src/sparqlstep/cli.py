# src/sparqlstep/cli.py
"""sparqlstep Command Line Interface.

Entry point for the sparqlstep CLI tool.
"""

import csv
import json
import logging
import sys
from contextlib import nullcontext
from enum import Enum
from pathlib import Path
from typing import IO, Any

import structlog
import typer
from pydantic import ValidationError

from sparqlstep import __version__
from sparqlstep.contracts import CheckResultType, OutputRow, QueryError, StepLifecycleError
from sparqlstep.core.config import (
    StepSettings,
    default_settings,
    load_settings,
    save_settings,
)
from sparqlstep.core.messages import MessageBundle
from sparqlstep.core.variables import resolve_settings
from sparqlstep.engine.check import check_input_steps
from sparqlstep.engine.runtime import StepRuntime
from sparqlstep.engine.schema import infer_output_fields
from sparqlstep.store.probe import probe_connection

app = typer.Typer(
    name="sparqlstep",
    help="sparqlstep: SPARQL tuple queries as pipeline rows.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Row serialization for the run command."""

    JSONL = "jsonl"
    CSV = "csv"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sparqlstep version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route structlog through stdlib logging so events land on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
    root = logging.getLogger()
    root.setLevel(level)
    if verbose and not root.handlers:
        root.addHandler(logging.StreamHandler())


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug log events on stderr.",
    ),
) -> None:
    """sparqlstep: SPARQL tuple queries as pipeline rows."""
    _configure_logging(verbose)


def _load_settings_or_exit(settings: str) -> StepSettings:
    """Load settings, printing a readable error and exiting on failure."""
    try:
        return load_settings(Path(settings))
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


class _RowWriter:
    """Writes OutputRows to a text stream as JSON lines or CSV."""

    def __init__(self, stream: IO[str], fmt: OutputFormat) -> None:
        self._stream = stream
        self._fmt = fmt
        self._csv: Any = None

    def write(self, row: OutputRow) -> None:
        if self._fmt is OutputFormat.JSONL:
            self._stream.write(json.dumps(row.to_row(), ensure_ascii=False) + "\n")
            return
        self.write_header(row.fields)
        self._csv.writerow(["" if v is None else v for v in row.values])

    def write_header(self, columns: tuple[str, ...]) -> None:
        """Write the CSV header once; JSON lines have none."""
        if self._fmt is OutputFormat.CSV and self._csv is None:
            self._csv = csv.writer(self._stream)
            self._csv.writerow(columns)


@app.command()
def init(
    output: str = typer.Option(
        "sparqlstep.yaml",
        "--output",
        "-o",
        help="Where to write the default settings.",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file.",
    ),
) -> None:
    """Write a settings file with the default endpoint and query."""
    path = Path(output)
    if path.exists() and not force:
        typer.echo(f"Error: {output} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(1)
    save_settings(default_settings(), path)
    typer.echo(f"Wrote default settings to {output}")


@app.command()
def run(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write rows to this file instead of stdout.",
    ),
    fmt: OutputFormat = typer.Option(
        OutputFormat.JSONL,
        "--format",
        "-f",
        help="Row format.",
    ),
    step_name: str = typer.Option(
        "sparql",
        "--step-name",
        help="Step name used in log events.",
    ),
) -> None:
    """Execute the configured query and write every result row."""
    step_settings = _load_settings_or_exit(settings)
    bundle = MessageBundle.load()

    with StepRuntime(step_settings, step_name=step_name) as runtime:
        if not runtime.init():
            typer.echo(bundle.get("SparqlStep.Init.Failed", error=runtime.init_error), err=True)
            raise typer.Exit(1)

        target = open(output, "w", encoding="utf-8", newline="") if output else nullcontext(sys.stdout)
        try:
            with target as stream:
                writer = _RowWriter(stream, fmt)
                runtime.produce_rows(writer.write)
                if runtime.columns is not None:
                    # Empty results still get a header
                    writer.write_header(runtime.columns)
        except (QueryError, StepLifecycleError) as e:
            typer.echo(bundle.get("SparqlStep.Run.Failed", error=e), err=True)
            raise typer.Exit(1) from None

    typer.echo(bundle.get("SparqlStep.Run.Completed", rows=runtime.rows_written), err=True)


@app.command()
def fields(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
) -> None:
    """Show the output fields the configured query produces.

    Runs the query once. On failure nothing is listed; the exit code stays 0.
    """
    step_settings = _load_settings_or_exit(settings)
    field_metas = infer_output_fields(step_settings, origin="sparql")

    if json_output:
        payload = [
            {"name": f.name, "type": f.type.value, "trim_type": f.trim_type.value}
            for f in field_metas
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    if not field_metas:
        typer.echo(MessageBundle.load().get("SparqlStep.Fields.None"))
        return
    for f in field_metas:
        typer.echo(f"{f.name}\t{f.type.value}\ttrim={f.trim_type.value}")


@app.command()
def check(
    inputs: list[str] = typer.Option(
        [],
        "--input",
        "-i",
        help="Name of a step sending rows to this one (repeatable).",
    ),
) -> None:
    """Verify the step's position in a pipeline (it must be a source)."""
    bundle = MessageBundle.load()
    remarks = check_input_steps(inputs)

    for remark in remarks:
        label = remark.type.value.upper()
        text = bundle.get(remark.message_key, inputs=", ".join(inputs))
        typer.echo(f"[{label}] {text}")

    if any(r.type is CheckResultType.ERROR for r in remarks):
        raise typer.Exit(1)


@app.command("test-connection")
def connection_test(
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    url: str | None = typer.Option(
        None,
        "--url",
        "-u",
        help="Endpoint URL to test (overrides --settings).",
    ),
) -> None:
    """Connect to the endpoint and run a probe query."""
    timeout: float | None = None
    if url is None:
        if settings is None:
            typer.echo("Error: provide --settings or --url", err=True)
            raise typer.Exit(1)
        resolved = resolve_settings(_load_settings_or_exit(settings))
        url = resolved.repository_url
        timeout = resolved.timeout_seconds

    result = probe_connection(url, timeout=timeout)
    bundle = MessageBundle.load()
    typer.echo(bundle.get(result.message_key, endpoint=result.endpoint_url, error=result.error))
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def plugins() -> None:
    """List registered source plugins."""
    from sparqlstep.plugins.manager import PluginManager

    manager = PluginManager()
    manager.register_builtin_plugins()

    typer.echo("SOURCES:")
    for spec in manager.get_source_specs():
        typer.echo(f"  {spec.name:<20} v{spec.version}  ({spec.determinism.value})")


if __name__ == "__main__":
    app()
