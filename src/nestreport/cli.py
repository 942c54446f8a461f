
from typing import Optional
import typer
from pydantic import ValidationError
from .config import load_config, ReporterConfig
from .events import EventSource
from .logging import setup_logging
from .reporters.console import ConsoleReporter
from .runners.replay import Replayer, load_event_log
from .utils.timefmt import humanize_ms

app = typer.Typer(add_completion=False, help="nestreport - nested console reporter for streamed test results")

@app.command()
def replay(
    events: str = typer.Argument(..., help="Recorded event log (YAML or JSON)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to reporter config YAML"),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Show captured output of passing tests (default: DEBUG env var)"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Force colors on or off"),
    locations: bool = typer.Option(False, "--locations", help="First captured line of each unit is its registration site"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for nestreport's own diagnostics"),
):
    log = setup_logging(log_level.upper())
    try:
        cfg: ReporterConfig = load_config(config, verbose=debug, color=color, locations=locations or None)
    except ValidationError as e:
        raise typer.BadParameter(str(e), param_hint="--config")
    try:
        records = load_event_log(events)
    except ValidationError as e:
        raise typer.BadParameter(str(e), param_hint="EVENTS")
    log.debug("loaded %d records from %s", len(records), events)

    source = EventSource()
    reporter = source.subscribe(ConsoleReporter(cfg))
    try:
        replayer = Replayer(source, cfg.slow_ms)
        stats = replayer.run(records)
    finally:
        # a log without an end record leaves interception running
        reporter.sink.close()
    # the end record may carry counters of its own
    failures = replayer.end.failures if replayer.end else stats.failures
    raise typer.Exit(code=0 if failures == 0 else 1)

@app.command()
def humanize(ms: int = typer.Argument(..., min=0, help="Duration in milliseconds")):
    typer.echo(humanize_ms(ms).rstrip())
