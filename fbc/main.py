import typer
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
import yaml

from fbc.config.loader import load_config
from fbc.config.models import AppConfig
from fbc.domain.models import CompressionLevel
from fbc.infrastructure.logging import setup_logging
from fbc.infrastructure.event_bus import EventBus
from fbc.pipeline.orchestrator import Orchestrator
from fbc.ui.state import RunState
from fbc.ui.reporter import ConsoleReporter

app = typer.Typer(help="FBC (File Batch Compression) - compress many files with br, gz, zlib or deflate")


def build_config(config_path: Optional[Path], overrides: Dict[str, Any]) -> AppConfig:
    """Loads the optional YAML config and applies CLI values on top of it."""
    base = load_config(config_path) if config_path is not None else AppConfig()
    data = base.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    return AppConfig.model_validate(data)


@app.command()
def compress(
    input_files: Optional[List[Path]] = typer.Option(None, "--input-file", "-f", help="Input file (repeatable)"),
    input_dirs: Optional[List[Path]] = typer.Option(None, "--input-dir", "-d", help="Input directory (repeatable)"),
    output_files: Optional[List[Path]] = typer.Option(None, "--output-file", help="Output file, one per input (repeatable)"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Flat output directory"),
    patterns: Optional[List[str]] = typer.Option(None, "--pattern", "-p", help="File name pattern for directory search (repeatable, default '*')"),
    format: Optional[str] = typer.Option(None, "--format", help="Compression format (br, gz, zlib, def/deflate)"),
    level: Optional[CompressionLevel] = typer.Option(None, "--level", "-l", case_sensitive=False, help="Compression level"),
    threads: Optional[int] = typer.Option(None, "--threads", "-t", help="Number of parallel jobs"),
    recursive: Optional[bool] = typer.Option(None, "--recursive/--no-recursive", help="Descend into subdirectories"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print nothing"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Path to log file"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging and a summary table"),
    fail_on_error: bool = typer.Option(False, "--fail-on-error", help="Exit with status 1 if planning or any job fails"),
):
    """Compress every input file into its own output file."""
    overrides = {
        "input_files": input_files or None,
        "input_dirs": input_dirs or None,
        "output_files": output_files or None,
        "output_dir": output_dir,
        "patterns": patterns or None,
        "format": format,
        "level": level,
        "threads": threads,
        "recursive": recursive,
        "quiet": quiet or None,
        "log_path": log_path,
        "debug": debug or None,
        "fail_on_error": fail_on_error or None,
    }

    try:
        try:
            config = build_config(config_path, overrides)
        except (FileNotFoundError, yaml.YAMLError, ValidationError) as exc:
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

        logger = setup_logging(config.log_path, debug=config.debug, quiet=config.quiet)
        logger.info(
            f"FBC started: input_files={len(config.input_files or [])}, input_dirs={config.input_dirs}, "
            f"patterns={config.patterns}, recursive={config.recursive}"
        )
        logger.info(f"Config: format={config.format}, level={config.level.value}, threads={config.threads}, debug={config.debug}")

        bus = EventBus()
        reporter = None
        if not config.quiet:
            reporter = ConsoleReporter(bus, RunState())

        orchestrator = Orchestrator(config=config, event_bus=bus)
        summary = orchestrator.run()

        if reporter is not None and config.debug:
            reporter.print_summary()

        logger.info(
            f"FBC finished: planned={summary.jobs_planned}, succeeded={summary.succeeded}, failed={summary.failed}"
        )
        code = summary.exit_code(config.fail_on_error)
        if code:
            raise typer.Exit(code=code)

    except KeyboardInterrupt:
        typer.secho("\nCompression stopped by user (Ctrl+C)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=130)

    except typer.Exit:
        raise

    except Exception as e:
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
