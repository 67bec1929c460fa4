"""Main CLI application entry point."""

import asyncio
import logging
import shlex
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from ..batch import BatchRunner
from ..config import load_config
from ..errors import DirectoryNotFoundError
from ..models import BuildOverlapPolicy
from ..sanitizer import SourceSanitizer
from ..watch import WatchOrchestrator
from .output import BatchReport

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for CLI runs."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, force=True)

    # watchdog is chatty at debug level
    if not verbose:
        logging.getLogger("watchdog").setLevel(logging.WARNING)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
@click.option("--config", "config_path", type=click.Path(), help="Config file path")
@click.pass_context
def main(ctx: click.Context, verbose: bool, quiet: bool, config_path: Optional[str]) -> None:
    """
    Buildsweep - build pipeline tooling.

    Strip debug logging and comments from emitted sources:
        buildsweep clean dist-src

    Rebuild whenever sources change:
        buildsweep watch
    """
    load_dotenv(Path.cwd() / ".env")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


@main.command()
@click.argument("target_dir", required=False, default=".")
@click.option("--dry-run", is_flag=True, help="Report what would change without writing")
@click.option(
    "--exclude", "excludes",
    multiple=True,
    help="Extra file name to never rewrite (repeatable)",
)
@click.pass_context
def clean(ctx: click.Context, target_dir: str, dry_run: bool, excludes: Tuple[str, ...]) -> None:
    """Remove diagnostic calls and comments from sources under TARGET_DIR."""
    config = ctx.obj["config"]
    batch_config = config.batch
    if excludes:
        batch_config = batch_config.model_copy(
            update={"excluded_files": batch_config.excluded_files + list(excludes)}
        )

    runner = BatchRunner(
        config=batch_config,
        sanitizer=SourceSanitizer(config.sanitizer),
        dry_run=dry_run,
    )
    try:
        stats = runner.run(target_dir)
    except DirectoryNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    BatchReport(Console()).render(stats, runner.outcomes, dry_run=dry_run)


@main.command()
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Project root to watch",
)
@click.option(
    "--policy",
    type=click.Choice([p.value for p in BuildOverlapPolicy]),
    help="Handling of changes while a build is running",
)
@click.option("--build-command", help="Override the build command (shell-style string)")
@click.pass_context
def watch(
    ctx: click.Context,
    root: str,
    policy: Optional[str],
    build_command: Optional[str],
) -> None:
    """Run the build once, then again on every source change."""
    watch_config = ctx.obj["config"].watch
    updates = {}
    if policy:
        updates["overlap_policy"] = BuildOverlapPolicy(policy)
    if build_command:
        updates["build_command"] = shlex.split(build_command)
    if updates:
        watch_config = watch_config.model_copy(update=updates)

    orchestrator = WatchOrchestrator(watch_config, root=root)
    try:
        asyncio.run(orchestrator.run())
    except KeyboardInterrupt:
        logger.debug("Interrupted outside the event loop")
        orchestrator.close()
    sys.exit(0)
