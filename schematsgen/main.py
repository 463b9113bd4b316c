"""
schematsgen — CLI entrypoint.

Usage:
    python -m schematsgen.main --help
    python -m schematsgen.main generate models/*.py -o types/mongoose.gen.ts
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from schematsgen import __version__
from schematsgen.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="schematsgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to tsgen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """schematsgen — static type declarations from document-ORM schemas."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("TSGEN_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("TSGEN_LOG_FILE"),
        log_file_level=os.environ.get("TSGEN_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


# ── Register sub-commands from schematsgen/ui/cli/ ─────────────────

from schematsgen.ui.cli.generate import generate  # noqa: E402

cli.add_command(generate)


if __name__ == "__main__":
    cli()
