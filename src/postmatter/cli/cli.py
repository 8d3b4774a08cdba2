"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from postmatter.cli.commands import (
    load_settings,
    build_cmd, check_cmd, index_cmd, init_cmd, list_cmd, published_cmd,
)


app = typer.Typer(name="postmatter", no_args_is_help=True, help="Blog content checker, indexer and exporter")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else load_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


app.command(name="check")(check_cmd)
app.command(name="list")(list_cmd)
app.command(name="build")(build_cmd)
app.command(name="index")(index_cmd)
app.command(name="published")(published_cmd)
app.command(name="init")(init_cmd)
