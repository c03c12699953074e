# kubenv/cli.py
"""
Command-Line Interface (CLI)

This module defines the command-line interface for KubEnv.
It uses Typer to create the commands and handles argument parsing,
help text, and command execution. This is the main entry point for users.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from . import __version__
from .errors import KubenvError, StoreIOError
from .logging_config import setup_logging
from .settings import settings
from .store import ConfigStore

logger = logging.getLogger(__name__)

# Create the main Typer application instance
app = typer.Typer(
    name="kubenv",
    help="CLI application for managing kubernetes environments.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich"
)


def _fail(error: KubenvError):
    """Report a store error on stderr and stop with a non-zero exit code."""
    typer.echo(f"❌ Error: {error}", err=True)
    raise typer.Exit(code=1)


def _store(ctx: typer.Context) -> ConfigStore:
    return ctx.obj


@app.callback(invoke_without_command=True)
def cli_entry_callback(
    ctx: typer.Context,
    store_dir: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Directory holding the stored configs"
    ),
    kube_dir: Optional[Path] = typer.Option(
        None, "--kube-dir", "-k", help="Kubernetes directory containing the active config"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
    version: bool = typer.Option(None, "--version", help="Show version and exit"),
):
    if version:
        typer.echo(f"KubEnv v{__version__}")
        raise typer.Exit()

    setup_logging("DEBUG" if verbose else settings.LOG_LEVEL)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    ctx.obj = ConfigStore.from_settings(settings, store_dir=store_dir, kube_dir=kube_dir)


@app.command(name="list", help="List stored configs, marking the active one.")
def list_configs(ctx: typer.Context):
    """
    Print one config name per line. The config currently applied is
    prefixed with '*'. An active config that is not stored shows up under
    its short content hash, marked "(not stored)".
    """
    store = _store(ctx)
    try:
        configs = store.list()
    except KubenvError as e:
        _fail(e)

    try:
        current = store.current()
    except StoreIOError as e:
        # Still list the stored configs when the active one cannot be read
        logger.warning("Cannot determine current config: %s", e)
        current = None

    for kc in configs:
        prefix = "* " if current is not None and kc.hash == current.hash else "  "
        typer.echo(f"{prefix}{kc.name}")

    if current is not None and not current.stored:
        typer.echo(f"* {current.name} (not stored)")


@app.command(name="add", help="Add a config from a file or standard input.")
def add_config(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(
        None, "--name", "-n", help="Name for the config (defaults to its content hash)"
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Kubeconfig file to import (reads stdin if omitted)"
    ),
):
    store = _store(ctx)
    try:
        if file is not None:
            try:
                content = file.read_bytes()
            except OSError as e:
                raise StoreIOError(f"Cannot open file '{file}': {e}") from e
        else:
            content = typer.get_binary_stream("stdin").read()
        config = store.add(name, content)
    except KubenvError as e:
        _fail(e)

    typer.echo(f"✅ Config '{config.name}' imported successfully")


@app.command(name="remove", help="Remove a stored config.")
def remove_config(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the config to remove"),
):
    try:
        _store(ctx).remove(name)
    except KubenvError as e:
        _fail(e)
    typer.echo(f"✅ Config '{name}' removed successfully")


@app.command(name="show", help="Print a stored config to standard output.")
def show_config(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the config to show"),
):
    try:
        content = _store(ctx).show(name)
    except KubenvError as e:
        _fail(e)
    typer.echo(content, nl=False)


@app.command(name="apply", help="Make a stored config the active kubernetes config.")
def apply_config(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the config to apply"),
):
    try:
        _store(ctx).apply(name)
    except KubenvError as e:
        _fail(e)
    typer.echo(f"✅ Config '{name}' applied successfully")


@app.command(name="export", help="Write a stored config to a file or standard output.")
def export_config(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the config to export"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Destination file (writes stdout if omitted)"
    ),
):
    store = _store(ctx)
    try:
        if file is None:
            typer.echo(store.read_config(name), nl=False)
            return
        store.export(name, file)
    except KubenvError as e:
        _fail(e)
    typer.echo(f"✅ Config '{name}' exported successfully")


def main():
    """Entry point for the console script."""
    app()


if __name__ == "__main__":
    main()
