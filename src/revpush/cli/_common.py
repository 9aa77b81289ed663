from __future__ import annotations

from pathlib import Path

import typer

from revpush.core.models import Config
from revpush.shell.conduit_client import ConduitClient
from revpush.shell.config_io import read_config
from revpush.shell.repository import RepositoryAPI, UnsupportedRepositoryError, open_repository


def open_repository_or_exit() -> RepositoryAPI:
    try:
        return open_repository(Path.cwd())
    except UnsupportedRepositoryError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)


def load_config_or_exit(repo_root: Path) -> Config:
    try:
        return read_config(repo_root)
    except FileNotFoundError:
        typer.echo("Missing .revpush/config.toml. Run `revpush init` first.", err=True)
        raise typer.Exit(code=2)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Failed to read config: {exc}", err=True)
        raise typer.Exit(code=2)


def conduit_client(config: Config) -> ConduitClient:
    return ConduitClient(config.conduit.url, config.conduit.token)
