from __future__ import annotations

from pathlib import Path

import typer

from revpush.core.git import show_toplevel_args
from revpush.core.models import ConduitConfig, GlobalConfig, PushSettings, RepoConfig, RepositorySettings
from revpush.shell.config_io import global_config_path, read_global_config, write_global_config, write_repo_config
from revpush.shell.git_runner import GitError, run_git

app = typer.Typer(help="Write revpush config for this machine and repository.")


def _repo_root() -> Path:
    try:
        return Path(run_git(show_toplevel_args()))
    except GitError:
        return Path.cwd()


@app.command("init", help="Interactive setup: Conduit URL and token globally, callsign and push defaults per repo.")
def init_command() -> None:
    global_cfg = read_global_config()

    if global_cfg is None:
        url = typer.prompt("Conduit URL", default="https://phabricator.example.com").strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            typer.echo("Conduit URL must start with http:// or https://", err=True)
            raise typer.Exit(code=2)
        token = typer.prompt("Conduit API token", hide_input=True).strip()
        global_cfg = GlobalConfig(conduit=ConduitConfig(url=url, token=token))
        global_path = write_global_config(global_cfg)
        typer.echo(f"Global config written to {global_path}")
    else:
        typer.echo(f"Using existing global config from {global_config_path()}")

    callsign = typer.prompt("Repository callsign (blank if none)", default="", show_default=False).strip()
    branch_from = typer.prompt("Default branch to push from", default="master").strip()
    update_default = typer.prompt("Update strategy (rebase/merge)", default="rebase").strip().lower()
    if update_default not in ("rebase", "merge"):
        typer.echo("Update strategy must be 'rebase' or 'merge'.", err=True)
        raise typer.Exit(code=2)

    repo_cfg = RepoConfig(
        repository=RepositorySettings(callsign=callsign or None),
        push=PushSettings(branch_from=branch_from or None, update_default=update_default),
    )
    path = write_repo_config(repo_cfg, _repo_root())
    typer.echo(f"Wrote config: {path}")
