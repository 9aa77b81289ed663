from __future__ import annotations

import typer

from revpush.cli._common import conduit_client, load_config_or_exit, open_repository_or_exit
from revpush.core.outcome import Aborted, ErrorKind, Failed
from revpush.shell.console import Console
from revpush.workflow.push import PushOptions, PushWorkflow

app = typer.Typer(help="Push an accepted change to the remote.")


@app.command(
    "push",
    help=(
        "Push an accepted change sitting in a local feature branch to the remote, "
        "then close its revision. Defaults to the current branch."
    ),
)
def push_command(
    branches: list[str] | None = typer.Argument(
        None,
        help="Branch to push. Omit this to push the current branch.",
        show_default=False,
    ),
    amend: bool = typer.Option(
        True,
        "--amend/--no-amend",
        help="Amend HEAD with the revision's commit message before pushing (default: on).",
    ),
    remote: str | None = typer.Option(
        None,
        "--remote",
        help="Push to this remote instead of the branch's upstream remote or 'origin'.",
    ),
    from_branch: str | None = typer.Option(
        None,
        "--from",
        help="Branch the feature branch was created from, for branches without an upstream. push.branch_from is the default.",
    ),
    update_with_rebase: bool = typer.Option(
        False,
        "--update-with-rebase",
        help="Update the feature branch with rebase. Set push.update_default to 'rebase' to make this the default.",
    ),
    update_with_merge: bool = typer.Option(
        False,
        "--update-with-merge",
        help="Update the feature branch with merge instead of rebase.",
    ),
    revision: str | None = typer.Option(
        None,
        "--revision",
        help="Use this revision (e.g. D123) instead of inferring it from the branch content.",
    ),
    preview: bool = typer.Option(
        False,
        "--preview",
        help="Print the commits that would be pushed without amending or pushing them.",
    ),
) -> None:
    if update_with_rebase and update_with_merge:
        typer.echo("Pass either --update-with-rebase or --update-with-merge, not both.", err=True)
        raise typer.Exit(code=2)

    repo = open_repository_or_exit()
    config = load_config_or_exit(repo.root)

    strategy: bool | None = None
    if update_with_rebase:
        strategy = True
    elif update_with_merge:
        strategy = False

    options = PushOptions(
        branches=list(branches or []),
        remote=remote,
        from_branch=from_branch,
        update_with_rebase=strategy,
        revision=revision,
        preview=preview,
        no_amend=not amend,
    )
    outcome = PushWorkflow(repo, conduit_client(config), Console(), config).run(options)

    if isinstance(outcome, Aborted):
        raise typer.Exit(code=1)
    if isinstance(outcome, Failed):
        typer.echo(outcome.message, err=True)
        raise typer.Exit(code=1 if outcome.kind == ErrorKind.USAGE else 2)
    if not preview:
        typer.echo("Done.")
