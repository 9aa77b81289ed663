from __future__ import annotations

import logging

import typer

from revpush.cli.init import app as init_app
from revpush.cli.push import app as push_app

app = typer.Typer(help="revpush: push reviewed branches and close their revisions.")
app.add_typer(init_app)
app.add_typer(push_app)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git commands and Conduit calls to stderr."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def main() -> None:
    app()
