from __future__ import annotations

from typing import Protocol

from revpush.core.conduit import parse_revisions
from revpush.shell.conduit_client import ConduitClient, ConduitError
from revpush.shell.console import Console
from revpush.shell.git_runner import GitError
from revpush.shell.repository import RepositoryAPI


class SubOperations(Protocol):
    def amend(self, revision_id: int, message: str) -> bool: ...

    def close_revision(self, revision_id: int, *, finalize: bool = False, quiet: bool = False) -> bool: ...


class LocalSubOperations:
    """Amend HEAD with the revision's commit message and close revisions over Conduit."""

    def __init__(self, repo: RepositoryAPI, client: ConduitClient, console: Console, tracked: bool = False) -> None:
        self.repo = repo
        self.client = client
        self.console = console
        self.tracked = tracked

    def amend(self, revision_id: int, message: str) -> bool:
        if not message.strip():
            self.console.echo(f"Revision D{revision_id} has no commit message to amend with.", err=True)
            return False
        try:
            self.repo.amend_message(message)
        except GitError as exc:
            self.console.echo(f"Failed to amend HEAD: {exc}", err=True)
            return False
        self.console.echo(f"Amended HEAD with the commit message from D{revision_id}.")
        return True

    def close_revision(self, revision_id: int, *, finalize: bool = False, quiet: bool = False) -> bool:
        try:
            revisions = parse_revisions(self.client.query_revisions(ids=[revision_id]))
        except ConduitError as exc:
            self.console.echo(f"Failed to load D{revision_id}: {exc}", err=True)
            return False
        if not revisions:
            self.console.echo(f"Revision D{revision_id} does not exist.", err=True)
            return False

        revision = revisions[0]
        if revision.closed:
            if not quiet:
                self.console.echo(f"Revision D{revision_id} is already closed.")
            return True
        if finalize and not revision.accepted:
            if not quiet:
                self.console.echo(f"Revision D{revision_id} is not accepted; leaving it open.")
            return True
        if finalize and self.tracked:
            # Tracked repositories: the importer closes the revision.
            if not quiet:
                self.console.echo(f"Revision D{revision_id} will be closed when the repository imports the commit.")
            return True

        try:
            self.client.close_revision(revision_id)
        except ConduitError as exc:
            self.console.echo(f"Failed to close D{revision_id}: {exc}", err=True)
            return False
        if not quiet:
            self.console.echo(f"Closed revision D{revision_id}.")
        return True
