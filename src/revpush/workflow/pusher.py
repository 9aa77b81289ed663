from __future__ import annotations

import logging

import typer

from revpush.core.models import RevisionRecord, WorkflowContext
from revpush.shell.conduit_client import ConduitClient, ConduitError
from revpush.shell.console import Console
from revpush.shell.repository import RepositoryAPI
from revpush.workflow.errors import UsageError
from revpush.workflow.rollback import RollbackController
from revpush.workflow.suboperations import SubOperations

logger = logging.getLogger(__name__)


class PushExecutor:
    def __init__(
        self,
        repo: RepositoryAPI,
        client: ConduitClient,
        console: Console,
        suboperations: SubOperations,
        rollback: RollbackController,
        callsign: str | None = None,
    ) -> None:
        self.repo = repo
        self.client = client
        self.console = console
        self.suboperations = suboperations
        self.rollback = rollback
        self.callsign = callsign

    def list_pending(self, branch: str, base: str) -> str:
        out = self.repo.pending_commits(branch, base)
        if not out.strip():
            self.rollback.restore()
            raise UsageError(f"No commits to push from {branch}.")
        self.console.echo(f"The following commit(s) will be pushed:\n\n{out}\n")
        return out

    def push(self, ctx: WorkflowContext, revision: RevisionRecord) -> None:
        if not ctx.no_amend:
            if not self.suboperations.amend(revision.id, ctx.message or ""):
                raise UsageError(f"Could not amend HEAD with the commit message from D{revision.id}.")

        self.console.echo("Pushing change...\n")
        if ctx.bridged:
            cmd = "git svn dcommit"
            returncode = self.repo.bridge_commit()
        else:
            cmd = "git push"
            returncode = self.repo.push(ctx.remote, ctx.branch)

        if returncode != 0:
            self.console.banner("PUSH FAILED!", typer.colors.RED)
            self.rollback.restore()
            raise UsageError(f"'{cmd}' failed! Fix the error and run 'revpush push' again.")

        self._notify_remote()

        if not self.suboperations.close_revision(revision.id, finalize=True, quiet=True):
            raise UsageError(
                f"Pushed {ctx.branch}, but closing D{revision.id} failed. Close the revision manually."
            )
        self.console.echo()

    def _notify_remote(self) -> None:
        if not self.callsign:
            return
        try:
            self.client.look_soon([self.callsign])
        except ConduitError as exc:
            # Only a hint to import the new commits sooner.
            logger.debug("diffusion.looksoon failed for %s: %s", self.callsign, exc)
