"""The push workflow: update a reviewed branch, resolve its revision, push it.

Every step that runs after the first checkout is wrapped in a rollback guard,
so a failure or a declined prompt leaves the working copy on the branch that
was checked out when the run started.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from revpush.core.conduit import is_bridged_repository
from revpush.core.models import Config, WorkflowContext
from revpush.core.outcome import Aborted, ErrorKind, Failed, Outcome, Success
from revpush.shell.conduit_client import ConduitClient, ConduitError
from revpush.shell.console import Console
from revpush.shell.git_runner import GitError
from revpush.shell.repository import RepositoryAPI
from revpush.workflow.branch import BranchResolver
from revpush.workflow.buildgate import BuildGate
from revpush.workflow.errors import UsageError, UserAbort
from revpush.workflow.pusher import PushExecutor
from revpush.workflow.revision import RevisionResolver
from revpush.workflow.rollback import RollbackController
from revpush.workflow.suboperations import LocalSubOperations, SubOperations
from revpush.workflow.updater import WorkingCopyUpdater
from revpush.workflow.upstream import UpstreamResolver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PushOptions:
    branches: list[str] = field(default_factory=list)
    remote: str | None = None
    from_branch: str | None = None
    update_with_rebase: bool | None = None
    revision: str | None = None
    preview: bool = False
    no_amend: bool = False


class PushWorkflow:
    def __init__(
        self,
        repo: RepositoryAPI,
        client: ConduitClient,
        console: Console,
        config: Config,
        suboperations: SubOperations | None = None,
    ) -> None:
        self.repo = repo
        self.client = client
        self.console = console
        self.config = config
        self.suboperations = suboperations or LocalSubOperations(
            repo, client, console, tracked=bool(config.repository.callsign)
        )

    def run(self, options: PushOptions) -> Outcome[WorkflowContext]:
        try:
            return Success(self._run(options))
        except UserAbort as exc:
            return Aborted(exc.reason)
        except UsageError as exc:
            return Failed(ErrorKind.USAGE, str(exc))
        except GitError as exc:
            return Failed(ErrorKind.COMMAND, str(exc))
        except ConduitError as exc:
            return Failed(ErrorKind.REMOTE, str(exc))

    def prepare(self, options: PushOptions) -> WorkflowContext:
        branches = BranchResolver(self.repo, self.console)
        identity = branches.resolve(options.branches)
        upstream = UpstreamResolver(self.repo).resolve(
            identity.name,
            remote=options.remote,
            from_branch=options.from_branch,
            configured_from=self.config.push.branch_from,
        )
        branches.validate(identity)

        use_rebase = options.update_with_rebase
        if use_rebase is None:
            use_rebase = self.config.push.update_default == "rebase"

        ctx = WorkflowContext(
            branch=identity.name,
            kind=identity.kind,
            prior=identity.prior,
            prior_detached=identity.prior_detached,
            remote=upstream.remote,
            base=upstream.base,
            tracked_branch=upstream.tracked_branch,
            use_rebase=use_rebase,
            preview=options.preview,
            no_amend=options.no_amend,
            revision_id=options.revision,
            bridged=self._bridged(),
        )
        logger.debug("push context: %s", ctx)
        return ctx

    def _run(self, options: PushOptions) -> WorkflowContext:
        ctx = self.prepare(options)
        rollback = RollbackController(
            self.repo,
            self.console,
            prior=ctx.prior,
            target=ctx.branch,
            kind=ctx.kind,
            prior_detached=ctx.prior_detached,
        )
        pusher = PushExecutor(
            self.repo,
            self.client,
            self.console,
            self.suboperations,
            rollback,
            callsign=self.config.repository.callsign,
        )

        with rollback.guard():
            WorkingCopyUpdater(self.repo, self.console, bridged=ctx.bridged).update(
                ctx.branch, ctx.upstream, ctx.use_rebase
            )
            pusher.list_pending(ctx.branch, ctx.base)

        if ctx.preview:
            rollback.restore()
            return ctx

        with rollback.guard(only_if_moved=True):
            revision = RevisionResolver(self.client, self.repo, self.console).resolve(ctx)
            BuildGate(self.client, self.console).check(revision.active_diff_phid)
            pusher.push(ctx, revision)

        # Pushing the branch that was already checked out leaves nothing to undo.
        rollback.restore_if_moved()
        return ctx

    def _bridged(self) -> bool:
        callsign = self.config.repository.callsign
        if not callsign:
            return False
        return is_bridged_repository(self.client.query_repositories([callsign]))
