from __future__ import annotations

import logging

from revpush.core.conduit import (
    STATUS_OPEN,
    RevisionIdError,
    commit_hash_query,
    filter_by_branch,
    normalize_revision_id,
    parse_revisions,
    render_revision_list,
    user_names_by_phid,
)
from revpush.core.git import revision_ids_from_messages
from revpush.core.models import RevisionRecord, WorkflowContext
from revpush.shell.conduit_client import ConduitClient
from revpush.shell.console import Console
from revpush.shell.repository import RepositoryAPI
from revpush.workflow.errors import UsageError, UserAbort

logger = logging.getLogger(__name__)


class RevisionResolver:
    def __init__(self, client: ConduitClient, repo: RepositoryAPI, console: Console) -> None:
        self.client = client
        self.repo = repo
        self.console = console

    def resolve(self, ctx: WorkflowContext) -> RevisionRecord:
        revisions = filter_by_branch(self._candidates(ctx), ctx.branch)

        if not revisions:
            raise UsageError(
                f"Can not identify which revision exists on {ctx.kind} '{ctx.branch}'. "
                f"Update the revision with recent changes to synchronize the {ctx.kind} name and hashes, "
                "amend the commit message at HEAD, or use '--revision <id>' to select a revision explicitly."
            )
        if len(revisions) > 1:
            raise UsageError(
                f"There are multiple revisions on feature {ctx.kind} '{ctx.branch}' which are not pushed\n\n"
                f"{render_revision_list(revisions)}\n\n"
                f"Separate these revisions onto different {ctx.kind}s, or use '--revision <id>' "
                "to use the commit message from <id> and push them all."
            )

        revision = revisions[0]
        self._confirm_author(ctx, revision)
        self._confirm_accepted(revision)
        self._confirm_dependencies(revision)

        ctx.revision = revision
        ctx.message = self.client.get_commit_message(revision.id)
        self.console.echo(f"Pushing revision '{revision.label}'...")
        return revision

    def _candidates(self, ctx: WorkflowContext) -> list[RevisionRecord]:
        if ctx.revision_id:
            try:
                revision_id = normalize_revision_id(ctx.revision_id)
            except RevisionIdError as exc:
                raise UsageError(str(exc)) from exc
            revisions = parse_revisions(self.client.query_revisions(ids=[revision_id]))
            if not revisions:
                raise UsageError(f"No such revision 'D{revision_id}'!")
            return revisions
        return self._working_copy_candidates(ctx)

    def _working_copy_candidates(self, ctx: WorkflowContext) -> list[RevisionRecord]:
        commits = self.repo.local_commits(ctx.base)

        revision_ids = revision_ids_from_messages([commit.message for commit in commits])
        if revision_ids:
            logger.debug("looking up revisions named in commit messages: %s", revision_ids)
            return parse_revisions(self.client.query_revisions(ids=revision_ids))

        if commits:
            revisions = parse_revisions(self.client.query_revisions(commitHashes=commit_hash_query(commits)))
            if revisions:
                return revisions

        logger.debug("no revision matched local hashes; falling back to branch %s", ctx.branch)
        return parse_revisions(self.client.query_revisions(branches=[ctx.branch]))

    def _confirm_author(self, ctx: WorkflowContext, revision: RevisionRecord) -> None:
        me = self.client.whoami()
        if revision.author_phid == me.get("phid"):
            return
        names = user_names_by_phid(self.client.query_users([revision.author_phid]))
        author = names.get(revision.author_phid) or revision.author_phid
        ok = self.console.confirm(
            f"This {ctx.kind} has revision '{revision.label}' but you are not the author. "
            f"Push this revision by {author}?"
        )
        if not ok:
            raise UserAbort("not the author")

    def _confirm_accepted(self, revision: RevisionRecord) -> None:
        if revision.accepted:
            return
        if not self.console.confirm(f"Revision '{revision.label}' has not been accepted. Continue anyway?"):
            raise UserAbort("revision not accepted")

    def _confirm_dependencies(self, revision: RevisionRecord) -> None:
        if not revision.depends_on:
            return
        open_revisions = parse_revisions(
            self.client.query_revisions(phids=list(revision.depends_on), status=STATUS_OPEN)
        )
        if not open_revisions:
            return

        listing = "\n".join(f"    - {dependency.label}" for dependency in open_revisions)
        self.console.echo(f"Revision '{revision.label}' depends on open revisions:\n\n{listing}\n")
        if not self.console.confirm("Continue anyway?"):
            raise UserAbort("open dependencies")
