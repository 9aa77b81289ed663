from __future__ import annotations

from collections.abc import Sequence

from revpush.core.models import BranchIdentity, BranchKind
from revpush.shell.console import Console
from revpush.shell.repository import RepositoryAPI
from revpush.workflow.errors import UsageError


class BranchResolver:
    def __init__(self, repo: RepositoryAPI, console: Console) -> None:
        self.repo = repo
        self.console = console

    def resolve(self, branches: Sequence[str] | None = None) -> BranchIdentity:
        names = [name.strip() for name in branches or () if name and name.strip()]
        kind: BranchKind | None = None
        if not names:
            current = self.repo.branch_name()
            if current:
                kind = self.kind_of(current)
                self.console.echo(f"Pushing current {kind} '{current}'.")
                names = [current]

        if len(names) != 1:
            raise UsageError("Specify exactly one branch to push changes from.")

        name = names[0]
        current = self.repo.branch_name()
        return BranchIdentity(
            name=name,
            kind=kind or self.kind_of(name),
            prior=current or self.repo.head_commit(),
            prior_detached=current is None,
        )

    def kind_of(self, name: str) -> BranchKind:
        if self.repo.supports_bookmarks and self.repo.is_bookmark(name):
            return BranchKind.BOOKMARK
        return BranchKind.BRANCH

    def validate(self, identity: BranchIdentity) -> None:
        if not self.repo.branch_exists(identity.name):
            raise UsageError(f"Branch '{identity.name}' does not exist.")
        if self.repo.has_uncommitted_changes():
            raise UsageError("Working copy has uncommitted changes. Commit or stash them before pushing.")
