from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from revpush.core.models import BranchKind
from revpush.shell.console import Console
from revpush.shell.repository import RepositoryAPI


class RollbackController:
    """Put the working copy back on the branch that was checked out at start."""

    def __init__(
        self,
        repo: RepositoryAPI,
        console: Console,
        prior: str,
        target: str,
        kind: BranchKind = BranchKind.BRANCH,
        prior_detached: bool = False,
    ) -> None:
        self.repo = repo
        self.console = console
        self.prior = prior
        self.target = target
        self.kind = kind
        self.prior_detached = prior_detached
        self.restored = False

    @property
    def moved(self) -> bool:
        return self.prior != self.target

    def restore(self) -> None:
        self.repo.checkout(self.prior)
        if self.repo.supports_submodules:
            self.repo.sync_submodules()
        self.restored = True
        label = "commit" if self.prior_detached else self.kind
        self.console.echo(f"Switched back to {label} {self.prior}.")

    def restore_if_moved(self) -> None:
        if self.moved:
            self.restore()

    @contextmanager
    def guard(self, only_if_moved: bool = False) -> Iterator[None]:
        try:
            yield
        except Exception:
            if not self.restored and (self.moved or not only_if_moved):
                self.restore()
            raise
