from __future__ import annotations

import logging

from revpush.core.models import UpstreamTarget
from revpush.shell.console import Console
from revpush.shell.git_runner import GitError
from revpush.shell.repository import RepositoryAPI

logger = logging.getLogger(__name__)


class WorkingCopyUpdater:
    def __init__(self, repo: RepositoryAPI, console: Console, bridged: bool = False) -> None:
        self.repo = repo
        self.console = console
        self.bridged = bridged

    def update(self, branch: str, upstream: UpstreamTarget, use_rebase: bool) -> None:
        self.repo.checkout(branch)
        self.console.echo(f"Switched to branch {branch}. Updating branch...")

        if not upstream.has_upstream:
            logger.debug("%s has no upstream; comparing against %s without pulling", branch, upstream.base)
            return

        try:
            self.repo.pull(rebase=use_rebase)
        except GitError as exc:
            if not self.bridged:
                raise
            # The svn bridge reconciles divergence itself on dcommit.
            logger.info("ignoring pull failure on bridged repository: %s", exc)
