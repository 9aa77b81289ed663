"""Version-control backends the push workflow runs against.

Only git is supported. The workflow talks to :class:`RepositoryAPI` so that a
second backend only has to fill in the same capability set.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from revpush.core.git import (
    amend_message_args,
    bridge_commit_args,
    checkout_branch_args,
    current_branch_args,
    head_commit_args,
    local_commits_args,
    parse_local_commits,
    pending_commits_args,
    pull_args,
    push_branch_args,
    show_toplevel_args,
    submodule_update_args,
    tracked_changes_args,
    upstream_ref_args,
    verify_ref_args,
)
from revpush.core.models import LocalCommit
from revpush.shell.git_runner import GitError, run_git, run_git_manual, run_git_passthru


class UnsupportedRepositoryError(RuntimeError):
    pass


class RepositoryAPI(ABC):
    supports_bookmarks: bool = False
    supports_submodules: bool = False

    def __init__(self, root: Path) -> None:
        self.root = root

    @abstractmethod
    def branch_name(self) -> str | None:
        """Current branch, or None when HEAD is detached."""

    @abstractmethod
    def head_commit(self) -> str: ...

    def is_bookmark(self, name: str) -> bool:
        return False

    @abstractmethod
    def branch_exists(self, name: str) -> bool: ...

    @abstractmethod
    def has_uncommitted_changes(self) -> bool: ...

    @abstractmethod
    def upstream_ref(self, branch: str) -> str | None:
        """Full name of the ref ``branch`` tracks, e.g. ``refs/remotes/origin/main``."""

    @abstractmethod
    def checkout(self, name: str) -> None: ...

    @abstractmethod
    def sync_submodules(self) -> None: ...

    @abstractmethod
    def pull(self, rebase: bool) -> None: ...

    @abstractmethod
    def pending_commits(self, branch: str, base: str) -> str: ...

    @abstractmethod
    def local_commits(self, base: str) -> list[LocalCommit]: ...

    @abstractmethod
    def push(self, remote: str, branch: str) -> int: ...

    @abstractmethod
    def bridge_commit(self) -> int: ...

    @abstractmethod
    def amend_message(self, message: str) -> None: ...


class GitRepository(RepositoryAPI):
    supports_submodules = True

    def branch_name(self) -> str | None:
        result = run_git_manual(current_branch_args(), cwd=self.root)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def head_commit(self) -> str:
        return run_git(head_commit_args(), cwd=self.root)

    def branch_exists(self, name: str) -> bool:
        return run_git_manual(verify_ref_args(name), cwd=self.root).returncode == 0

    def has_uncommitted_changes(self) -> bool:
        return bool(run_git(tracked_changes_args(), cwd=self.root))

    def upstream_ref(self, branch: str) -> str | None:
        result = run_git_manual(upstream_ref_args(branch), cwd=self.root)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def checkout(self, name: str) -> None:
        run_git(checkout_branch_args(name), cwd=self.root)

    def sync_submodules(self) -> None:
        run_git(submodule_update_args(), cwd=self.root)

    def pull(self, rebase: bool) -> None:
        run_git(pull_args(rebase), cwd=self.root)

    def pending_commits(self, branch: str, base: str) -> str:
        return run_git(pending_commits_args(branch, base), cwd=self.root)

    def local_commits(self, base: str) -> list[LocalCommit]:
        return parse_local_commits(run_git(local_commits_args(base), cwd=self.root))

    def push(self, remote: str, branch: str) -> int:
        return run_git_passthru(push_branch_args(remote, branch), cwd=self.root)

    def bridge_commit(self) -> int:
        return run_git_passthru(bridge_commit_args(), cwd=self.root)

    def amend_message(self, message: str) -> None:
        run_git(amend_message_args(message), cwd=self.root)


def open_repository(path: Path) -> RepositoryAPI:
    try:
        root = run_git(show_toplevel_args(), cwd=path)
    except GitError as exc:
        for candidate in (path, *path.parents):
            if (candidate / ".hg").exists():
                raise UnsupportedRepositoryError("'revpush push' only supports git working copies.") from exc
        raise UnsupportedRepositoryError(f"{path} is not inside a git working copy.") from exc
    return GitRepository(Path(root))
