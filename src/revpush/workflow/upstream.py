from __future__ import annotations

from revpush.core.git import DEFAULT_FROM, DEFAULT_REMOTE, parse_tracking_ref
from revpush.core.models import UpstreamTarget
from revpush.shell.repository import RepositoryAPI


class UpstreamResolver:
    """Pick the remote and base reference a branch is compared and pulled against.

    A branch with a tracking reference never needs ``--from``: its base is the
    tracked branch on the chosen remote.
    """

    def __init__(self, repo: RepositoryAPI) -> None:
        self.repo = repo

    def resolve(
        self,
        branch: str,
        remote: str | None = None,
        from_branch: str | None = None,
        configured_from: str | None = None,
    ) -> UpstreamTarget:
        tracked_remote: str | None = None
        tracked_branch: str | None = None
        fullname = self.repo.upstream_ref(branch)
        if fullname:
            parsed = parse_tracking_ref(fullname)
            if parsed is not None:
                tracked_remote, tracked_branch = parsed

        resolved_remote = remote or tracked_remote or DEFAULT_REMOTE
        if tracked_branch:
            base = f"{resolved_remote}/{tracked_branch}"
        else:
            base = f"{resolved_remote}/{from_branch or configured_from or DEFAULT_FROM}"
        return UpstreamTarget(remote=resolved_remote, base=base, tracked_branch=tracked_branch)
