from __future__ import annotations

import re

from revpush.core.models import LocalCommit

DEFAULT_REMOTE = "origin"
DEFAULT_FROM = "HEAD"

_TRACKING_REF = re.compile(r"^refs/remotes/(.+?)/(.+)$")
_REVISION_FIELD = re.compile(r"^\s*Differential Revision:\s*(?:\S*/)?D(\d+)\s*$", re.MULTILINE)

# Field and record separators for the local commit log format.
_FIELD_SEP = "\x00"
_RECORD_SEP = "\x01"


def checkout_branch_args(name: str) -> list[str]:
    return ["checkout", name]


def current_branch_args() -> list[str]:
    return ["symbolic-ref", "--quiet", "--short", "HEAD"]


def head_commit_args() -> list[str]:
    return ["rev-parse", "HEAD"]


def verify_ref_args(ref: str) -> list[str]:
    return ["rev-parse", "--verify", ref]


def upstream_ref_args(branch: str) -> list[str]:
    return ["rev-parse", "--symbolic-full-name", f"{branch}@{{upstream}}"]


def tracked_changes_args() -> list[str]:
    return ["status", "--porcelain", "--untracked-files=no"]


def pull_args(rebase: bool) -> list[str]:
    args = ["pull", "--ff-only", "--no-stat"]
    if rebase:
        args.append("--rebase")
    return args


def pending_commits_args(branch: str, base: str) -> list[str]:
    return ["log", "--oneline", branch, f"^{base}", "--"]


def local_commits_args(base: str) -> list[str]:
    return ["log", "--format=%H%x00%T%x00%B%x01", f"{base}..HEAD", "--"]


def push_branch_args(remote: str, branch: str) -> list[str]:
    return ["push", remote, branch]


def bridge_commit_args() -> list[str]:
    return ["svn", "dcommit"]


def submodule_update_args() -> list[str]:
    return ["submodule", "update", "--init", "--recursive"]


def amend_message_args(message: str) -> list[str]:
    return ["commit", "--amend", "--message", message]


def show_toplevel_args() -> list[str]:
    return ["rev-parse", "--show-toplevel"]


def parse_tracking_ref(fullname: str) -> tuple[str, str] | None:
    """Split ``refs/remotes/<remote>/<branch>`` into ``(remote, branch)``."""
    match = _TRACKING_REF.match(fullname.strip())
    if match is None:
        return None
    return match.group(1), match.group(2)


def parse_local_commits(raw: str) -> list[LocalCommit]:
    commits: list[LocalCommit] = []
    for record in raw.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        parts = record.split(_FIELD_SEP, 2)
        if len(parts) != 3:
            continue
        commit, tree, message = parts
        commits.append(LocalCommit(commit=commit.strip(), tree=tree.strip(), message=message.strip()))
    return commits


def revision_ids_from_messages(messages: list[str]) -> list[int]:
    seen: list[int] = []
    for message in messages:
        for match in _REVISION_FIELD.finditer(message):
            revision_id = int(match.group(1))
            if revision_id not in seen:
                seen.append(revision_id)
    return seen
