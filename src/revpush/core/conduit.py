from __future__ import annotations

import re
from typing import Any

from revpush.core.models import Build, BuildableStatus, LocalCommit, RevisionRecord

DEPENDS_ON_KEY = "phabricator:depends-on"
STATUS_OPEN = "status-open"

_REVISION_ID = re.compile(r"^[Dd]?(\d+)$")


class RevisionIdError(ValueError):
    pass


def normalize_revision_id(raw: str | int) -> int:
    match = _REVISION_ID.match(str(raw).strip())
    if match is None:
        raise RevisionIdError(f"Invalid revision ID '{raw}'. Pass a number like 123 or D123.")
    return int(match.group(1))


def parse_revision(raw: dict) -> RevisionRecord:
    auxiliary = raw.get("auxiliary") or {}
    # PHP serializes an empty map as a list.
    depends_on = auxiliary.get(DEPENDS_ON_KEY) if isinstance(auxiliary, dict) else None
    return RevisionRecord(
        id=int(raw["id"]),
        phid=str(raw.get("phid", "")),
        title=str(raw.get("title", "")),
        status=_parse_status(raw.get("status")),
        status_name=str(raw.get("statusName", "")),
        author_phid=str(raw.get("authorPHID", "")),
        branch=_optional_str(raw.get("branch")),
        active_diff_phid=_optional_str(raw.get("activeDiffPHID")),
        depends_on=tuple(str(phid) for phid in depends_on or ()),
        uri=str(raw.get("uri", "")),
    )


def parse_revisions(raw_revisions: Any) -> list[RevisionRecord]:
    if isinstance(raw_revisions, dict):
        raw_revisions = list(raw_revisions.values())
    return [parse_revision(item) for item in raw_revisions or []]


def parse_buildable(raw: dict) -> BuildableStatus:
    return BuildableStatus(
        phid=str(raw.get("phid", "")),
        status=str(raw.get("buildableStatus", "")),
        uri=str(raw.get("uri", "")),
    )


def parse_builds(raw_builds: list[dict]) -> tuple[Build, ...]:
    return tuple(
        Build(
            id=int(item["id"]),
            name=str(item.get("name", "")),
            status=str(item.get("buildStatus", "")),
            status_name=str(item.get("buildStatusName") or item.get("buildStatus", "")),
        )
        for item in raw_builds
    )


def commit_hash_query(commits: list[LocalCommit]) -> list[list[str]]:
    hashes: list[list[str]] = []
    for commit in commits:
        hashes.append(["gtcm", commit.commit])
        hashes.append(["gttr", commit.tree])
    return hashes


def filter_by_branch(revisions: list[RevisionRecord], branch: str) -> list[RevisionRecord]:
    """Keep revisions created from ``branch`` when more than one candidate exists.

    A lone candidate is returned as-is, even when its branch field is empty
    or names another branch.
    """
    if len(revisions) <= 1:
        return list(revisions)
    return [revision for revision in revisions if revision.branch == branch]


def render_revision_list(revisions: list[RevisionRecord]) -> str:
    return "\n".join(f"        - {revision.label}" for revision in revisions)


def is_bridged_repository(raw_repositories: list[dict]) -> bool:
    if not raw_repositories:
        return False
    return str(raw_repositories[0].get("vcs", "")) == "svn"


def user_names_by_phid(raw_users: list[dict]) -> dict[str, str]:
    return {str(user.get("phid", "")): str(user.get("userName", "")) for user in raw_users}


def _parse_status(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return -1


def _optional_str(raw: Any) -> str | None:
    if raw is None:
        return None
    value = str(raw).strip()
    return value or None
