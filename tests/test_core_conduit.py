from __future__ import annotations

import pytest

from revpush.core.conduit import (
    RevisionIdError,
    commit_hash_query,
    filter_by_branch,
    is_bridged_repository,
    normalize_revision_id,
    parse_buildable,
    parse_builds,
    parse_revision,
    parse_revisions,
    render_revision_list,
)
from revpush.core.models import LocalCommit


def test_normalize_revision_id() -> None:
    assert normalize_revision_id("123") == 123
    assert normalize_revision_id("D123") == 123
    assert normalize_revision_id(" d7 ") == 7
    assert normalize_revision_id(42) == 42
    with pytest.raises(RevisionIdError, match="Invalid revision ID"):
        normalize_revision_id("DX1")


def test_parse_revision(make_revision) -> None:
    revision = parse_revision(
        make_revision(100, auxiliary={"phabricator:depends-on": ["PHID-DREV-99"]}, branch="")
    )

    assert revision.id == 100
    assert revision.label == "D100: Revision 100"
    assert revision.accepted
    assert revision.branch is None
    assert revision.active_diff_phid == "PHID-DIFF-100"
    assert revision.depends_on == ("PHID-DREV-99",)


def test_parse_revision_tolerates_php_empty_auxiliary(make_revision) -> None:
    revision = parse_revision(make_revision(5, auxiliary=[], status="bogus", activeDiffPHID=None))

    assert revision.depends_on == ()
    assert revision.status == -1
    assert not revision.accepted
    assert revision.active_diff_phid is None


def test_parse_revisions_accepts_keyed_results(make_revision) -> None:
    revisions = parse_revisions({"PHID-DREV-1": make_revision(1), "PHID-DREV-2": make_revision(2)})
    assert [revision.id for revision in revisions] == [1, 2]
    assert parse_revisions(None) == []


def test_filter_by_branch_only_applies_to_several_candidates(make_revision) -> None:
    lone = parse_revisions([make_revision(1, branch="other")])
    assert filter_by_branch(lone, "feature/x") == lone

    several = parse_revisions(
        [
            make_revision(1, branch="other"),
            make_revision(2, branch="feature/x"),
            make_revision(3, branch=None),
        ]
    )
    assert [revision.id for revision in filter_by_branch(several, "feature/x")] == [2]


def test_filter_by_branch_drops_candidates_without_branch_field(make_revision) -> None:
    unset = parse_revisions([make_revision(1, branch=None), make_revision(2, branch=None)])
    assert filter_by_branch(unset, "feature/x") == []


def test_render_revision_list(make_revision) -> None:
    rendered = render_revision_list(parse_revisions([make_revision(1), make_revision(2)]))
    assert rendered == "        - D1: Revision 1\n        - D2: Revision 2"


def test_commit_hash_query() -> None:
    commits = [LocalCommit(commit="c1", tree="t1", message="m")]
    assert commit_hash_query(commits) == [["gtcm", "c1"], ["gttr", "t1"]]


def test_parse_buildable_and_builds() -> None:
    buildable = parse_buildable({"phid": "PHID-HMBB-1", "buildableStatus": "failed", "uri": "https://phab.local/B1"})
    builds = parse_builds(
        [
            {"id": 7, "name": "unit", "buildStatus": "failed", "buildStatusName": "Failed"},
            {"id": 8, "name": "lint", "buildStatus": "building"},
        ]
    )

    assert buildable.status == "failed"
    assert builds[0].failed
    assert not builds[1].failed
    assert builds[1].status_name == "building"


def test_is_bridged_repository() -> None:
    assert is_bridged_repository([{"vcs": "svn"}])
    assert not is_bridged_repository([{"vcs": "git"}])
    assert not is_bridged_repository([])
