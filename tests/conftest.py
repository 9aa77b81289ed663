from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
import pytest

from revpush.core.models import Config, ConduitConfig, LocalCommit, PushSettings, RepositorySettings
from revpush.shell.conduit_client import ConduitClient
from revpush.shell.git_runner import GitError
from revpush.shell.repository import RepositoryAPI


class FakeRepository(RepositoryAPI):
    supports_submodules = True

    def __init__(self, current: str | None = "feature/x") -> None:
        super().__init__(Path("/work/repo"))
        self.current = current
        self.head = "0123abcd"
        self.branches: set[str] = {"master", "feature/x"}
        self.upstreams: dict[str, str] = {"feature/x": "refs/remotes/origin/master"}
        self.dirty = False
        self.pending: dict[tuple[str, str], str] = {("feature/x", "origin/master"): "abc1234 Add widget"}
        self.commits: list[LocalCommit] = [LocalCommit(commit="c1", tree="t1", message="Add widget")]
        self.pull_error: Exception | None = None
        self.push_returncode = 0
        self.bridge_returncode = 0
        self.calls: list[tuple] = []

    def branch_name(self) -> str | None:
        return self.current

    def head_commit(self) -> str:
        return self.head

    def branch_exists(self, name: str) -> bool:
        return name in self.branches

    def has_uncommitted_changes(self) -> bool:
        return self.dirty

    def upstream_ref(self, branch: str) -> str | None:
        return self.upstreams.get(branch)

    def checkout(self, name: str) -> None:
        self.calls.append(("checkout", name))
        self.current = name

    def sync_submodules(self) -> None:
        self.calls.append(("submodules",))

    def pull(self, rebase: bool) -> None:
        self.calls.append(("pull", rebase))
        if self.pull_error is not None:
            raise self.pull_error

    def pending_commits(self, branch: str, base: str) -> str:
        self.calls.append(("pending", branch, base))
        return self.pending.get((branch, base), "")

    def local_commits(self, base: str) -> list[LocalCommit]:
        self.calls.append(("local_commits", base))
        return list(self.commits)

    def push(self, remote: str, branch: str) -> int:
        self.calls.append(("push", remote, branch))
        return self.push_returncode

    def bridge_commit(self) -> int:
        self.calls.append(("dcommit",))
        return self.bridge_returncode

    def amend_message(self, message: str) -> None:
        self.calls.append(("amend", message))

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]


def revision_payload(revision_id: int = 100, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": str(revision_id),
        "phid": f"PHID-DREV-{revision_id}",
        "title": f"Revision {revision_id}",
        "status": "2",
        "statusName": "Accepted",
        "authorPHID": "PHID-USER-me",
        "branch": "feature/x",
        "activeDiffPHID": f"PHID-DIFF-{revision_id}",
        "auxiliary": {"phabricator:depends-on": []},
        "uri": f"https://phab.local/D{revision_id}",
    }
    payload.update(overrides)
    return payload


class FakeConduit:
    def __init__(self) -> None:
        self.revisions: list[dict[str, Any]] = [revision_payload()]
        self.by_id: dict[int, dict[str, Any]] = {}
        self.open_dependencies: list[dict[str, Any]] = []
        self.me = "PHID-USER-me"
        self.users: dict[str, str] = {"PHID-USER-other": "alice"}
        self.message = "Add widget\n\nDifferential Revision: https://phab.local/D100"
        self.buildables: list[dict[str, Any]] | Exception = []
        self.builds: list[dict[str, Any]] = []
        self.repositories: list[dict[str, Any]] = []
        self.look_soon_error: Exception | None = None
        self.calls: list[tuple[str, Any]] = []

    def whoami(self) -> dict[str, Any]:
        self.calls.append(("user.whoami", None))
        return {"phid": self.me, "userName": "me"}

    def query_users(self, phids: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("user.query", phids))
        return [{"phid": phid, "userName": self.users[phid]} for phid in phids if phid in self.users]

    def query_revisions(self, **constraints: Any) -> list[dict[str, Any]]:
        self.calls.append(("differential.query", constraints))
        if "phids" in constraints:
            return list(self.open_dependencies)
        if "ids" in constraints:
            return [self.by_id[i] for i in constraints["ids"] if i in self.by_id]
        return list(self.revisions)

    def get_commit_message(self, revision_id: int) -> str:
        self.calls.append(("differential.getcommitmessage", revision_id))
        return self.message

    def close_revision(self, revision_id: int) -> None:
        self.calls.append(("differential.close", revision_id))

    def query_buildables(self, buildable_phids: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("harbormaster.querybuildables", buildable_phids))
        if isinstance(self.buildables, Exception):
            raise self.buildables
        return list(self.buildables)

    def query_builds(self, buildable_phids: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("harbormaster.querybuilds", buildable_phids))
        return list(self.builds)

    def query_repositories(self, callsigns: list[str]) -> list[dict[str, Any]]:
        self.calls.append(("repository.query", callsigns))
        return list(self.repositories)

    def look_soon(self, callsigns: list[str]) -> None:
        self.calls.append(("diffusion.looksoon", callsigns))
        if self.look_soon_error is not None:
            raise self.look_soon_error

    def methods(self) -> list[str]:
        return [name for name, _params in self.calls]


class FakeConsole:
    def __init__(self, answers: list[bool] | None = None) -> None:
        self.answers = list(answers or [])
        self.lines: list[str] = []
        self.prompts: list[str] = []
        self.banners: list[str] = []

    def echo(self, message: str = "", err: bool = False) -> None:
        self.lines.append(message)

    def badge(self, label: str, color: str, message: str, indent: str = "") -> None:
        self.lines.append(f"{indent}[{label}] {message}")

    def banner(self, text: str, color: str) -> None:
        self.banners.append(text)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"unexpected prompt: {prompt}")
        return self.answers.pop(0)

    @property
    def output(self) -> str:
        return "\n".join(self.lines)


class FakeSubOperations:
    def __init__(self, amend_ok: bool = True, close_ok: bool = True) -> None:
        self.amend_ok = amend_ok
        self.close_ok = close_ok
        self.calls: list[tuple] = []

    def amend(self, revision_id: int, message: str) -> bool:
        self.calls.append(("amend", revision_id))
        return self.amend_ok

    def close_revision(self, revision_id: int, *, finalize: bool = False, quiet: bool = False) -> bool:
        self.calls.append(("close-revision", revision_id, finalize, quiet))
        return self.close_ok


@pytest.fixture
def sample_config() -> Config:
    return Config(
        conduit=ConduitConfig(url="https://phab.local", token="api-token"),
        repository=RepositorySettings(callsign=None),
        push=PushSettings(branch_from=None, update_default="rebase"),
    )


@pytest.fixture
def repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def conduit() -> FakeConduit:
    return FakeConduit()


@pytest.fixture
def console() -> FakeConsole:
    return FakeConsole()


@pytest.fixture
def subops() -> FakeSubOperations:
    return FakeSubOperations()


@pytest.fixture
def git_error() -> GitError:
    return GitError("git pull --ff-only --no-stat failed: Not possible to fast-forward, aborting.")


@pytest.fixture
def make_revision():
    return revision_payload


class UnreachableHttpClient:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def post(self, url, data):
        raise httpx.ConnectTimeout("timed out", request=httpx.Request("POST", url))


@pytest.fixture
def unreachable_conduit(monkeypatch, sample_config) -> ConduitClient:
    monkeypatch.setattr(httpx, "Client", lambda *_args, **_kwargs: UnreachableHttpClient())
    return ConduitClient(sample_config.conduit.url, sample_config.conduit.token)
