from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum


@dataclass(slots=True)
class ConduitConfig:
    url: str
    token: str


@dataclass(slots=True)
class RepositorySettings:
    callsign: str | None = None


@dataclass(slots=True)
class PushSettings:
    branch_from: str | None = None
    update_default: str = "rebase"


@dataclass(slots=True)
class Config:
    conduit: ConduitConfig
    repository: RepositorySettings = field(default_factory=RepositorySettings)
    push: PushSettings = field(default_factory=PushSettings)


@dataclass(slots=True)
class GlobalConfig:
    conduit: ConduitConfig
    push: PushSettings | None = None


@dataclass(slots=True)
class RepoConfig:
    conduit: ConduitConfig | None = None
    repository: RepositorySettings = field(default_factory=RepositorySettings)
    push: PushSettings | None = None


class BranchKind(StrEnum):
    BRANCH = "branch"
    BOOKMARK = "bookmark"


class RevisionStatus(IntEnum):
    NEEDS_REVIEW = 0
    NEEDS_REVISION = 1
    ACCEPTED = 2
    CLOSED = 3
    ABANDONED = 4
    CHANGES_PLANNED = 5
    IN_PREPARATION = 6


class BuildableState(StrEnum):
    PASSED = "passed"
    BUILDING = "building"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class RevisionRecord:
    id: int
    phid: str
    title: str
    status: int
    status_name: str
    author_phid: str
    branch: str | None = None
    active_diff_phid: str | None = None
    depends_on: tuple[str, ...] = ()
    uri: str = ""

    @property
    def label(self) -> str:
        return f"D{self.id}: {self.title}"

    @property
    def accepted(self) -> bool:
        return self.status == RevisionStatus.ACCEPTED

    @property
    def closed(self) -> bool:
        return self.status == RevisionStatus.CLOSED


@dataclass(slots=True, frozen=True)
class Build:
    id: int
    name: str
    status: str
    status_name: str

    @property
    def failed(self) -> bool:
        return self.status == BuildableState.FAILED


@dataclass(slots=True, frozen=True)
class BuildableStatus:
    phid: str
    status: str
    uri: str = ""
    builds: tuple[Build, ...] = ()


@dataclass(slots=True, frozen=True)
class LocalCommit:
    commit: str
    tree: str
    message: str


@dataclass(slots=True)
class BranchIdentity:
    name: str
    kind: BranchKind
    prior: str
    prior_detached: bool = False


@dataclass(slots=True)
class UpstreamTarget:
    remote: str
    base: str
    tracked_branch: str | None = None

    @property
    def has_upstream(self) -> bool:
        return bool(self.tracked_branch)


@dataclass(slots=True)
class WorkflowContext:
    branch: str
    kind: BranchKind
    prior: str
    remote: str
    base: str
    tracked_branch: str | None = None
    prior_detached: bool = False
    use_rebase: bool = True
    preview: bool = False
    no_amend: bool = False
    revision_id: str | None = None
    bridged: bool = False
    revision: RevisionRecord | None = None
    message: str | None = None

    @property
    def upstream(self) -> UpstreamTarget:
        return UpstreamTarget(remote=self.remote, base=self.base, tracked_branch=self.tracked_branch)
