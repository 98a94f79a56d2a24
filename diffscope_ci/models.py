from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


BRANCH_REF_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class TriggerContext:
    event_name: str
    ref: str
    after: str | None = None
    base_ref: str | None = None
    head_ref: str | None = None
    head_sha: str | None = None
    default_branch: str | None = None
    repository: str | None = None

    @property
    def branch(self) -> str | None:
        if self.ref.startswith(BRANCH_REF_PREFIX):
            return self.ref[len(BRANCH_REF_PREFIX):] or None
        return None

    @property
    def is_pull_request(self) -> bool:
        return self.event_name == "pull_request"

    @property
    def current(self) -> str | None:
        """Commit the diff ends at."""
        if self.after:
            return self.after
        if self.is_pull_request:
            return self.head_sha
        return None

    @property
    def owner(self) -> str | None:
        if not self.repository or "/" not in self.repository:
            return None
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str | None:
        if not self.repository or "/" not in self.repository:
            return None
        return self.repository.split("/", 1)[1]


@dataclass(frozen=True)
class WorkflowRun:
    id: int
    conclusion: str | None
    head_sha: str
    head_timestamp: datetime


@dataclass(frozen=True)
class RevisionPair:
    base: str | None
    split: str | None

    @classmethod
    def for_branch(cls, ctx: TriggerContext) -> "RevisionPair":
        return cls(base=ctx.default_branch, split=ctx.branch)

    def is_complete(self) -> bool:
        return bool(self.base) and bool(self.split)
