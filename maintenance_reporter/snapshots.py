"""Snapshot resolution: which commit represents each end of a reporting period."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from maintenance_reporter.errors import HistoryStartError, NoCommitInRangeError
from maintenance_reporter.utils.logging import logger
from maintenance_reporter.vcs import Commit


class Boundary(Enum):
    """Which end of the reporting period a snapshot represents."""

    START = "from"
    END = "to"


class BranchHistory(Protocol):
    def commits_on_branch(self, branch: str, until: datetime | None = None) -> list[Commit]: ...


@dataclass(frozen=True)
class Snapshot:
    """Project state at one commit of the reporting period."""

    commit_id: str
    branch: str
    boundary: Boundary
    committed_at: datetime

    @property
    def short_id(self) -> str:
        return self.commit_id[:7]


def as_aware(date: datetime) -> datetime:
    """Interpret naive datetimes in local time and return an aware datetime."""
    if date.tzinfo is None:
        return date.astimezone()
    return date


class SnapshotResolver:
    """Resolves boundary dates to commits, caching results for one run.

    START: the commit right before the first commit strictly after the date,
    i.e. the state of the project before activity resumed.
    END: the last commit at or before the date.
    A START date before the root commit has no base state and is fatal.
    """

    def __init__(self, history: BranchHistory):
        self.history = history
        self._cache: dict[tuple[Boundary, datetime, str], Snapshot] = {}

    def resolve(self, boundary: Boundary, date: datetime, branch: str) -> Snapshot:
        key = (boundary, date, branch)
        if key not in self._cache:
            if boundary is Boundary.START:
                commit = self._base_commit(date, branch)
            else:
                commit = self._last_commit(date, branch)
            logger.info(
                "Resolved {boundary} snapshot of {branch} at {date} to {commit}",
                boundary=boundary.value,
                branch=branch,
                date=date.isoformat(),
                commit=commit.commit_id,
            )
            self._cache[key] = Snapshot(
                commit_id=commit.commit_id,
                branch=branch,
                boundary=boundary,
                committed_at=commit.committed_at,
            )
        return self._cache[key]

    def _base_commit(self, date: datetime, branch: str) -> Commit:
        cutoff = as_aware(date).astimezone(UTC)
        commits = self.history.commits_on_branch(branch)

        # Newest first: the last match is the oldest commit after the date
        first_after = None
        for index, commit in enumerate(commits):
            if commit.committed_at > cutoff:
                first_after = index

        if first_after is None:
            raise NoCommitInRangeError(Boundary.START.value, date, branch)
        if first_after + 1 >= len(commits):
            raise HistoryStartError(date, branch, commits[first_after].commit_id)
        return commits[first_after + 1]

    def _last_commit(self, date: datetime, branch: str) -> Commit:
        cutoff = as_aware(date).astimezone(UTC)
        for commit in self.history.commits_on_branch(branch, until=cutoff):
            if commit.committed_at <= cutoff:
                return commit
        raise NoCommitInRangeError(Boundary.END.value, date, branch)
