"""Pytest configuration and fixtures."""

import json
from datetime import UTC, datetime

import pytest

from maintenance_reporter.advisories.audit import AuditRun
from maintenance_reporter.config_runtime import DEFAULTS
from maintenance_reporter.errors import FileNotFoundAtCommitError
from maintenance_reporter.vcs import Commit


def utc(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=UTC)


def lock(*packages, dev=()):
    """Build composer.lock data from (name, version) pairs."""
    return {
        "packages": [{"name": name, "version": version} for name, version in packages],
        "packages-dev": [{"name": name, "version": version} for name, version in dev],
    }


class FakeHistory:
    """In-memory branch history: commits given oldest first, files per commit."""

    def __init__(self, commits, files=None):
        self.commits = [Commit(commit_id, committed_at) for commit_id, committed_at in commits]
        self.files = files or {}
        self.history_queries = 0
        self.file_reads = []

    def commits_on_branch(self, branch, until=None):
        self.history_queries += 1
        newest_first = list(reversed(self.commits))
        if until is not None:
            newest_first = [c for c in newest_first if c.committed_at <= until]
        return newest_first

    def file_content_at_commit(self, commit_id, filename):
        self.file_reads.append((commit_id, filename))
        try:
            return self.files[(commit_id, filename)]
        except KeyError:
            raise FileNotFoundAtCommitError(commit_id, filename) from None


class FakeAuditRunner:
    """Returns canned composer audit output per snapshot folder name ("from"/"to")."""

    def __init__(self, outputs=None, exit_status=1):
        self.outputs = outputs or {}
        self.exit_status = exit_status
        self.directories = []

    def command(self, directory):
        return ["composer", "audit", f"--working-dir={directory}"]

    def run(self, directory):
        self.directories.append(directory)
        payload = self.outputs.get(directory.name, {"advisories": []})
        return AuditRun(exit_status=self.exit_status, stdout=json.dumps(payload))


class FakeFeedClient:
    def __init__(self, conflict=None, error=None):
        self.conflict = conflict or {}
        self.error = error
        self.fetches = 0

    def fetch(self):
        self.fetches += 1
        if self.error is not None:
            raise self.error
        return {"name": "drupal/drupal-security-advisories", "conflict": dict(self.conflict)}


@pytest.fixture
def config(tmp_path):
    """Default runtime config with the workspace under tmp_path."""
    cfg = json.loads(json.dumps(DEFAULTS))
    cfg["workspace"]["base_dir"] = str(tmp_path / "workspaces")
    return cfg


@pytest.fixture
def three_commit_history():
    """C1, C2, C3 committed on Jan 10, Feb 10 and Mar 10 2024 (UTC noon)."""
    return FakeHistory(
        [
            ("c1" * 20, utc(2024, 1, 10, 12)),
            ("c2" * 20, utc(2024, 2, 10, 12)),
            ("c3" * 20, utc(2024, 3, 10, 12)),
        ]
    )
