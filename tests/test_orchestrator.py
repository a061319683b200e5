"""End-to-end tests of a reporting run with in-memory collaborators."""

import json
from pathlib import Path

import pytest
from conftest import FakeAuditRunner, FakeFeedClient, FakeHistory, lock, utc

from maintenance_reporter.errors import FeedFetchError, FileNotFoundAtCommitError, HistoryStartError
from maintenance_reporter.orchestrator import (
    PeriodRequest,
    build_fixed_advisories_report,
    build_lock_diff_report,
)
from maintenance_reporter.snapshots import SnapshotResolver

BASE = "b" * 40
LAST = "e" * 40
REQUEST = PeriodRequest(branch="main", date_from=utc(2024, 1, 15), date_to=utc(2024, 3, 1))


def _history(from_lock, to_lock):
    """BASE before the period, one commit inside it, LAST at the end."""
    middle = "m" * 40
    files = {}
    for commit_id, data in ((BASE, from_lock), (middle, from_lock), (LAST, to_lock)):
        files[(commit_id, "composer.lock")] = json.dumps(data).encode()
        files[(commit_id, "composer.json")] = b'{"name": "acme/site"}'
    return FakeHistory(
        [(BASE, utc(2024, 1, 1)), (middle, utc(2024, 1, 20)), (LAST, utc(2024, 2, 20))],
        files=files,
    )


def _audit_entry(package, cve, reported_at="2024-01-05T00:00:00+00:00"):
    return {"packageName": package, "cve": cve, "title": f"{cve} title", "link": f"https://x.test/{cve}", "reportedAt": reported_at}


def _workspaces(config):
    base = Path(config["workspace"]["base_dir"])
    return list(base.iterdir()) if base.exists() else []


class TestFixedAdvisoriesReport:
    def test_feed_scenario_with_upgrade_and_removal(self, config):
        """foo is upgraded out of its vulnerable range and bar is removed."""
        history = _history(lock(("foo", "1.0.0"), ("bar", "2.0.0")), lock(("foo", "1.2.0")))
        feed = FakeFeedClient({"foo": "<1.2.0", "bar": "<3.0.0"})

        report = build_fixed_advisories_report(history, FakeAuditRunner(), feed, REQUEST, config)

        assert not report.no_changes
        assert report.start.commit_id == BASE
        assert report.end.commit_id == LAST
        assert [(f.package_name, f.link_or_from_version, f.to_version) for f in report.feed] == [
            ("foo", "1.0.0", "1.2.0"),
            ("bar", "2.0.0", "-"),
        ]
        assert feed.fetches == 1

    def test_feed_entry_still_vulnerable_is_not_fixed(self, config):
        history = _history(lock(("foo", "1.0.0")), lock(("foo", "1.1.0")))
        report = build_fixed_advisories_report(
            history, FakeAuditRunner(), FakeFeedClient({"foo": "<1.2.0"}), REQUEST, config
        )
        assert report.feed == []

    def test_empty_feed_reports_nothing(self, config):
        history = _history(lock(("foo", "1.0.0"), ("bar", "2.0.0")), lock())
        report = build_fixed_advisories_report(history, FakeAuditRunner(), FakeFeedClient({}), REQUEST, config)
        assert report.feed == []

    def test_audit_path(self, config):
        history = _history(lock(("drupal/core", "10.1.0")), lock(("drupal/core", "10.1.6")))
        runner = FakeAuditRunner(
            {
                "from": {
                    "advisories": {
                        "drupal/core": [
                            _audit_entry("drupal/core", "CVE-2024-1"),
                            _audit_entry("drupal/core", "CVE-2024-2"),
                            # disclosed after the period: ignored at both ends
                            _audit_entry("drupal/core", "CVE-2024-9", "2024-06-01T00:00:00+00:00"),
                        ]
                    }
                },
                "to": {"advisories": {"drupal/core": [_audit_entry("drupal/core", "CVE-2024-2")]}},
            }
        )

        report = build_fixed_advisories_report(history, runner, FakeFeedClient({}), REQUEST, config)

        assert [(f.package_name, f.identifier_or_title, f.link_or_from_version) for f in report.audit] == [
            ("drupal/core", "CVE-2024-1", "https://x.test/CVE-2024-1"),
        ]
        assert report.audit[0].to_version is None
        assert [d.name for d in runner.directories] == ["from", "to"]

    def test_no_commits_is_an_informational_result(self, config):
        history = _history(lock(), lock())
        request = PeriodRequest(branch="main", date_from=utc(2025, 1, 1), date_to=utc(2025, 2, 1))
        feed = FakeFeedClient({})

        report = build_fixed_advisories_report(history, FakeAuditRunner(), feed, request, config)

        assert report.no_changes
        assert report.message == "No code changes have been found."
        assert report.audit == [] and report.feed == []
        assert feed.fetches == 0
        assert _workspaces(config) == []

    def test_feed_failure_propagates_after_cleanup(self, config):
        history = _history(lock(("foo", "1.0.0")), lock(("foo", "1.2.0")))
        feed = FakeFeedClient(error=FeedFetchError("https://feed.test", "offline"))

        with pytest.raises(FeedFetchError):
            build_fixed_advisories_report(history, FakeAuditRunner(), feed, REQUEST, config)
        assert _workspaces(config) == []

    def test_missing_lock_file_is_fatal(self, config):
        history = _history(lock(), lock())
        del history.files[(LAST, "composer.lock")]

        with pytest.raises(FileNotFoundAtCommitError):
            build_fixed_advisories_report(history, FakeAuditRunner(), FakeFeedClient({}), REQUEST, config)
        assert _workspaces(config) == []


class TestLockDiffReport:
    def test_changes_between_snapshots(self, config):
        history = _history(lock(("foo", "1.0.0")), lock(("foo", "1.2.0")))
        report = build_lock_diff_report(history, REQUEST, config)
        assert [(c.name, c.from_version, c.to_version) for c in report.diff.changes] == [("foo", "1.0.0", "1.2.0")]
        assert ("e" * 40, "composer.json") not in history.file_reads
        assert _workspaces(config) == []

    def test_shared_resolver_resolves_once(self, config):
        history = _history(lock(("foo", "1.0.0")), lock(("foo", "1.2.0")))
        resolver = SnapshotResolver(history)
        build_lock_diff_report(history, REQUEST, config, resolver=resolver)
        build_fixed_advisories_report(
            history, FakeAuditRunner(), FakeFeedClient({}), REQUEST, config, resolver=resolver
        )
        assert history.history_queries == 2

    def test_no_commits(self, config):
        history = _history(lock(), lock())
        request = PeriodRequest(branch="main", date_from=utc(2025, 1, 1), date_to=utc(2025, 2, 1))
        assert build_lock_diff_report(history, request, config).no_changes

    def test_period_before_history_is_fatal(self, config):
        history = _history(lock(), lock())
        request = PeriodRequest(branch="main", date_from=utc(2023, 6, 1), date_to=utc(2024, 3, 1))
        with pytest.raises(HistoryStartError):
            build_lock_diff_report(history, request, config)
        assert _workspaces(config) == []
