"""Sequencing of a reporting run: resolve, materialize, audit, diff, clean up.

No business rules live here. Each builder resolves both snapshots, works
inside one SnapshotWorkspace (removed on every exit path) and returns a
report object for the presentation layer. A period without commits is the
only error translated into a result instead of propagating.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from maintenance_reporter.advisories.audit import ComposerAuditRunner, LiveAuditSource
from maintenance_reporter.advisories.feed import AdvisoryFeedClient, CuratedFeedSource
from maintenance_reporter.diff import FixedAdvisory, diff_advisories
from maintenance_reporter.errors import NoCommitInRangeError
from maintenance_reporter.lock_diff import LockDiff, diff_locks
from maintenance_reporter.snapshots import Boundary, Snapshot, SnapshotResolver
from maintenance_reporter.utils.constants import NO_CHANGES_MESSAGE
from maintenance_reporter.utils.logging import logger
from maintenance_reporter.vcs import GitRepository
from maintenance_reporter.workspace import ManifestCache, ManifestFiles, SnapshotWorkspace


@dataclass(frozen=True)
class PeriodRequest:
    branch: str
    date_from: datetime
    date_to: datetime


@dataclass
class FixedAdvisoriesReport:
    start: Snapshot | None = None
    end: Snapshot | None = None
    audit: list[FixedAdvisory] = field(default_factory=list)
    feed: list[FixedAdvisory] = field(default_factory=list)
    no_changes: bool = False
    message: str = ""


@dataclass
class LockDiffReport:
    start: Snapshot | None = None
    end: Snapshot | None = None
    diff: LockDiff = field(default_factory=LockDiff)
    no_changes: bool = False
    message: str = ""


def resolve_period(resolver: SnapshotResolver, request: PeriodRequest) -> tuple[Snapshot, Snapshot]:
    start = resolver.resolve(Boundary.START, request.date_from, request.branch)
    end = resolver.resolve(Boundary.END, request.date_to, request.branch)
    return start, end


def _workspace(config: dict[str, Any]) -> SnapshotWorkspace:
    return SnapshotWorkspace(
        base_dir=config["workspace"]["base_dir"] or None,
        prefix=config["workspace"]["prefix"],
    )


def build_fixed_advisories_report(
    repository: GitRepository,
    audit_runner: ComposerAuditRunner,
    feed_client: AdvisoryFeedClient,
    request: PeriodRequest,
    config: dict[str, Any],
    resolver: SnapshotResolver | None = None,
) -> FixedAdvisoriesReport:
    """Compute the advisories fixed during the requested period from both sources."""
    resolver = resolver or SnapshotResolver(repository)
    try:
        start, end = resolve_period(resolver, request)
    except NoCommitInRangeError as e:
        logger.info("No commits in period: {err}", err=e)
        return FixedAdvisoriesReport(no_changes=True, message=NO_CHANGES_MESSAGE)

    files = ManifestFiles(lock=config["files"]["lock"], manifest=config["files"]["manifest"])
    include_dev = config["feed"]["include_dev"]
    cache = ManifestCache(files)

    with _workspace(config) as workspace:
        from_manifest = workspace.materialize(repository, start, files, cache)
        to_manifest = workspace.materialize(repository, end, files, cache)

        audit_source = LiveAuditSource(audit_runner, cutoff=request.date_to)
        audit_fixed = diff_advisories(
            audit_source.advisories_for(from_manifest),
            audit_source.advisories_for(to_manifest),
        )

        feed_source = CuratedFeedSource(feed_client, include_dev=include_dev)
        feed_fixed = diff_advisories(
            feed_source.advisories_for(from_manifest),
            feed_source.advisories_for(to_manifest),
            enrich=True,
            to_lock_data=to_manifest.lock_data,
            include_dev=include_dev,
        )

    logger.info(
        "Fixed advisories: {audit} from composer audit, {feed} from curated feed",
        audit=len(audit_fixed),
        feed=len(feed_fixed),
    )
    return FixedAdvisoriesReport(start=start, end=end, audit=audit_fixed, feed=feed_fixed)


def build_lock_diff_report(
    repository: GitRepository,
    request: PeriodRequest,
    config: dict[str, Any],
    resolver: SnapshotResolver | None = None,
) -> LockDiffReport:
    """Compare the lock file at both ends of the requested period."""
    resolver = resolver or SnapshotResolver(repository)
    try:
        start, end = resolve_period(resolver, request)
    except NoCommitInRangeError as e:
        logger.info("No commits in period: {err}", err=e)
        return LockDiffReport(no_changes=True, message=NO_CHANGES_MESSAGE)

    files = ManifestFiles(lock=config["files"]["lock"], manifest=config["files"]["manifest"])
    cache = ManifestCache(files)

    with _workspace(config) as workspace:
        from_folder = workspace.materialize_files(repository, start, [files.lock])
        to_folder = workspace.materialize_files(repository, end, [files.lock])
        diff = diff_locks(cache.lock_data(from_folder), cache.lock_data(to_folder))

    return LockDiffReport(start=start, end=end, diff=diff)
