"""Full maintenance report: package changes plus fixed security advisories."""

import click

from maintenance_reporter.commands.common import build_repository, load_config, period_options
from maintenance_reporter.commands.lock_diff import run_lock_diff
from maintenance_reporter.commands.securities_fixed import run_securities_fixed
from maintenance_reporter.snapshots import SnapshotResolver
from maintenance_reporter.ui import print_header
from maintenance_reporter.utils.error_handler import handle_exceptions


@click.command("report")
@handle_exceptions
@period_options
def report(branch, date_from, date_to, repo):
    """Report maintenance done in a specific period.

    Runs lock-diff and securities-fixed for the same period, resolving the
    period's commits only once.

    \b
    Examples:
      mreport report main --from 2024-01-01 --to 2024-02-01"""
    resolver = SnapshotResolver(build_repository(repo, load_config(repo)))

    print_header("COMPOSER LOCK DIFF")
    lock_report = run_lock_diff(branch, date_from, date_to, repo, resolver=resolver)
    if lock_report.no_changes:
        return

    print_header("SECURITIES FIXED")
    run_securities_fixed(branch, date_from, date_to, repo, resolver=resolver)
