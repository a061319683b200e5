"""Report composer.lock package changes during a period."""

import click

from maintenance_reporter.commands.common import build_repository, build_request, load_config, period_options
from maintenance_reporter.orchestrator import LockDiffReport, build_lock_diff_report
from maintenance_reporter.ui import console, print_package_changes, print_summary
from maintenance_reporter.utils.error_handler import handle_exceptions


def render_lock_diff(report: LockDiffReport) -> None:
    if report.no_changes:
        console.print(f"[info]{report.message}[/info]")
        return
    print_summary(report.start, report.end)
    print_package_changes("Production changes", report.diff.changes)
    print_package_changes("Development changes", report.diff.changes_dev)


def run_lock_diff(branch, date_from, date_to, repo, resolver=None) -> LockDiffReport:
    config = load_config(repo)
    report = build_lock_diff_report(
        build_repository(repo, config),
        build_request(branch, date_from, date_to),
        config,
        resolver=resolver,
    )
    render_lock_diff(report)
    return report


@click.command("lock-diff")
@handle_exceptions
@period_options
def lock_diff(branch, date_from, date_to, repo):
    """Show composer.lock package changes in a specific period.

    \b
    Examples:
      mreport lock-diff main --from 2024-01-01 --to 2024-02-01"""
    run_lock_diff(branch, date_from, date_to, repo)
