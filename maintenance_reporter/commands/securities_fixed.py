"""Report security advisories fixed during a period."""

import click

from maintenance_reporter.commands.common import (
    build_audit_runner,
    build_feed_client,
    build_repository,
    build_request,
    load_config,
    period_options,
)
from maintenance_reporter.orchestrator import FixedAdvisoriesReport, build_fixed_advisories_report
from maintenance_reporter.ui import console, print_fixed_advisories, print_summary
from maintenance_reporter.utils.error_handler import handle_exceptions


def render_fixed_advisories(report: FixedAdvisoriesReport) -> None:
    if report.no_changes:
        console.print(f"[info]{report.message}[/info]")
        return
    print_summary(report.start, report.end)
    print_fixed_advisories("Fixed security advisories (Composer audit)", report.audit, enriched=False)
    print_fixed_advisories("Fixed security advisories (curated feed)", report.feed, enriched=True)


def run_securities_fixed(branch, date_from, date_to, repo, resolver=None) -> FixedAdvisoriesReport:
    config = load_config(repo)
    repository = build_repository(repo, config)
    report = build_fixed_advisories_report(
        repository,
        build_audit_runner(config),
        build_feed_client(config),
        build_request(branch, date_from, date_to),
        config,
        resolver=resolver,
    )
    render_fixed_advisories(report)
    return report


@click.command("securities-fixed")
@handle_exceptions
@period_options
def securities_fixed(branch, date_from, date_to, repo):
    """Show the security advisories fixed in a specific period.

    Compares the project's composer.lock at the start and at the end of the
    period against two independent sources and lists the advisories that
    were outstanding at the start and are gone at the end.

    \b
    Sources:
      - composer audit: advisories known to Composer, limited to those
        reported before the --to date
      - curated feed: vulnerable version ranges (drupal-security-advisories
        by default), shown with the package version transition

    \b
    Examples:
      mreport securities-fixed main --from 2024-01-01 --to 2024-02-01
      mreport securities-fixed develop -f 2024-01-01 -t 2024-03-31 --repo ../site

    \b
    Exit Codes:
      0 = Success (including periods without commits)
      1 = The audit could not be completed"""
    run_securities_fixed(branch, date_from, date_to, repo)
