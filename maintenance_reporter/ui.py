"""Central UI handler for Maintenance Reporter.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from maintenance_reporter.ui import console, print_header

    print_header("FIXED SECURITY ADVISORIES")
    console.print("[info]No code changes have been found.[/info]")
"""

import sys

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from maintenance_reporter.diff import FixedAdvisory
from maintenance_reporter.lock_diff import PackageChange
from maintenance_reporter.snapshots import Snapshot

REPORTER_THEME = Theme({
    "info": "bold cyan",
    "commit": "bold cyan",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=REPORTER_THEME,
    force_terminal=sys.stdout.isatty()
)

NO_FIXED_ADVISORIES = "There aren't fixed security advisories at this period."
NO_PACKAGE_CHANGES = "No changes have been found in the selected period."


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_summary(start: Snapshot, end: Snapshot) -> None:
    """Print the commits both ends of the period resolved to."""
    for label, snapshot in (("Base reference commit", start), ("Latest reference commit", end)):
        console.print(
            f"{label}: [commit]{snapshot.short_id}[/commit] at "
            f"{snapshot.committed_at.astimezone():%Y-%m-%d %H:%M:%S %z}",
            highlight=False,
        )


def _table(headers: list[str]) -> Table:
    table = Table(show_header=True, header_style="bold", box=box.ASCII)
    for header in headers:
        table.add_column(header, overflow="fold")
    return table


def _add_row(table: Table, *values: str) -> None:
    # Cells are data, never markup
    table.add_row(*(Text(value) for value in values))


def print_fixed_advisories(title: str, rows: list[FixedAdvisory], enriched: bool) -> None:
    """Render one fixed-advisory table, or the empty-period message."""
    console.print()
    console.print(f"[bold]{title}:[/bold]")
    if not rows:
        console.print(NO_FIXED_ADVISORIES)
        return

    if enriched:
        table = _table(["Package", "From", "To"])
        for row in rows:
            _add_row(table, row.package_name, row.link_or_from_version, row.to_version or "")
    else:
        table = _table(["Package", "CVE", "Link"])
        for row in rows:
            _add_row(table, row.package_name, row.identifier_or_title, row.link_or_from_version)
    console.print(table)


def print_package_changes(title: str, changes: list[PackageChange]) -> None:
    """Render one lock diff section, or the no-changes message."""
    console.print()
    console.print(f"[bold]{title}:[/bold]")
    if not changes:
        console.print(NO_PACKAGE_CHANGES)
        return

    table = _table(["Package", "From", "To"])
    for change in changes:
        _add_row(table, change.name, change.from_version, change.to_version)
    console.print(table)
