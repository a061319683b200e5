"""Maintenance Reporter CLI - Main entry point and command registration hub."""
# ruff: noqa: E402 - Intentional lazy loading: commands imported after cli group definition

import click

from maintenance_reporter import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mreport")
@click.help_option("-h", "--help")
def cli():
    """Maintenance Reporter - dependency maintenance over a git period

    \b
    QUICK START:
      mreport report main --from 2024-01-01 --to 2024-02-01
      mreport securities-fixed main -f 2024-01-01 -t 2024-02-01
      mreport lock-diff main -f 2024-01-01 -t 2024-02-01

    \b
    Dates are Y-m-d. History is read from the remote-tracking branch
    (origin/<branch> by default); run 'git fetch' first."""
    pass


from maintenance_reporter.commands.lock_diff import lock_diff
from maintenance_reporter.commands.report import report
from maintenance_reporter.commands.securities_fixed import securities_fixed

cli.add_command(report)
cli.add_command(lock_diff)
cli.add_command(securities_fixed)


def main():
    """Main entry point for console script."""
    cli()


if __name__ == "__main__":
    main()
