"""Options and collaborator wiring shared by the period commands."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import click

from maintenance_reporter.advisories.audit import ComposerAuditRunner
from maintenance_reporter.advisories.feed import AdvisoryFeedClient
from maintenance_reporter.config_runtime import load_runtime_config
from maintenance_reporter.orchestrator import PeriodRequest
from maintenance_reporter.vcs import GitRepository

DATE_FORMATS = ["%Y-%m-%d"]


def period_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the BRANCH argument and the --from/--to/--repo options."""
    func = click.option(
        "--repo",
        default=".",
        type=click.Path(exists=True, file_okay=False),
        help="Path to the git checkout (default: current directory)",
    )(func)
    func = click.option(
        "--to",
        "-t",
        "date_to",
        required=True,
        type=click.DateTime(formats=DATE_FORMATS),
        help="Y-m-d date to check the composer.lock to",
    )(func)
    func = click.option(
        "--from",
        "-f",
        "date_from",
        required=True,
        type=click.DateTime(formats=DATE_FORMATS),
        help="Y-m-d date to check the composer.lock from",
    )(func)
    func = click.argument("branch")(func)
    return func


def build_request(branch: str, date_from: datetime, date_to: datetime) -> PeriodRequest:
    if date_from > date_to:
        raise click.BadParameter("--from must not be later than --to", param_hint="--from")
    return PeriodRequest(branch=branch, date_from=date_from, date_to=date_to)


def build_repository(repo: str, config: dict[str, Any]) -> GitRepository:
    return GitRepository(
        root_path=repo,
        executable=config["git"]["executable"],
        remote=config["git"]["remote"],
        timeout=config["timeouts"]["git"],
    )


def build_audit_runner(config: dict[str, Any]) -> ComposerAuditRunner:
    return ComposerAuditRunner(
        executable=config["audit"]["executable"],
        timeout=config["timeouts"]["audit"],
    )


def build_feed_client(config: dict[str, Any]) -> AdvisoryFeedClient:
    return AdvisoryFeedClient(url=config["feed"]["url"], timeout=config["timeouts"]["feed_fetch"])


def load_config(repo: str) -> dict[str, Any]:
    return load_runtime_config(repo)
