"""Fixed-advisory calculation between the start and end snapshots of a period."""

from dataclasses import dataclass
from typing import Any

from maintenance_reporter.advisories import AdvisorySet
from maintenance_reporter.utils.constants import REMOVED_SENTINEL
from maintenance_reporter.workspace import locked_packages


@dataclass(frozen=True)
class FixedAdvisory:
    """An advisory outstanding at the start of the period and gone at the end.

    On the audit path the third column is the advisory link and to_version is
    None; on the curated-feed path it is the installed version at the start
    and to_version the version at the end (REMOVED_SENTINEL if removed).
    """

    package_name: str
    identifier_or_title: str
    link_or_from_version: str
    to_version: str | None = None


def diff_advisories(
    from_set: AdvisorySet,
    to_set: AdvisorySet,
    enrich: bool = False,
    to_lock_data: dict[str, Any] | None = None,
    include_dev: bool = False,
) -> list[FixedAdvisory]:
    """Return the advisories of from_set whose key is absent from to_set.

    Neither input is modified. Output follows from_set's key order.

    Args:
        from_set: Advisories at the start of the period
        to_set: Advisories at the end of the period
        enrich: Add the end-of-period installed version (curated-feed path)
        to_lock_data: Lock data at the end of the period, required when enrich is set
        include_dev: Also look up dev packages when enriching

    Returns:
        Fixed advisories in from_set order
    """
    if enrich and to_lock_data is None:
        raise ValueError("to_lock_data is required when enrich is set")

    to_versions: dict[str, str] = {}
    if enrich:
        for package in locked_packages(to_lock_data, include_dev=include_dev):
            # First entry wins, like a linear scan that stops at the first match
            to_versions.setdefault(package.get("name", ""), package.get("version", ""))

    fixed = []
    for key, advisory in from_set.items():
        if key in to_set:
            continue
        if enrich:
            fixed.append(
                FixedAdvisory(
                    package_name=advisory.package_name,
                    identifier_or_title=advisory.identifier,
                    link_or_from_version=advisory.installed_version,
                    to_version=to_versions.get(advisory.package_name, REMOVED_SENTINEL),
                )
            )
        else:
            fixed.append(
                FixedAdvisory(
                    package_name=advisory.package_name,
                    identifier_or_title=advisory.identifier,
                    link_or_from_version=advisory.link,
                )
            )
    return fixed
