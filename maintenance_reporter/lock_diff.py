"""Package version changes between two composer.lock files."""

from dataclasses import dataclass, field
from typing import Any

from maintenance_reporter.utils.constants import NEW_MARKER, REMOVED_MARKER


@dataclass(frozen=True)
class PackageChange:
    name: str
    from_version: str
    to_version: str


@dataclass
class LockDiff:
    """Changes split by production ("packages") and development ("packages-dev")."""

    changes: list[PackageChange] = field(default_factory=list)
    changes_dev: list[PackageChange] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.changes and not self.changes_dev


def _is_dev_version(version: str) -> bool:
    return version.startswith("dev-") or version.endswith("-dev")


def display_version(package: dict[str, Any]) -> str:
    """Version string for display; dev versions carry the short source reference."""
    version = package.get("version", "")
    if _is_dev_version(version):
        reference = (package.get("source") or {}).get("reference") or ""
        if reference:
            return f"{version} {reference[:7]}"
    return version


def _versions(packages: list[dict[str, Any]] | None) -> dict[str, str]:
    versions = {}
    for package in packages or []:
        versions.setdefault(package.get("name", ""), display_version(package))
    return versions


def _diff_section(before: dict[str, str], after: dict[str, str]) -> list[PackageChange]:
    changes = []
    for name, from_version in before.items():
        to_version = after.get(name, REMOVED_MARKER)
        if to_version != from_version:
            changes.append(PackageChange(name, from_version, to_version))
    for name, to_version in after.items():
        if name not in before:
            changes.append(PackageChange(name, NEW_MARKER, to_version))
    return changes


def diff_locks(from_lock: dict[str, Any], to_lock: dict[str, Any]) -> LockDiff:
    """Compare two lock files section by section.

    Packages are listed in from_lock order followed by new packages in
    to_lock order; unchanged packages are omitted.
    """
    return LockDiff(
        changes=_diff_section(_versions(from_lock.get("packages")), _versions(to_lock.get("packages"))),
        changes_dev=_diff_section(
            _versions(from_lock.get("packages-dev")), _versions(to_lock.get("packages-dev"))
        ),
    )
