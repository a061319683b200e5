"""Advisory records and the capability interface shared by advisory sources.

Two independent sources produce advisory sets from a materialized snapshot:
- Composer audit (advisories.audit) - live audit tool output
- Curated feed (advisories.feed) - vulnerable version ranges matched against the lock

Usage:
    from maintenance_reporter.advisories import AdvisorySet, AdvisorySource

    def collect(source: AdvisorySource, manifest) -> AdvisorySet:
        return source.advisories_for(manifest)
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from maintenance_reporter.workspace import MaterializedManifest

AdvisoryKey = tuple[str, str]


@dataclass(frozen=True)
class Advisory:
    """One known vulnerability affecting one installed package."""

    package_name: str
    identifier: str
    installed_version: str = ""
    link: str = ""
    title: str = ""
    reported_at: datetime | None = None

    @property
    def key(self) -> AdvisoryKey:
        """Composite identity: same package and identifier means same vulnerability."""
        return (self.package_name, self.identifier)


class AdvisorySet(Mapping[AdvisoryKey, Advisory]):
    """Read-only mapping of (package_name, identifier) to Advisory.

    A later advisory with an existing key replaces the earlier one; key order
    follows first insertion.
    """

    def __init__(self, advisories: Iterable[Advisory] = ()):
        self._items: dict[AdvisoryKey, Advisory] = {}
        for advisory in advisories:
            self._items[advisory.key] = advisory

    def __getitem__(self, key: AdvisoryKey) -> Advisory:
        return self._items[key]

    def __iter__(self) -> Iterator[AdvisoryKey]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"<AdvisorySet size={len(self)}>"


class AdvisorySource(Protocol):
    """Anything that can produce an advisory set for one snapshot."""

    def advisories_for(self, manifest: MaterializedManifest) -> AdvisorySet: ...


__all__ = [
    "Advisory",
    "AdvisoryKey",
    "AdvisorySet",
    "AdvisorySource",
]
