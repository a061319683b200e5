"""Curated advisory feed: vulnerable version ranges matched against a lock file.

The feed is a composer.json style document whose "conflict" section maps a
package name to the constraint of its vulnerable releases, e.g. the
drupal-composer/drupal-security-advisories project. It is not CVE-granular:
a package yields at most one advisory, identified by the package name.
"""

from typing import Any

import httpx

from maintenance_reporter.advisories import Advisory, AdvisorySet
from maintenance_reporter.advisories.constraints import parse_constraint, satisfies
from maintenance_reporter.errors import FeedFetchError
from maintenance_reporter.utils.logging import logger
from maintenance_reporter.workspace import MaterializedManifest, locked_packages


class AdvisoryFeedClient:
    """Fetches the curated feed document with a single best-effort request."""

    def __init__(self, url: str, timeout: float = 30.0, http_client: httpx.Client | None = None):
        self.url = url
        self.timeout = timeout
        self._http_client = http_client

    def _get(self) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.get(self.url, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
            return client.get(self.url)

    def fetch(self) -> dict[str, Any]:
        logger.debug("Fetching advisory feed {url}", url=self.url)
        try:
            response = self._get()
            response.raise_for_status()
            document = response.json()
        except httpx.HTTPError as e:
            raise FeedFetchError(self.url, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise FeedFetchError(self.url, f"response is not JSON: {e}") from e

        if not isinstance(document, dict):
            raise FeedFetchError(self.url, "document is not a JSON object")
        conflict = document.get("conflict")
        # An empty PHP array serializes as [], which still means "no ranges"
        if conflict == []:
            document["conflict"] = {}
        elif not isinstance(conflict, dict):
            raise FeedFetchError(self.url, "document has no 'conflict' object")
        else:
            self._check_constraints(conflict)
        return document

    def _check_constraints(self, conflict: dict[str, Any]) -> None:
        """Reject ranges the matcher cannot evaluate instead of reporting them as safe."""
        for name, constraint in conflict.items():
            if not isinstance(constraint, str):
                raise FeedFetchError(
                    self.url, f"constraint for {name} is {type(constraint).__name__}, not a string"
                )
            if not constraint.strip():
                continue
            try:
                parse_constraint(constraint)
            except ValueError as e:
                raise FeedFetchError(self.url, f"unparseable constraint for {name}: {e}") from e


def calculate_security_updates(
    lock_data: dict[str, Any], conflict: dict[str, str], include_dev: bool = False
) -> list[Advisory]:
    """Return one advisory per locked package whose version is in its vulnerable range.

    Raises ValueError for a constraint that cannot be parsed.
    """
    advisories = []
    for package in locked_packages(lock_data, include_dev=include_dev):
        name = package.get("name", "")
        version = package.get("version", "")
        constraint = conflict.get(name)
        if constraint is None or (isinstance(constraint, str) and not constraint.strip()):
            continue
        if satisfies(version, constraint):
            advisories.append(
                Advisory(
                    package_name=name,
                    identifier=name,
                    installed_version=version,
                    title=constraint,
                )
            )
    return advisories


class CuratedFeedSource:
    """Advisory source that matches lock data against the curated feed.

    The document is fetched at most once per instance, so both snapshots of a
    run are compared against the same feed.
    """

    def __init__(self, client: AdvisoryFeedClient, include_dev: bool = False):
        self.client = client
        self.include_dev = include_dev
        self._conflict: dict[str, str] | None = None

    @property
    def conflict(self) -> dict[str, str]:
        if self._conflict is None:
            self._conflict = self.client.fetch()["conflict"]
            logger.info("Advisory feed lists {count} packages", count=len(self._conflict))
        return self._conflict

    def advisories_for(self, manifest: MaterializedManifest) -> AdvisorySet:
        result = AdvisorySet(
            calculate_security_updates(manifest.lock_data, self.conflict, include_dev=self.include_dev)
        )
        logger.info(
            "Curated feed match of {folder}: {count} vulnerable packages",
            folder=manifest.root_path,
            count=len(result),
        )
        return result
