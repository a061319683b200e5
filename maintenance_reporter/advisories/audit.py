"""Live advisory source backed by `composer audit`.

The audit tool answers from its own (current) advisory database, so every
advisory is filtered by its reportedAt timestamp against a cutoff: advisories
disclosed after the end of the reporting period must not count as "fixed".

Timestamp contract: reportedAt is an ISO-8601 string such as
"2023-05-02T14:00:00+00:00" ("Z" accepted, naive values are UTC). Any other
shape is treated as missing and the advisory is dropped.
"""

import json
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from maintenance_reporter.advisories import Advisory, AdvisorySet
from maintenance_reporter.errors import AuditToolError
from maintenance_reporter.snapshots import as_aware
from maintenance_reporter.utils.logging import logger
from maintenance_reporter.workspace import MaterializedManifest, locked_packages


@dataclass(frozen=True)
class AuditRun:
    """Raw result of one audit invocation."""

    exit_status: int
    stdout: str
    stderr: str = ""


class ComposerAuditRunner:
    """Runs `composer audit` against a directory holding composer.json/composer.lock."""

    def __init__(self, executable: str = "composer", timeout: int = 300):
        self.executable = executable
        self.timeout = timeout

    def command(self, directory: Path) -> list[str]:
        return [
            self.executable,
            "audit",
            "--locked",
            "--no-interaction",
            "--format=json",
            f"--working-dir={directory}",
        ]

    def run(self, directory: Path) -> AuditRun:
        """Run the audit. A non-zero exit status is returned, not raised.

        composer audit exits non-zero whenever it finds advisories, so the
        status alone says nothing about whether the tool worked.
        """
        cmd = self.command(directory)
        logger.debug("Running {cmd}", cmd=" ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise AuditToolError(cmd, f"executable '{self.executable}' not found") from e
        except subprocess.TimeoutExpired as e:
            raise AuditToolError(cmd, f"timed out after {self.timeout} seconds") from e
        except OSError as e:
            raise AuditToolError(cmd, str(e)) from e

        logger.debug("Audit exited with status {status}", status=result.returncode)
        return AuditRun(exit_status=result.returncode, stdout=result.stdout, stderr=result.stderr)


def parse_reported_at(value: Any) -> datetime | None:
    """Parse a reportedAt value following the ISO-8601 string contract."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def flatten_advisories(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Flatten the per-package advisory lists of an audit report."""
    grouped = payload.get("advisories") or {}
    if not isinstance(grouped, dict):
        # An empty PHP array serializes as [] instead of {}
        return []

    flattened = []
    for package_name, entries in grouped.items():
        # Older composer versions emit an object keyed by advisory id
        if isinstance(entries, dict):
            entries = list(entries.values())
        for entry in entries or []:
            if isinstance(entry, dict):
                flattened.append({"packageName": package_name, **entry})
    return flattened


class LiveAuditSource:
    """Advisory source that audits a materialized snapshot with composer."""

    def __init__(self, runner: ComposerAuditRunner, cutoff: datetime):
        self.runner = runner
        self.cutoff = as_aware(cutoff)

    def _load_report(self, run: AuditRun, command: list[str]) -> dict[str, Any]:
        if not run.stdout.strip():
            if run.exit_status != 0:
                raise AuditToolError(command, run.stderr.strip() or f"exit status {run.exit_status}")
            return {}
        try:
            payload = json.loads(run.stdout)
        except json.JSONDecodeError as e:
            raise AuditToolError(command, f"output is not JSON: {e}") from e
        if not isinstance(payload, dict):
            raise AuditToolError(command, "output is not a JSON object")
        return payload

    def advisories_for(self, manifest: MaterializedManifest) -> AdvisorySet:
        run = self.runner.run(manifest.root_path)
        payload = self._load_report(run, self.runner.command(manifest.root_path))

        installed = {}
        for package in locked_packages(manifest.lock_data, include_dev=True):
            installed.setdefault(package.get("name", ""), package.get("version", ""))

        advisories = []
        dropped = 0
        for entry in flatten_advisories(payload):
            reported_at = parse_reported_at(entry.get("reportedAt"))
            if reported_at is None or reported_at >= self.cutoff:
                dropped += 1
                continue

            package_name = entry.get("packageName", "")
            title = entry.get("title") or ""
            advisories.append(
                Advisory(
                    package_name=package_name,
                    identifier=entry.get("cve") or title,
                    installed_version=installed.get(package_name, ""),
                    link=entry.get("link") or "",
                    title=title,
                    reported_at=reported_at,
                )
            )

        result = AdvisorySet(advisories)
        logger.info(
            "Composer audit of {folder}: {count} advisories ({dropped} after cutoff or undated)",
            folder=manifest.root_path,
            count=len(result),
            dropped=dropped,
        )
        return result
