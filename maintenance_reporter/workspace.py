"""Disposable working area where snapshot manifest files are materialized."""

import hashlib
import json
import os
import shutil
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from maintenance_reporter.errors import ReporterError
from maintenance_reporter.snapshots import Snapshot
from maintenance_reporter.utils.logging import logger


class FileHistory(Protocol):
    def file_content_at_commit(self, commit_id: str, filename: str) -> bytes: ...


@dataclass(frozen=True)
class ManifestFiles:
    """Names of the dependency files to extract from each snapshot."""

    lock: str = "composer.lock"
    manifest: str = "composer.json"


@dataclass(frozen=True)
class MaterializedManifest:
    """A snapshot's dependency files on disk, with their parsed JSON."""

    root_path: Path
    lock_data: dict[str, Any]
    manifest_data: dict[str, Any]


def locked_packages(lock_data: dict[str, Any], include_dev: bool = False) -> Iterator[dict[str, Any]]:
    """Yield the package entries of a lock file."""
    yield from lock_data.get("packages") or []
    if include_dev:
        yield from lock_data.get("packages-dev") or []


class ManifestCache:
    """Parsed lock/manifest data per materialized directory, for one run."""

    def __init__(self, files: ManifestFiles | None = None):
        self.files = files or ManifestFiles()
        self._lock_data: dict[Path, dict[str, Any]] = {}
        self._manifest_data: dict[Path, dict[str, Any]] = {}

    @staticmethod
    def _read_json(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ReporterError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ReporterError(f"Expected a JSON object in {path}")
        return data

    def lock_data(self, folder: Path) -> dict[str, Any]:
        if folder not in self._lock_data:
            self._lock_data[folder] = self._read_json(folder / Path(self.files.lock).name)
        return self._lock_data[folder]

    def manifest_data(self, folder: Path) -> dict[str, Any]:
        if folder not in self._manifest_data:
            self._manifest_data[folder] = self._read_json(folder / Path(self.files.manifest).name)
        return self._manifest_data[folder]


class SnapshotWorkspace:
    """Uniquely named temporary directory holding one subfolder per snapshot.

    Use as a context manager; the directory is removed on every exit path.
    """

    def __init__(self, base_dir: str | None = None, prefix: str = "maintenance-report-"):
        self.base_dir = Path(base_dir) if base_dir else Path(tempfile.gettempdir())
        self.prefix = prefix
        self.root: Path | None = None

    def __enter__(self) -> "SnapshotWorkspace":
        unique_id = hashlib.sha256(os.urandom(20)).hexdigest()
        self.root = self.base_dir / f"{self.prefix}{unique_id}"
        self.root.mkdir(parents=True, mode=0o700)
        logger.debug("Created snapshot workspace {path}", path=self.root)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        root, self.root = self.root, None
        if root is None:
            return
        try:
            shutil.rmtree(root)
            logger.debug("Removed snapshot workspace {path}", path=root)
        except OSError as cleanup_error:
            if exc_type is None:
                raise
            # Keep the original error; the leftover directory is only logged
            logger.warning(
                "Could not remove snapshot workspace {path}: {err}", path=root, err=cleanup_error
            )

    def folder_for(self, snapshot: Snapshot) -> Path:
        if self.root is None:
            raise ReporterError("Snapshot workspace is not active")
        return self.root / snapshot.boundary.value

    def materialize_files(self, history: FileHistory, snapshot: Snapshot, filenames: list[str]) -> Path:
        """Write each file's content at the snapshot commit into the snapshot folder."""
        folder = self.folder_for(snapshot)
        folder.mkdir(exist_ok=True)
        for filename in filenames:
            content = history.file_content_at_commit(snapshot.commit_id, filename)
            (folder / Path(filename).name).write_bytes(content)
        return folder

    def materialize(
        self,
        history: FileHistory,
        snapshot: Snapshot,
        files: ManifestFiles,
        cache: ManifestCache,
    ) -> MaterializedManifest:
        folder = self.materialize_files(history, snapshot, [files.lock, files.manifest])
        logger.info(
            "Materialized {lock} and {manifest} at {commit} into {folder}",
            lock=files.lock,
            manifest=files.manifest,
            commit=snapshot.short_id,
            folder=folder,
        )
        return MaterializedManifest(
            root_path=folder,
            lock_data=cache.lock_data(folder),
            manifest_data=cache.manifest_data(folder),
        )
