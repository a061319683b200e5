"""Git history access for snapshot resolution and file retrieval.

Thin wrapper around the git CLI. It only reports facts (commit ids, commit
dates, file contents); the boundary rules live in the snapshot resolver.
"""

import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from maintenance_reporter.errors import FileNotFoundAtCommitError, GitCommandError
from maintenance_reporter.utils.logging import logger


@dataclass(frozen=True)
class Commit:
    """A commit on a branch with its committer date (UTC)."""

    commit_id: str
    committed_at: datetime


class GitRepository:
    """Reads branch history and files at commits from a local git checkout."""

    def __init__(
        self,
        root_path: str = ".",
        executable: str = "git",
        remote: str = "origin",
        timeout: int = 60,
    ):
        self.root_path = Path(root_path).resolve()
        self.executable = executable
        self.remote = remote
        self.timeout = timeout

    def branch_ref(self, branch: str) -> str:
        """Return the ref to read history from (remote-tracking when a remote is set)."""
        if self.remote:
            return f"{self.remote}/{branch}"
        return branch

    def _run(self, args: list[str]) -> subprocess.CompletedProcess:
        cmd = [self.executable, *args]
        logger.debug("Running {cmd}", cmd=" ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                cwd=str(self.root_path),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitCommandError(args, f"git executable '{self.executable}' not found") from e
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(args, f"timed out after {self.timeout} seconds") from e

    def commits_on_branch(self, branch: str, until: datetime | None = None) -> list[Commit]:
        """List first-parent commits of a branch, newest first.

        Following first parents only keeps the history linear, so the entry
        after a commit in the returned list is that commit's first parent.

        Args:
            branch: Branch name (resolved through branch_ref)
            until: Optional upper bound passed to git to shorten the output

        Returns:
            Commits ordered newest to oldest
        """
        args = ["log", self.branch_ref(branch), "--first-parent", "--format=%H %ct"]
        if until is not None:
            args.append(f"--until={until.astimezone(UTC):%Y-%m-%d %H:%M:%S} +0000")

        result = self._run(args)
        if result.returncode != 0:
            raise GitCommandError(args, result.stderr.decode("utf-8", errors="replace"))

        commits = []
        for line in result.stdout.decode("utf-8", errors="replace").splitlines():
            line = line.strip()
            if not line:
                continue
            commit_id, _, timestamp = line.partition(" ")
            commits.append(
                Commit(commit_id=commit_id, committed_at=datetime.fromtimestamp(int(timestamp), tz=UTC))
            )
        return commits

    def file_content_at_commit(self, commit_id: str, filename: str) -> bytes:
        """Return the raw content of a file as it was at a commit."""
        args = ["show", f"{commit_id}:{filename}"]
        result = self._run(args)
        if result.returncode != 0:
            raise FileNotFoundAtCommitError(
                commit_id, filename, result.stderr.decode("utf-8", errors="replace").strip()
            )
        return result.stdout
