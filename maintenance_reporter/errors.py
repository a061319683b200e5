"""Exception taxonomy for Maintenance Reporter.

Only NoCommitInRangeError is expected during normal use; it is translated into
an informational "no changes" result by the orchestrator. Every other error is
fatal for the run and reaches the CLI error handler.
"""

from datetime import datetime


class ReporterError(Exception):
    """Base class for all Maintenance Reporter errors."""

    pass


class NoCommitInRangeError(ReporterError):
    """Raised when no commit satisfies a boundary's date constraint."""

    def __init__(self, boundary: str, date: datetime, branch: str):
        self.boundary = boundary
        self.date = date
        self.branch = branch
        super().__init__(
            f"There are no commits for the {boundary} boundary "
            f"({date.isoformat()}) on branch '{branch}'"
        )


class FileNotFoundAtCommitError(ReporterError):
    """Raised when a manifest or lock file does not exist at a commit."""

    def __init__(self, commit_id: str, filename: str, detail: str = ""):
        self.commit_id = commit_id
        self.filename = filename
        message = f"File '{filename}' not found at commit {commit_id}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class FeedFetchError(ReporterError):
    """Raised when the curated advisory feed cannot be fetched or parsed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not fetch advisory feed {url}: {reason}")


class AuditToolError(ReporterError):
    """Raised when the dependency audit tool cannot be run at all."""

    def __init__(self, command: list[str], reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Audit tool failed ({' '.join(command)}): {reason}")


class GitCommandError(ReporterError):
    """Raised when git cannot be run or fails for a reason other than a missing file."""

    def __init__(self, args: list[str], stderr: str):
        self.git_args = args
        self.stderr = stderr
        super().__init__(f"git {' '.join(args)} failed: {stderr.strip()}")


class HistoryStartError(ReporterError):
    """Raised when the period starts at the branch's root commit, so no base state exists."""

    def __init__(self, date: datetime, branch: str, root_commit: str):
        self.date = date
        self.branch = branch
        self.root_commit = root_commit
        super().__init__(
            f"The period starting {date.isoformat()} begins before the history of branch "
            f"'{branch}': its first commit {root_commit[:7]} has no predecessor to compare against"
        )
