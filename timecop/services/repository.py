"""
Repository context: where in git the user currently is.

Git is always run in argument-list form, never through a shell.
"""
from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from timecop.core.errors import NoRepositoryError
from timecop.core.logging_config import get_logger

REMOTE_NAME = "origin"
GIT_TIMEOUT = 30

log = get_logger("timecop.repository")

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RepoContext:
    remote: str
    branch: str
    git_dir: Path

    @property
    def context(self) -> str:
        """Task context key for the current branch."""
        return f"{self.remote}#{self.branch}"


def run_git(args: list[str], cwd: Optional[PathLike] = None) -> Optional[str]:
    """Run `git <args>` and return stripped stdout, or None if git failed."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        log.debug("git %s failed to run: %s", " ".join(args), exc)
        return None
    if result.returncode != 0:
        log.debug("git %s exited %d: %s", " ".join(args), result.returncode, result.stderr.strip())
        return None
    return result.stdout.strip()


def discover_repo(path: Optional[PathLike] = None) -> RepoContext:
    """
    Resolve the remote, branch and git directory for `path` (default: cwd).
    Raises NoRepositoryError when any of them is missing.
    """
    cwd = Path(path) if path is not None else Path.cwd()

    git_dir = run_git(["rev-parse", "--absolute-git-dir"], cwd)
    if not git_dir:
        raise NoRepositoryError(cwd, reason="not a git repository")

    remote = run_git(["remote", "get-url", REMOTE_NAME], cwd)
    if not remote:
        raise NoRepositoryError(cwd, reason=f"no '{REMOTE_NAME}' remote")

    branch = run_git(["symbolic-ref", "--short", "HEAD"], cwd)
    if not branch:
        raise NoRepositoryError(cwd, reason="no active branch")

    return RepoContext(remote=remote, branch=branch, git_dir=Path(git_dir))


def last_commit_message(path: Optional[PathLike] = None) -> str:
    """Message of the commit HEAD points at, or "" for a branch with no commits."""
    return run_git(["log", "-1", "--format=%B"], path) or ""
