"""
Custom exception hierarchy for timecop.

Rule: every error has a machine-readable `code` string and the process
exit status the CLI should terminate with.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class TimecopException(Exception):
    """Base class for all application-level errors."""
    exit_code: int = 1
    code: str = "INTERNAL_ERROR"
    title: str = "Error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NoRepositoryError(TimecopException):
    code = "NO_REPOSITORY"
    title = "No Repository Found"

    def __init__(self, path: Path | str, reason: str | None = None):
        super().__init__(
            message=(
                "Timecop requires the directory you are currently in to be a git\n"
                "repository, with a valid upstream and active branch."
            ),
            details={"path": str(path), "reason": reason} if reason else {"path": str(path)},
        )


class NoProjectError(TimecopException):
    code = "NO_PROJECT"
    title = "No Project Found"

    def __init__(self, remote: str):
        super().__init__(
            message=(
                "Timecop requires a project to be defined before you can start\n"
                "using timecop to log entries, first run: $ timecop init"
            ),
            details={"remote": remote},
        )


class InvalidMinutesError(TimecopException):
    exit_code = 2
    code = "INVALID_MINUTES"
    title = "Invalid Time"

    def __init__(self, minutes: int):
        super().__init__(
            message=f"Time spent must be a non-negative number of minutes. Received {minutes}.",
            details={"minutes": minutes},
        )


class HookExistsError(TimecopException):
    code = "HOOK_EXISTS"
    title = "Hook Already Installed"

    def __init__(self, path: Path):
        super().__init__(
            message=f"A post-commit hook already exists at {path}.",
            details={"path": str(path)},
        )


class MigrationError(TimecopException):
    code = "MIGRATION_FAILED"
    title = "Migration Failed"

    def __init__(self, message: str, revision: str | None = None):
        super().__init__(
            message=message,
            details={"revision": revision} if revision else {},
        )


# ---------------------------------------------------------------------------
# CLI exception handler
# ---------------------------------------------------------------------------

def error_msg(console: Console, title: str, message: str) -> None:
    """Bold red title on its own line, then the message."""
    console.print(f"[bold red]{escape(title)}[/bold red]\n{escape(message)}\n")


def handle_timecop_exception(console: Console, exc: TimecopException) -> typer.Exit:
    """Print the error the way the CLI reports it and build the matching exit."""
    error_msg(console, exc.title, exc.message)
    return typer.Exit(code=exc.exit_code)
