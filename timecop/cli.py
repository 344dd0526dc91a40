"""
Command-line interface.

timecop init    [--no-hook]
timecop log     [--commit] [-m MESSAGE]
timecop output  [--csv] [--detail]
"""
from __future__ import annotations

import functools
import shutil
import sys
import textwrap
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt
from sqlalchemy.orm import Session

from timecop import __version__
from timecop.core.errors import (
    HookExistsError,
    NoProjectError,
    TimecopException,
    handle_timecop_exception,
)
from timecop.db.base import open_db
from timecop.models.project import Project
from timecop.models.task import Task
from timecop.services.hooks import HOOK_NAME, hook_script, install_hook
from timecop.services.ignore import is_ignored, set_ignore_flag
from timecop.services.projects import (
    create_project,
    find_project_by_remote,
    list_projects,
    set_project_context,
)
from timecop.services.render import info_msg, info_msg_compact, render_summary, write_csv
from timecop.services.repository import RepoContext, discover_repo, last_commit_message
from timecop.services.summary import summary_for_project
from timecop.services.tasks import add_log, create_task, find_task_by_context, list_tasks, set_task_context

app = typer.Typer(
    name="timecop",
    help="helps you keep track of time spent working.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

NOTHING = "Nothing, thanks timecop!"
EDITOR_ESCAPE = "\\e"


def reports_errors(command: Callable) -> Callable:
    """Turn TimecopException into a printed error and a non-zero exit."""
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except TimecopException as exc:
            raise handle_timecop_exception(console, exc)
    return wrapper


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"timecop {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", help="Show the version and exit.",
        callback=_version_callback, is_eager=True,
    ),
) -> None:
    """helps you keep track of time spent working."""


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

def _select(prompt: str, options: list[str]) -> int:
    """Numbered menu; returns the zero-based index of the chosen option."""
    for number, option in enumerate(options, start=1):
        console.print(f"  [bold]{number}[/bold]) {escape(option)}")
    choices = [str(number) for number in range(1, len(options) + 1)]
    return IntPrompt.ask(prompt, choices=choices, default=1, console=console) - 1


def _prompt_message(default: str) -> str:
    """Ask for the log message. Answering \\e opens $EDITOR on the default."""
    if default:
        message = Prompt.ask("What did you work on?", default=default, console=console)
    else:
        message = Prompt.ask("What did you work on?", console=console)

    if message != EDITOR_ESCAPE:
        return message

    edited = typer.edit(default, require_save=False)
    if edited is None:
        return default
    return _prompt_message(edited.strip())


def _executable() -> list[str]:
    """argv prefix that starts this timecop from a git hook."""
    found = shutil.which("timecop")
    if found:
        return [found]
    return [sys.executable, "-m", "timecop"]


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def _create_or_select_project(db: Session, repo: RepoContext) -> Optional[Project]:
    projects = list_projects(db)
    if projects:
        options = ["Create a new project", "Select an existing project", NOTHING]
    else:
        options = ["Create your first project", NOTHING]

    info_msg(
        console,
        "No Project Found",
        "This repository does not appear to have a project created for it yet.",
    )
    choice = options[_select("What would you like to do?", options)]

    if choice == NOTHING:
        return None
    if choice == "Select an existing project":
        index = _select("Select an existing project:", [p.name for p in projects])
        project = projects[index]
        set_project_context(db, project, repo.remote)
        return project

    name = Prompt.ask("Project Name", console=console)
    return create_project(db, repo.remote, name)


def _offer_hook(repo: RepoContext) -> None:
    if not Confirm.ask(
        f"Do you want to install the `.git/hooks/{HOOK_NAME}` hook for timecop?",
        console=console,
    ):
        return

    command = _executable()
    try:
        path = install_hook(repo.git_dir, command)
    except HookExistsError:
        if not Confirm.ask(
            f"It looks like `.git/hooks/{HOOK_NAME}` already exists, do you want to overwrite it?",
            console=console,
        ):
            info_msg(
                console,
                "Manual Installation",
                f"There is already a `.git/hooks/{HOOK_NAME}` file present and you opted to\n"
                "not overwrite this with the timecop hook. Here is the timecop hook so you\n"
                f"can merge it into your existing `{HOOK_NAME}` hook.\n\n"
                + textwrap.indent(hook_script(command), "\t"),
            )
            return
        path = install_hook(repo.git_dir, command, overwrite=True)

    console.print(f"Done. The `{path}` hook has been installed!")


@app.command()
@reports_errors
def init(
    no_hook: bool = typer.Option(False, "--no-hook", help="skip the git post-commit hook prompt"),
) -> None:
    """
    initialize a new project

    This will let you either create a new project or select an existing project,
    it will also offer to install the included post-commit git hook, which asks
    after each commit how much time you spent on it.
    """
    repo = discover_repo()
    with open_db() as db:
        project = find_project_by_remote(db, repo.remote)
        if project is None:
            project = _create_or_select_project(db, repo)
        if project is None:
            raise typer.Exit(0)
        info_msg_compact(console, "Project:", project.name)

    if not no_hook:
        _offer_hook(repo)


# ---------------------------------------------------------------------------
# log
# ---------------------------------------------------------------------------

def _create_or_select_task(db: Session, project: Project, repo: RepoContext) -> Optional[Task]:
    tasks = list_tasks(db, project)
    ignore = f"Ignore this branch ({repo.branch})"
    if tasks:
        options = ["Create a new task", "Select an existing task", NOTHING, ignore]
    else:
        options = ["Create your first task", NOTHING, ignore]

    info_msg(
        console,
        "No Task Found",
        "This branch does not appear to have a task created for it yet.",
    )
    choice = options[_select("What would you like to do?", options)]

    if choice == NOTHING:
        return None
    if choice == ignore:
        set_ignore_flag(db, repo.context)
        return None
    if choice == "Select an existing task":
        index = _select("Select an existing task:", [t.name for t in tasks])
        task = tasks[index]
        set_task_context(db, project, task, repo.context)
        return task

    name = Prompt.ask("Task Name", console=console)
    return create_task(db, project, name, repo.context)


@app.command("log")
@reports_errors
def log_entry(
    commit: bool = typer.Option(False, "--commit", help="use last commit message as log entry"),
    message: Optional[str] = typer.Option(None, "--message", "-m", help="the log entry message"),
) -> None:
    """add a new entry for this project"""
    repo = discover_repo()
    with open_db() as db:
        project = find_project_by_remote(db, repo.remote)
        if project is None:
            raise NoProjectError(repo.remote)

        if is_ignored(db, repo.context):
            raise typer.Exit(0)

        task = find_task_by_context(db, repo.context, project)
        if task is None:
            task = _create_or_select_task(db, project, repo)
        if task is None:
            raise typer.Exit(0)

        info_msg_compact(console, "Task:", task.name)

        last_commit = last_commit_message()
        if commit:
            info_msg_compact(console, "Message:", last_commit)
            text = last_commit
        elif message is not None:
            info_msg_compact(console, "Message:", message)
            text = message
        else:
            text = _prompt_message(last_commit)

        minutes = IntPrompt.ask("Estimated time spent? (in minutes)", console=console)
        add_log(db, task, minutes, text)


# ---------------------------------------------------------------------------
# output
# ---------------------------------------------------------------------------

@app.command()
@reports_errors
def output(
    as_csv: bool = typer.Option(False, "--csv", help="export as CSV"),
    detailed: bool = typer.Option(False, "--detail", help="include task log entries"),
) -> None:
    """output the tasks performed by day for this project"""
    repo = discover_repo()
    with open_db() as db:
        project = find_project_by_remote(db, repo.remote)
        if project is None:
            raise NoProjectError(repo.remote)
        summary = summary_for_project(db, project)

    if as_csv:
        write_csv(summary, detailed, sys.stdout)
    else:
        render_summary(summary, detailed, console)
