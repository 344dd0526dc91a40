"""
Tests for the CLI commands, driven through typer's CliRunner with a fake
repository context and a temporary database.
"""
import csv
import io
from datetime import datetime

import pytest

from timecop import __version__
from timecop.cli import app
from timecop.models.context import Context
from timecop.models.task_log import TaskLog
from timecop.services.ignore import is_ignored
from timecop.services.projects import create_project, find_project_by_remote
from timecop.services.repository import RepoContext
from timecop.services.tasks import add_log, find_task_by_context


def _logs(db):
    db.expire_all()
    return db.query(TaskLog).order_by(TaskLog.id).all()


class TestGlobal:
    def test_help(self, runner):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "init" in result.output
        assert "log" in result.output
        assert "output" in result.output

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

class TestInit:
    def test_create_first_project(self, runner, db, repo):
        result = runner.invoke(app, ["init", "--no-hook"], input="1\nTimecop\n")
        assert result.exit_code == 0, result.output
        assert "No Project Found" in result.output
        assert "Create your first project" in result.output
        project = find_project_by_remote(db, repo.remote)
        assert project is not None
        assert project.name == "Timecop"

    def test_nothing_thanks(self, runner, db, repo):
        result = runner.invoke(app, ["init", "--no-hook"], input="2\n")
        assert result.exit_code == 0
        assert find_project_by_remote(db, repo.remote) is None

    def test_select_existing_project(self, runner, db, repo):
        existing = create_project(db, "git@example.com:timecop/upstream.git", "Upstream")
        result = runner.invoke(app, ["init", "--no-hook"], input="2\n1\n")
        assert result.exit_code == 0, result.output
        assert "Select an existing project" in result.output
        db.expire_all()
        assert find_project_by_remote(db, repo.remote).id == existing.id

    def test_existing_project_skips_menu(self, runner, project):
        result = runner.invoke(app, ["init", "--no-hook"])
        assert result.exit_code == 0
        assert "No Project Found" not in result.output
        assert "Project: Timecop" in result.output

    def test_installs_hook(self, runner, project, repo):
        result = runner.invoke(app, ["init"], input="y\n")
        assert result.exit_code == 0, result.output
        hook = repo.git_dir / "hooks" / "post-commit"
        assert hook.exists()
        assert "log --commit" in hook.read_text()

    def test_hook_quotes_interpreter_fallback(self, runner, project, repo, monkeypatch):
        monkeypatch.setattr("timecop.cli.shutil.which", lambda name: None)
        monkeypatch.setattr("timecop.cli.sys.executable", "/opt/My Tools/bin/python")
        result = runner.invoke(app, ["init"], input="y\n")
        assert result.exit_code == 0, result.output
        hook = repo.git_dir / "hooks" / "post-commit"
        assert "'/opt/My Tools/bin/python' -m timecop log --commit" in hook.read_text()

    def test_declined_hook(self, runner, project, repo):
        result = runner.invoke(app, ["init"], input="n\n")
        assert result.exit_code == 0
        assert not (repo.git_dir / "hooks" / "post-commit").exists()

    def test_keeps_existing_hook_and_prints_it(self, runner, project, repo):
        hook = repo.git_dir / "hooks" / "post-commit"
        hook.parent.mkdir(parents=True)
        hook.write_text("#!/bin/sh\necho mine\n")
        result = runner.invoke(app, ["init"], input="y\nn\n")
        assert result.exit_code == 0, result.output
        assert "Manual Installation" in result.output
        assert "log --commit" in result.output
        assert "echo mine" in hook.read_text()


# ---------------------------------------------------------------------------
# log
# ---------------------------------------------------------------------------

class TestLog:
    def test_requires_project(self, runner):
        result = runner.invoke(app, ["log", "-m", "work"])
        assert result.exit_code == 1
        assert "No Project Found" in result.output
        assert "timecop init" in result.output

    def test_create_task_and_log_message(self, runner, db, project, repo):
        result = runner.invoke(app, ["log", "-m", "wrote the fold"], input="1\nSummary report\n30\n")
        assert result.exit_code == 0, result.output
        assert "No Task Found" in result.output
        task = find_task_by_context(db, repo.context, project)
        assert task.name == "Summary report"
        assert [(log.task_id, log.name, log.minutes) for log in _logs(db)] == [
            (task.id, "wrote the fold", 30),
        ]

    def test_commit_message(self, runner, db, task, last_commit):
        result = runner.invoke(app, ["log", "--commit"], input="15\n")
        assert result.exit_code == 0, result.output
        assert "Task: Summary report" in result.output
        assert f"Message: {last_commit}" in result.output
        assert [(log.name, log.minutes) for log in _logs(db)] == [(last_commit, 15)]

    def test_prompted_message_defaults_to_last_commit(self, runner, db, task, last_commit):
        result = runner.invoke(app, ["log"], input="\n20\n")
        assert result.exit_code == 0, result.output
        assert [(log.name, log.minutes) for log in _logs(db)] == [(last_commit, 20)]

    def test_prompted_message(self, runner, db, task):
        result = runner.invoke(app, ["log"], input="paired on review\n45\n")
        assert result.exit_code == 0, result.output
        assert [(log.name, log.minutes) for log in _logs(db)] == [("paired on review", 45)]

    def test_select_existing_task(self, runner, db, project, task, repo, monkeypatch):
        other_branch = RepoContext(remote=repo.remote, branch="hotfix", git_dir=repo.git_dir)
        monkeypatch.setattr("timecop.cli.discover_repo", lambda: other_branch)
        result = runner.invoke(app, ["log", "-m", "hotfix"], input="2\n1\n10\n")
        assert result.exit_code == 0, result.output
        assert find_task_by_context(db, other_branch.context, project).id == task.id
        assert [(log.task_id, log.minutes) for log in _logs(db)] == [(task.id, 10)]

    def test_nothing_thanks(self, runner, db, project):
        result = runner.invoke(app, ["log", "-m", "x"], input="2\n")
        assert result.exit_code == 0
        assert _logs(db) == []

    def test_ignore_branch(self, runner, db, project, repo):
        result = runner.invoke(app, ["log", "-m", "x"], input="3\n")
        assert result.exit_code == 0
        assert f"Ignore this branch ({repo.branch})" in result.output
        assert is_ignored(db, repo.context)

        again = runner.invoke(app, ["log", "-m", "x"])
        assert again.exit_code == 0
        assert again.output == ""
        assert _logs(db) == []

    def test_negative_minutes(self, runner, db, task):
        result = runner.invoke(app, ["log", "-m", "x"], input="-5\n")
        assert result.exit_code == 2
        assert "Invalid Time" in result.output
        assert _logs(db) == []


# ---------------------------------------------------------------------------
# output
# ---------------------------------------------------------------------------

class TestOutput:
    @pytest.fixture()
    def logged(self, db, task):
        add_log(db, task, 30, "first", at=datetime(2026, 10, 19, 9, 0))
        add_log(db, task, 95, "second", at=datetime(2026, 10, 19, 14, 0))
        add_log(db, task, 10, "older", at=datetime(2026, 10, 16, 9, 0))
        return task

    def test_requires_project(self, runner):
        result = runner.invoke(app, ["output"])
        assert result.exit_code == 1
        assert "No Project Found" in result.output

    def test_text(self, runner, logged):
        result = runner.invoke(app, ["output"])
        assert result.exit_code == 0, result.output
        assert "Project Summary: Timecop" in result.output
        assert "Monday (19 October, 2026)" in result.output
        assert "[02h05m] Summary report" in result.output
        assert "Friday (16 October, 2026)" in result.output
        assert result.output.index("19 October") < result.output.index("16 October")

    def test_text_detail(self, runner, logged):
        result = runner.invoke(app, ["output", "--detail"])
        assert result.exit_code == 0, result.output
        assert "[00h30m] first" in result.output
        assert "[01h35m] second" in result.output
        assert "[00h10m] older" in result.output

    def test_csv(self, runner, logged):
        result = runner.invoke(app, ["output", "--csv"])
        assert result.exit_code == 0, result.output
        rows = list(csv.reader(io.StringIO(result.output)))
        assert rows == [
            ["Project", "Date", "Time Spent (Minutes)", "Task"],
            ["Timecop", "2026-10-19", "125", "Summary report"],
            ["Timecop", "2026-10-16", "10", "Summary report"],
        ]

    def test_csv_detail(self, runner, logged):
        result = runner.invoke(app, ["output", "--csv", "--detail"])
        assert result.exit_code == 0, result.output
        rows = list(csv.reader(io.StringIO(result.output)))
        assert rows[0][-1] == "Log Entry"
        assert [row[2:] for row in rows[1:]] == [
            ["30", "Summary report", "first"],
            ["95", "Summary report", "second"],
            ["10", "Summary report", "older"],
        ]

    def test_empty_project(self, runner, project):
        result = runner.invoke(app, ["output", "--csv"])
        assert result.exit_code == 0
        assert result.output == "Project,Date,Time Spent (Minutes),Task\n"


def test_context_rows_written_by_cli(runner, db, repo):
    runner.invoke(app, ["init", "--no-hook"], input="1\nTimecop\n")
    contexts = db.query(Context).all()
    assert [(c.context, c.task_id) for c in contexts] == [(repo.remote, None)]
