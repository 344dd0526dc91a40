"""
Shared pytest fixtures.

Every test gets its own SQLite file under tmp_path, created through the
real migration runner so the schema under test is the one users get.
"""
import pytest
from sqlalchemy.orm import sessionmaker
from rich.console import Console
from typer.testing import CliRunner

from timecop import cli
from timecop.core.config import settings
from timecop.db.base import make_engine
from timecop.db.migrate import run_migrations
from timecop.services.projects import create_project
from timecop.services.repository import RepoContext
from timecop.services.tasks import create_task

REMOTE = "git@example.com:timecop/timecop.git"
BRANCH = "feature/summary"
LAST_COMMIT = "Fold log rows into days"


@pytest.fixture()
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'timecop.db'}"


@pytest.fixture()
def engine(db_url):
    engine = make_engine(db_url)
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db(engine):
    TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def repo(tmp_path):
    return RepoContext(remote=REMOTE, branch=BRANCH, git_dir=tmp_path / ".git")


@pytest.fixture()
def project(db, repo):
    return create_project(db, repo.remote, "Timecop")


@pytest.fixture()
def task(db, project, repo):
    return create_task(db, project, "Summary report", repo.context)


@pytest.fixture()
def runner(monkeypatch, db_url, repo):
    """CliRunner wired to the temporary database and a fake repository."""
    monkeypatch.setattr(settings, "DATABASE_URL", db_url)
    monkeypatch.setattr(cli, "discover_repo", lambda: repo)
    monkeypatch.setattr(cli, "last_commit_message", lambda: LAST_COMMIT)
    monkeypatch.setattr(cli, "console", Console(width=200, color_system=None, highlight=False))
    return CliRunner()


@pytest.fixture()
def last_commit():
    return LAST_COMMIT
