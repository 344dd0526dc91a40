"""
Project service: create, find and bind projects to git remotes.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from timecop.core.logging_config import get_logger
from timecop.models.context import Context
from timecop.models.project import Project

log = get_logger("timecop.projects")


def list_projects(db: Session) -> list[Project]:
    """All projects, most recently used first."""
    return db.query(Project).order_by(Project.updated_at.desc(), Project.id.desc()).all()


def get_project(db: Session, project_id: int) -> Optional[Project]:
    return db.get(Project, project_id)


def create_project(db: Session, remote: str, name: str) -> Project:
    project = Project(name=name)
    db.add(project)
    db.flush()  # get project.id before binding the remote
    set_project_context(db, project, remote)
    db.commit()
    db.refresh(project)
    log.info("created project %s (%s) for %s", project.id, project.name, remote)
    return project


def find_project_by_remote(db: Session, remote: str) -> Optional[Project]:
    """The most recently used project bound to `remote`, if any."""
    return (
        db.query(Project)
        .join(Context, Context.project_id == Project.id)
        .filter(Context.context == remote, Context.task_id.is_(None))
        .order_by(Project.updated_at.desc(), Project.id.desc())
        .first()
    )


def set_project_context(db: Session, project: Project, remote: str) -> Context:
    """Bind `remote` to `project`. Rebinding an existing pair only refreshes it."""
    existing = (
        db.query(Context)
        .filter(
            Context.project_id == project.id,
            Context.task_id.is_(None),
            Context.context == remote,
        )
        .first()
    )
    if existing is not None:
        existing.updated_at = func.now()
        context = existing
    else:
        context = Context(project_id=project.id, task_id=None, context=remote)
        db.add(context)
    db.commit()
    return context


def touch_project(db: Session, project: Project) -> None:
    """Refresh updated_at so recently used projects sort first."""
    project.updated_at = func.now()
    db.commit()
