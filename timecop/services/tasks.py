"""
Task service: tasks are bound to branches ("<remote>#<branch>" contexts)
and collect the time-log entries.

Public API
----------
list_tasks(db, project)                          → list[Task]
get_task(db, task_id)                            → Task | None
create_task(db, project, name, context)          → Task
find_task_by_context(db, context, project=None)  → Task | None
set_task_context(db, project, task, context)     → Context
add_log(db, task, minutes, message, at=None)     → TaskLog
touch_task(db, task)
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from timecop.core.errors import InvalidMinutesError
from timecop.core.logging_config import get_logger
from timecop.models.context import Context
from timecop.models.project import Project
from timecop.models.task import Task
from timecop.models.task_log import TaskLog

log = get_logger("timecop.tasks")


def list_tasks(db: Session, project: Project) -> list[Task]:
    """Tasks of `project`, most recently used first."""
    return (
        db.query(Task)
        .filter(Task.project_id == project.id)
        .order_by(Task.updated_at.desc(), Task.id.desc())
        .all()
    )


def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.get(Task, task_id)


def create_task(db: Session, project: Project, name: str, context: str) -> Task:
    task = Task(project_id=project.id, name=name)
    db.add(task)
    db.flush()  # get task.id before binding the branch
    set_task_context(db, project, task, context)
    db.refresh(task)
    log.info("created task %s (%s) for %s", task.id, task.name, context)
    return task


def find_task_by_context(
    db: Session,
    context: str,
    project: Optional[Project] = None,
) -> Optional[Task]:
    """The most recently used task bound to `context`, if any."""
    query = (
        db.query(Task)
        .join(Context, Context.task_id == Task.id)
        .filter(Context.context == context)
    )
    if project is not None:
        query = query.filter(Task.project_id == project.id)
    return query.order_by(Task.updated_at.desc(), Task.id.desc()).first()


def set_task_context(db: Session, project: Project, task: Task, context: str) -> Context:
    """Bind the branch context to `task`. Rebinding an existing triple only refreshes it."""
    existing = (
        db.query(Context)
        .filter(
            Context.project_id == project.id,
            Context.task_id == task.id,
            Context.context == context,
        )
        .first()
    )
    if existing is not None:
        existing.updated_at = func.now()
        bound = existing
    else:
        bound = Context(project_id=project.id, task_id=task.id, context=context)
        db.add(bound)
    db.commit()
    return bound


def add_log(
    db: Session,
    task: Task,
    minutes: int,
    message: str,
    at: Optional[datetime] = None,
) -> TaskLog:
    """
    Record `minutes` spent on `task`. `at` overrides the entry timestamp
    (database UTC time by default). The task and its project are touched.
    """
    if minutes < 0:
        raise InvalidMinutesError(minutes)

    entry = TaskLog(task_id=task.id, name=message, minutes=minutes)
    if at is not None:
        entry.inserted_at = at
        entry.updated_at = at
    db.add(entry)

    task.updated_at = func.now()
    project = db.get(Project, task.project_id)
    if project is not None:
        project.updated_at = func.now()

    db.commit()
    db.refresh(entry)
    log.info("logged %d minutes on task %s: %s", minutes, task.id, message)
    return entry


def touch_task(db: Session, task: Task) -> None:
    """Refresh updated_at so recently used tasks sort first."""
    task.updated_at = func.now()
    db.commit()
