"""
Summary service: fold flat time-log rows into a day → task → entry report.

Public API
----------
fetch_log_rows(db, project_id)      → list[LogRow]          (ordered query)
build_days(rows)                    → list[SummarizedDay]   (pure fold)
summary_for_project(db, project)    → Summary
format_minutes(total)               → "HHhMMm"

The fold relies on the row order produced by fetch_log_rows: dates
descending, and within a date each task's rows contiguous. It only ever
looks one row back, so it never regroups; rows that break the order come
out as extra task blocks instead of failing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import datetime as dt
from typing import Iterable

from sqlalchemy import Date, func
from sqlalchemy.orm import Session, aliased

from timecop.core.logging_config import get_logger
from timecop.models.project import Project
from timecop.models.task import Task
from timecop.models.task_log import TaskLog
from timecop.schemas.summary import (
    LogRow,
    SummarizedDay,
    SummarizedTask,
    SummarizedTaskEntry,
    Summary,
)

log = get_logger("timecop.summary")


# ---------------------------------------------------------------------------
# Accumulators (mutable while folding, committed into frozen models)
# ---------------------------------------------------------------------------

@dataclass
class _TaskAccumulator:
    id: int
    name: str
    minutes: int
    entries: list[SummarizedTaskEntry]

    @classmethod
    def open(cls, row: LogRow) -> _TaskAccumulator:
        return cls(
            id=row.task_id,
            name=row.task_name,
            minutes=row.entry_minutes,
            entries=[SummarizedTaskEntry(name=row.entry_name, minutes=row.entry_minutes)],
        )

    def add(self, row: LogRow) -> None:
        self.entries.append(SummarizedTaskEntry(name=row.entry_name, minutes=row.entry_minutes))
        self.minutes += row.entry_minutes

    def commit(self) -> SummarizedTask:
        return SummarizedTask(
            id=self.id,
            name=self.name,
            minutes=self.minutes,
            entries=tuple(self.entries),
        )


@dataclass
class _DayAccumulator:
    date: dt.date
    minutes: int
    current: _TaskAccumulator
    tasks: list[SummarizedTask] = field(default_factory=list)

    @classmethod
    def open(cls, row: LogRow) -> _DayAccumulator:
        return cls(
            date=row.entry_date,
            minutes=row.day_total_minutes,
            current=_TaskAccumulator.open(row),
        )

    def add(self, row: LogRow) -> None:
        # Added once per row, not once per task: a task with several entries
        # on this day contributes its day total several times.
        self.minutes += row.day_total_minutes
        if self.current.id == row.task_id:
            self.current.add(row)
        else:
            self.tasks.append(self.current.commit())
            self.current = _TaskAccumulator.open(row)

    def commit(self) -> SummarizedDay:
        return SummarizedDay(
            date=self.date,
            minutes=self.minutes,
            tasks=(*self.tasks, self.current.commit()),
        )


# ---------------------------------------------------------------------------
# Core: pure fold
# ---------------------------------------------------------------------------

def build_days(rows: Iterable[LogRow]) -> list[SummarizedDay]:
    """Fold ordered log rows into summarized days, in input order."""
    days: list[SummarizedDay] = []
    current: _DayAccumulator | None = None

    for row in rows:
        if current is not None and current.date == row.entry_date:
            current.add(row)
            continue
        if current is not None:
            days.append(current.commit())
        current = _DayAccumulator.open(row)

    if current is not None:
        days.append(current.commit())
    return days


def format_minutes(total: int) -> str:
    """Render a minute count as zero-padded hours and minutes, e.g. 125 → 02h05m."""
    hours, minutes = divmod(total, 60)
    return f"{hours:02}h{minutes:02}m"


# ---------------------------------------------------------------------------
# Query
# ---------------------------------------------------------------------------

def fetch_log_rows(db: Session, project_id: int) -> list[LogRow]:
    """
    Return every log entry of a project joined with its task, newest day
    first, tasks in descending id order within a day and entries in
    insertion order within a task. Each row carries the task's total for
    that calendar day, computed with a correlated sub-select.
    """
    entry_date = func.date(TaskLog.inserted_at, type_=Date)

    same_day = aliased(TaskLog)
    day_total = (
        db.query(func.sum(same_day.minutes))
        .filter(
            same_day.task_id == TaskLog.task_id,
            func.date(same_day.inserted_at) == func.date(TaskLog.inserted_at),
        )
        .correlate(TaskLog)
        .scalar_subquery()
    )

    rows = (
        db.query(
            Task.id.label("task_id"),
            Task.name.label("task_name"),
            TaskLog.name.label("entry_name"),
            TaskLog.minutes.label("entry_minutes"),
            entry_date.label("entry_date"),
            day_total.label("day_total_minutes"),
        )
        .select_from(TaskLog)
        .join(Task, Task.id == TaskLog.task_id)
        .filter(Task.project_id == project_id)
        .group_by(TaskLog.id, entry_date)
        .order_by(entry_date.desc(), Task.id.desc(), TaskLog.id.asc())
        .all()
    )
    return [LogRow.model_validate(row, from_attributes=True) for row in rows]


# ---------------------------------------------------------------------------
# Public: report for one project
# ---------------------------------------------------------------------------

def summary_for_project(db: Session, project: Project) -> Summary:
    rows = fetch_log_rows(db, project.id)
    days = build_days(rows)
    log.debug("summary for project %s: %d rows, %d days", project.id, len(rows), len(days))
    return Summary(project_id=project.id, project_name=project.name, days=tuple(days))
