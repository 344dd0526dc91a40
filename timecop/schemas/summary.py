"""
Summary report schemas.

`LogRow` is one flat, denormalized time-log row as produced by the summary
query. The remaining models are the nested report built from those rows;
they are frozen so a built report cannot change while it is being rendered.
"""
import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class LogRow(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    task_id: int
    task_name: str
    entry_name: str
    entry_minutes: int = Field(ge=0)
    entry_date: dt.date
    # Sum of entry_minutes over every entry of this task on entry_date.
    day_total_minutes: int = Field(ge=0)


class SummarizedTaskEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    minutes: int


class SummarizedTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    minutes: int
    entries: tuple[SummarizedTaskEntry, ...] = ()


class SummarizedDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: dt.date
    minutes: int
    tasks: tuple[SummarizedTask, ...] = ()


class Summary(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_id: int
    project_name: str
    days: tuple[SummarizedDay, ...] = ()
