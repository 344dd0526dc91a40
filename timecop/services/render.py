"""
Presentation: print a Summary as styled text or write it as CSV.
"""
from __future__ import annotations

import csv
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from timecop.schemas.summary import Summary
from timecop.services.summary import format_minutes

CSV_HEADERS = ["Project", "Date", "Time Spent (Minutes)", "Task"]
CSV_DETAIL_HEADER = "Log Entry"


# ---------------------------------------------------------------------------
# Message helpers
# ---------------------------------------------------------------------------

def info_msg(console: Console, title: str, message: str) -> None:
    """Bold white title on its own line, then the message."""
    console.print(f"[bold bright_white]{escape(title)}[/bold bright_white]\n{escape(message)}\n")


def info_msg_compact(console: Console, title: str, message: str) -> None:
    """Bold white title and message on one line."""
    console.print(f"[bold bright_white]{escape(title)}[/bold bright_white] {escape(message)}")


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def _time(minutes: int) -> str:
    return f"\\[[bright_white]{format_minutes(minutes)}[/bright_white]]"


def render_summary(summary: Summary, detailed: bool, console: Console) -> None:
    info_msg_compact(console, "Project Summary:", summary.project_name)
    console.print()

    for day in summary.days:
        day_name = day.date.strftime("%A")
        # %-d is not portable
        date_label = f"({day.date.day} {day.date.strftime('%B, %Y')})"
        info_msg_compact(console, day_name, date_label)

        for task in day.tasks:
            if detailed:
                console.print(f"  [bold bright_white]{escape(task.name)}[/bold bright_white]")
                for entry in task.entries:
                    console.print(f"    {_time(entry.minutes)} {escape(entry.name)}")
            else:
                console.print(f"  {_time(task.minutes)} {escape(task.name)}")
        console.print()


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def write_csv(summary: Summary, detailed: bool, stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    headers = list(CSV_HEADERS)
    if detailed:
        headers.append(CSV_DETAIL_HEADER)
    writer.writerow(headers)

    for day in summary.days:
        date = day.date.strftime("%Y-%m-%d")
        for task in day.tasks:
            if detailed:
                for entry in task.entries:
                    writer.writerow([summary.project_name, date, entry.minutes, task.name, entry.name])
            else:
                writer.writerow([summary.project_name, date, task.minutes, task.name])
