from .project import Project
from .task import Task
from .context import Context
from .task_log import TaskLog
from .ignored import IgnoredContext

__all__ = [
    "Project",
    "Task",
    "Context",
    "TaskLog",
    "IgnoredContext",
]
