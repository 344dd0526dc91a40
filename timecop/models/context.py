from datetime import datetime
from sqlalchemy import Integer, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from timecop.db.base import Base


class Context(Base):
    """
    Binds a git location to a project or task.

    Project contexts hold the remote URL and have no task_id; task contexts
    hold "<remote>#<branch>".
    """

    __tablename__ = "contexts"
    __table_args__ = (
        UniqueConstraint("project_id", "task_id", "context", name="uq_contexts_project_task_context"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    project_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    task_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True
    )
    context: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    inserted_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
