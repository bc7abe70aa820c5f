from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Index
from sqlmodel import Column, Field, SQLModel


def get_utc_now():
    """Helper function to get current UTC time with timezone"""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid4().hex


class TimestampMixin(SQLModel):
    created_at: datetime = Field(
        default_factory=get_utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=get_utc_now,
        sa_type=DateTime(timezone=True),
        nullable=False,
    )


class User(TimestampMixin, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(max_length=50)
    email: str = Field(max_length=254, unique=True, index=True)
    password_hash: str


class Task(TimestampMixin, table=True):
    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_user_id_created_at", "user_id", "created_at"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", max_length=32)
    title: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=500)
    status: str = Field(default="pending", max_length=20)
    priority: str = Field(default="medium", max_length=10)


class Notification(TimestampMixin, table=True):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_id_read_created_at", "user_id", "read", "created_at"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    user_id: str = Field(foreign_key="users.id", max_length=32)
    title: str = Field(max_length=100)
    message: str = Field(max_length=500)
    type: str = Field(default="task", max_length=20)
    read: bool = Field(default=False)
    # {"taskId": str | None, "dueDate": iso-8601 str | None}
    data: dict | None = Field(default=None, sa_column=Column(JSON, nullable=True))
