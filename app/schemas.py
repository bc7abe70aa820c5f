"""
Request and response schemas.

Request schemas are the declarative validation rules for the API: each
field carries its length / enum / format constraint and pydantic reports
every failing field at once. They operate on plain dicts and know nothing
about the storage tables in ``app.models``.
"""

from datetime import datetime
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel
from typing_extensions import Annotated

TaskStatus = Literal["pending", "in-progress", "completed"]
TaskPriority = Literal["low", "medium", "high"]
NotificationType = Literal["task", "system", "reminder", "update"]
TaskSortField = Literal["createdAt", "updatedAt", "title", "status", "priority"]
SortOrder = Literal["asc", "desc"]

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Auth


class RegisterRequest(BaseModel):
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRead(CamelModel):
    id: str
    name: str
    email: str
    created_at: datetime


class AuthResponse(BaseModel):
    success: bool = True
    user: UserRead
    token: str


class UserResponse(BaseModel):
    success: bool = True
    user: UserRead


# Tasks


class TaskCreate(BaseModel):
    """Schema for creating a task"""

    title: Title
    description: Description | None = None
    status: TaskStatus = "pending"
    priority: TaskPriority = "medium"


class TaskUpdate(BaseModel):
    """Schema for updating a task - all fields optional"""

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None

    @field_validator("title", "status", "priority")
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; only description may be cleared.
        if v is None:
            raise ValueError("Field may not be null")
        return v


class TaskListParams(BaseModel):
    """Query string of `GET /tasks`; unknown parameters are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = Field(default=None, max_length=100)
    sort_by: TaskSortField = Field(default="createdAt", alias="sortBy")
    sort_order: SortOrder = Field(default="desc", alias="sortOrder")


class TaskRead(CamelModel):
    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    user_id: str = Field(serialization_alias="user")
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    success: bool = True
    task: TaskRead


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class TaskListResponse(BaseModel):
    success: bool = True
    count: int
    tasks: list[TaskRead]
    pagination: Pagination


# Notifications


class NotificationData(CamelModel):
    task_id: str | None = None
    due_date: datetime | None = None


class NotificationCreate(BaseModel):
    title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=500)]
    type: NotificationType = "task"
    data: NotificationData | None = None


class NotificationRead(CamelModel):
    id: str
    title: str
    message: str
    type: NotificationType
    read: bool
    data: NotificationData | None = None
    user_id: str = Field(serialization_alias="user")
    created_at: datetime
    updated_at: datetime


class NotificationResponse(BaseModel):
    success: bool = True
    notification: NotificationRead


class NotificationListResponse(BaseModel):
    success: bool = True
    count: int
    notifications: list[NotificationRead]


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class MarkAllReadResponse(MessageResponse):
    modified: int
