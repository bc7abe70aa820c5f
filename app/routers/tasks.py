from fastapi import APIRouter, Query, status
from typing_extensions import Annotated

from app.core.errors import NotFound
from app.dependencies import CurrentUser, DbSession
from app.schemas import (
    MessageResponse,
    Pagination,
    TaskCreate,
    TaskListParams,
    TaskListResponse,
    TaskRead,
    TaskResponse,
    TaskUpdate,
)
from app.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
async def get_tasks(
    user: CurrentUser,
    db: DbSession,
    params: Annotated[TaskListParams, Query()],
):
    """List the authenticated user's tasks"""
    tasks, pagination = await TaskService.get_all_tasks(user.id, params, db)
    return TaskListResponse(
        count=len(tasks),
        tasks=[TaskRead.model_validate(task) for task in tasks],
        pagination=Pagination(**pagination),
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, user: CurrentUser, db: DbSession):
    """Get a specific task by ID"""
    task = await TaskService.get_task(user.id, task_id, db)
    if not task:
        raise NotFound("Task")
    return TaskResponse(task=TaskRead.model_validate(task))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_data: TaskCreate, user: CurrentUser, db: DbSession):
    """Create a new task"""
    task = await TaskService.create_task(user.id, task_data, db)
    return TaskResponse(task=TaskRead.model_validate(task))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str, task_data: TaskUpdate, user: CurrentUser, db: DbSession
):
    task = await TaskService.update_task(user.id, task_id, task_data, db)
    if not task:
        raise NotFound("Task")
    return TaskResponse(task=TaskRead.model_validate(task))


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: str, user: CurrentUser, db: DbSession):
    """Delete a task"""
    result = await TaskService.delete_task(user.id, task_id, db)
    if not result:
        raise NotFound("Task")
    return MessageResponse(message="Task deleted successfully")
