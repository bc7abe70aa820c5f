import math
from datetime import datetime, timezone

from sqlmodel import col, func, or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.models import Task
from app.schemas import TaskCreate, TaskListParams, TaskUpdate

SORT_COLUMNS = {
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
    "title": Task.title,
    "status": Task.status,
    "priority": Task.priority,
}


class TaskService:
    """
    Task persistence. Every query is scoped to the owning user, so a task
    that belongs to someone else looks exactly like one that does not exist.
    """

    @staticmethod
    async def create_task(user_id: str, task_data: TaskCreate, db: AsyncSession):
        task = Task(**task_data.model_dump(), user_id=user_id)
        db.add(task)
        await db.commit()
        await db.refresh(task)
        return task

    @staticmethod
    async def get_all_tasks(user_id: str, params: TaskListParams, db: AsyncSession):
        """Return ``(tasks, pagination)`` for one page of the user's tasks."""
        filters = [Task.user_id == user_id]
        if params.status:
            filters.append(Task.status == params.status)
        if params.priority:
            filters.append(Task.priority == params.priority)
        if params.search:
            filters.append(
                or_(
                    col(Task.title).icontains(params.search, autoescape=True),
                    col(Task.description).icontains(params.search, autoescape=True),
                )
            )

        sort_column = col(SORT_COLUMNS[params.sort_by])
        order = sort_column.desc() if params.sort_order == "desc" else sort_column.asc()

        query = (
            select(Task)
            .where(*filters)
            .order_by(order, col(Task.id))
            .offset((params.page - 1) * params.limit)
            .limit(params.limit)
        )
        result = await db.exec(query)
        tasks = result.all()

        count_query = select(func.count()).select_from(Task).where(*filters)
        total = (await db.exec(count_query)).one()

        pagination = {
            "current": params.page,
            "pages": math.ceil(total / params.limit),
            "total": total,
        }
        return tasks, pagination

    @staticmethod
    async def get_task(user_id: str, task_id: str, db: AsyncSession):
        query = select(Task).where(Task.id == task_id, Task.user_id == user_id)
        result = await db.exec(query)
        return result.first()

    @staticmethod
    async def update_task(
        user_id: str, task_id: str, task_data: TaskUpdate, db: AsyncSession
    ):
        task = await TaskService.get_task(user_id, task_id, db)
        if not task:
            return None
        update_data = task_data.model_dump(exclude_unset=True)
        task.sqlmodel_update(update_data)
        task.updated_at = datetime.now(timezone.utc)
        db.add(task)
        await db.commit()
        await db.refresh(task)
        return task

    @staticmethod
    async def delete_task(user_id: str, task_id: str, db: AsyncSession):
        task = await TaskService.get_task(user_id, task_id, db)
        if not task:
            return False
        await db.delete(task)
        await db.commit()
        return True
