"""Task routes. All operations are scoped to the authenticated user.

Endpoints:
- POST /todos: Create a task
- GET /todos: List own tasks
- GET /todos/{id}: Get one task
- PATCH /todos/{id}: Update text and/or completion
- DELETE /todos/{id}: Delete a task

A task owned by another user returns 404, the same as a missing one.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_task_repo
from api.models import (
    TaskCreateRequest,
    TaskEnvelope,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)
from api.security import AuthContext, get_current_user_required
from domain.model.errors import NotFoundError, ValidationError
from port.task_repository import TaskRepository
from services import task_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["todos"])


@router.post("", response_model=TaskResponse)
async def create_todo(
    request: TaskCreateRequest,
    auth: AuthContext = Depends(get_current_user_required),
    repo: TaskRepository = Depends(get_task_repo),
):
    try:
        task = task_service.create_task(repo, auth.user_id, request.text)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TaskResponse.from_domain(task)


@router.get("", response_model=TaskListResponse)
async def list_todos(
    auth: AuthContext = Depends(get_current_user_required),
    repo: TaskRepository = Depends(get_task_repo),
):
    tasks = task_service.list_tasks(repo, auth.user_id)
    return TaskListResponse(todos=[TaskResponse.from_domain(t) for t in tasks])


@router.get("/{task_id}", response_model=TaskEnvelope)
async def get_todo(
    task_id: str,
    auth: AuthContext = Depends(get_current_user_required),
    repo: TaskRepository = Depends(get_task_repo),
):
    try:
        task = task_service.get_task(repo, auth.user_id, task_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskEnvelope(todo=TaskResponse.from_domain(task))


@router.patch("/{task_id}", response_model=TaskEnvelope)
async def update_todo(
    task_id: str,
    request: TaskUpdateRequest,
    auth: AuthContext = Depends(get_current_user_required),
    repo: TaskRepository = Depends(get_task_repo),
):
    try:
        task = task_service.update_task(
            repo,
            auth.user_id,
            task_id,
            text=request.text,
            completed=request.completed,
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TaskEnvelope(todo=TaskResponse.from_domain(task))


@router.delete("/{task_id}", response_model=TaskEnvelope)
async def delete_todo(
    task_id: str,
    auth: AuthContext = Depends(get_current_user_required),
    repo: TaskRepository = Depends(get_task_repo),
):
    try:
        task = task_service.delete_task(repo, auth.user_id, task_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskEnvelope(todo=TaskResponse.from_domain(task))
