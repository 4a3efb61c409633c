"""Task service — owner-scoped task operations.

Every read and write passes the caller's user id into the repository
predicate. A task owned by someone else and a task that does not exist both
surface as NotFoundError.
"""

import logging

from domain.model.errors import NotFoundError, ValidationError
from domain.model.task import Task, completion_changes
from port.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _clean_text(text: str) -> str:
    text = (text or "").strip()
    if not text:
        raise ValidationError("Task text must not be empty")
    return text


def create_task(repo: TaskRepository, owner: str, text: str) -> Task:
    """Create a task owned by ``owner``.

    Raises:
        ValidationError: empty text
    """
    task = repo.save(Task.create(text=_clean_text(text), owner=owner))
    logger.info("Task created", extra={"taskId": task.id, "owner": owner})
    return task


def list_tasks(repo: TaskRepository, owner: str) -> list[Task]:
    return repo.find(owner)


def get_task(repo: TaskRepository, owner: str, task_id: str) -> Task:
    task = repo.get(task_id, owner)
    if task is None:
        raise NotFoundError("Task not found")
    return task


def update_task(
    repo: TaskRepository,
    owner: str,
    task_id: str,
    text: str | None = None,
    completed: bool | None = None,
) -> Task:
    """Update text and/or completion of an owned task.

    Raises:
        ValidationError: empty text
        NotFoundError: task missing or owned by another user
    """
    changes: dict = {}
    if text is not None:
        changes['text'] = _clean_text(text)
    if completed is not None:
        changes.update(completion_changes(completed))

    if not changes:
        return get_task(repo, owner, task_id)

    task = repo.update(task_id, owner, changes)
    if task is None:
        raise NotFoundError("Task not found")

    logger.info("Task updated", extra={"taskId": task_id, "owner": owner, "fields": sorted(changes)})
    return task


def delete_task(repo: TaskRepository, owner: str, task_id: str) -> Task:
    task = repo.delete(task_id, owner)
    if task is None:
        raise NotFoundError("Task not found")

    logger.info("Task deleted", extra={"taskId": task_id, "owner": owner})
    return task
