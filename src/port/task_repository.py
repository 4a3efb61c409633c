"""Port for task data access.

Every lookup and mutation takes the owner id as part of its predicate.
"""

from typing import Protocol

from domain.model.task import Task


class TaskRepository(Protocol):
    """Protocol for owner-scoped task data access."""

    def save(self, task: Task) -> Task:
        """Insert a new task and return it."""
        ...

    def find(self, owner: str) -> list[Task]:
        """Get all tasks owned by this user, oldest first."""
        ...

    def get(self, task_id: str, owner: str) -> Task | None:
        """Get a task matching both id and owner, or None."""
        ...

    def update(self, task_id: str, owner: str, changes: dict) -> Task | None:
        """Apply field changes to a task matching id and owner. Return the updated task or None."""
        ...

    def delete(self, task_id: str, owner: str) -> Task | None:
        """Delete a task matching id and owner. Return the removed task or None."""
        ...
