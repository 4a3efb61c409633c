"""In-memory implementation of TaskRepository for testing."""

from dataclasses import replace

from domain.model.task import Task


class FakeTaskRepository:
    def __init__(self):
        self.store: dict[str, Task] = {}

    def _owned(self, task_id: str, owner: str) -> Task | None:
        task = self.store.get(task_id)
        if task is None or task.owner != owner:
            return None
        return task

    # ── write operations ─────────────────────────────────────

    def save(self, task: Task) -> Task:
        self.store[task.id] = replace(task)
        return task

    def update(self, task_id: str, owner: str, changes: dict) -> Task | None:
        task = self._owned(task_id, owner)
        if task is None:
            return None
        updated = replace(task, **changes)
        self.store[task_id] = updated
        return replace(updated)

    def delete(self, task_id: str, owner: str) -> Task | None:
        if self._owned(task_id, owner) is None:
            return None
        return self.store.pop(task_id)

    # ── read operations ──────────────────────────────────────

    def find(self, owner: str) -> list[Task]:
        tasks = [t for t in self.store.values() if t.owner == owner]
        return [replace(t) for t in sorted(tasks, key=lambda t: t.created_at)]

    def get(self, task_id: str, owner: str) -> Task | None:
        task = self._owned(task_id, owner)
        return replace(task) if task else None
