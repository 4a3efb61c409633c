"""MongoDB implementation of TaskRepository.

The owner id is part of every query predicate, so a task owned by someone
else is indistinguishable from one that does not exist.
"""

from logging import getLogger

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb import TASKS_COLLECTION_NAME
from domain.model.errors import StoreUnavailableError
from domain.model.task import Task

logger = getLogger(__name__)


class MongoTaskRepository:
    def __init__(self, db: Database):
        self.collection = db[TASKS_COLLECTION_NAME]

    # ── indexes ────────────────────────────────────────────────

    def ensure_indexes(self) -> bool:
        """Create indexes for tasks collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('owner', 1), ('created_at', 1)], 'idx_tasks_owner_created_at')
            return True
        except PyMongoError as e:
            logger.error("Failed to create tasks indexes", extra={"error": str(e)})
            return False

    # ── mapping ───────────────────────────────────────────────

    def _to_domain(self, doc: dict) -> Task:
        return Task(
            id=doc['_id'],
            text=doc['text'],
            owner=doc['owner'],
            created_at=doc['created_at'],
            completed=doc.get('completed', False),
            completed_at=doc.get('completed_at'),
        )

    def _to_document(self, task: Task) -> dict:
        return {
            '_id': task.id,
            'text': task.text,
            'completed': task.completed,
            'completed_at': task.completed_at,
            'owner': task.owner,
            'created_at': task.created_at,
        }

    # ── CRUD ──────────────────────────────────────────────────

    def save(self, task: Task) -> Task:
        try:
            self.collection.insert_one(self._to_document(task))
        except PyMongoError as e:
            logger.error("Failed to save task", extra={"owner": task.owner, "error": str(e)})
            raise StoreUnavailableError("Failed to save task") from e
        logger.info("Task saved", extra={"taskId": task.id, "owner": task.owner})
        return task

    def find(self, owner: str) -> list[Task]:
        try:
            docs = list(self.collection.find({'owner': owner}).sort('created_at', 1))
        except PyMongoError as e:
            logger.error("Failed to list tasks", extra={"owner": owner, "error": str(e)})
            raise StoreUnavailableError("Failed to list tasks") from e
        return [self._to_domain(doc) for doc in docs]

    def get(self, task_id: str, owner: str) -> Task | None:
        try:
            doc = self.collection.find_one({'_id': task_id, 'owner': owner})
        except PyMongoError as e:
            logger.error("Failed to get task", extra={"taskId": task_id, "error": str(e)})
            raise StoreUnavailableError("Failed to get task") from e
        return self._to_domain(doc) if doc else None

    def update(self, task_id: str, owner: str, changes: dict) -> Task | None:
        try:
            doc = self.collection.find_one_and_update(
                {'_id': task_id, 'owner': owner},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update task", extra={"taskId": task_id, "error": str(e)})
            raise StoreUnavailableError("Failed to update task") from e
        return self._to_domain(doc) if doc else None

    def delete(self, task_id: str, owner: str) -> Task | None:
        try:
            doc = self.collection.find_one_and_delete({'_id': task_id, 'owner': owner})
        except PyMongoError as e:
            logger.error("Failed to delete task", extra={"taskId": task_id, "error": str(e)})
            raise StoreUnavailableError("Failed to delete task") from e
        return self._to_domain(doc) if doc else None
