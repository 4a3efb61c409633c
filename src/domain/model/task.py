"""Task domain model."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass
class Task:
    """A single task owned by the user who created it."""

    id: str
    text: str
    owner: str
    created_at: datetime
    completed: bool = False
    completed_at: int | None = None

    @classmethod
    def create(cls, text: str, owner: str) -> 'Task':
        """Factory for a new, not yet completed task."""
        return cls(
            id=uuid.uuid4().hex,
            text=text,
            owner=owner,
            created_at=datetime.now(timezone.utc),
        )


def completion_changes(completed: bool) -> dict:
    """Field changes for a completion flag transition.

    completed_at is stamped when the flag becomes true and cleared when false.
    """
    if completed:
        return {'completed': True, 'completed_at': now_millis()}
    return {'completed': False, 'completed_at': None}
