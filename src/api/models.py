"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from domain.model.task import Task
from domain.model.user import User


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: str = Field(..., max_length=254)
    password: str


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: str
    password: str


class UserResponse(BaseModel):
    """Public user fields. Never carries the digest or tokens."""
    id: str
    email: str

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email)


class TaskCreateRequest(BaseModel):
    text: str = Field(..., max_length=1000)


class TaskUpdateRequest(BaseModel):
    """Only text and completed are writable; other fields are ignored."""
    text: Optional[str] = Field(None, max_length=1000)
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    id: str
    text: str
    completed: bool
    completed_at: Optional[int] = Field(None, description="Completion time in epoch milliseconds")
    owner: str
    created_at: datetime

    @classmethod
    def from_domain(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            text=task.text,
            completed=task.completed,
            completed_at=task.completed_at,
            owner=task.owner,
            created_at=task.created_at,
        )


class TaskListResponse(BaseModel):
    todos: list[TaskResponse]


class TaskEnvelope(BaseModel):
    todo: TaskResponse
