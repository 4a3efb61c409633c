import os
from functools import lru_cache

from fastapi import HTTPException

from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.task_repository import MongoTaskRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.task_repository import TaskRepository
from port.user_repository import UserRepository
from services.auth_service import TokenEngine


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_task_repo() -> TaskRepository:
    return MongoTaskRepository(_get_db())


@lru_cache(maxsize=1)
def get_token_engine() -> TokenEngine:
    """Build the process-wide token engine from JWT_SECRET_KEY."""
    secret_key = os.getenv("JWT_SECRET_KEY")
    if not secret_key:
        raise ValueError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )
    return TokenEngine(secret_key)
