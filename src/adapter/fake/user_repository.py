"""In-memory implementation of UserRepository for testing."""

import uuid
from dataclasses import replace
from datetime import datetime, timezone
from domain.model.errors import DuplicateError
from domain.model.user import AuthToken, User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str) -> User:
        if any(u.email == email for u in self.store.values()):
            raise DuplicateError("Email already registered")

        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)

        user = User(
            id=user_id,
            email=email,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
        )
        self.store[user_id] = user
        return self._copy(user)

    def add_token(self, user_id: str, auth_token: AuthToken) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        user.tokens.append(auth_token)
        user.updated_at = datetime.now(timezone.utc)
        return True

    def remove_token(self, user_id: str, token: str) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False

        remaining = [t for t in user.tokens if t.token != token]
        if len(remaining) == len(user.tokens):
            return False

        user.tokens = remaining
        user.updated_at = datetime.now(timezone.utc)
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return self._copy(user)
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return self._copy(user) if user else None

    def get_by_token(self, user_id: str, token: str) -> User | None:
        user = self.store.get(user_id)
        if not user or not user.has_token(token):
            return None
        return self._copy(user)

    @staticmethod
    def _copy(user: User) -> User:
        """Snapshot so callers cannot mutate stored state, like a DB round-trip."""
        return replace(user, tokens=list(user.tokens))
