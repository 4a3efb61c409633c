from dataclasses import dataclass, field
from datetime import datetime

TOKEN_USE_AUTH = 'auth'


@dataclass(frozen=True)
class AuthToken:
    """A bearer token recorded in a user's active-token set."""
    token: str
    use: str = TOKEN_USE_AUTH


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    email: str
    created_at: datetime
    updated_at: datetime
    password_hash: str | None = None
    tokens: list[AuthToken] = field(default_factory=list)

    def has_token(self, token: str, use: str = TOKEN_USE_AUTH) -> bool:
        return any(t.token == token and t.use == use for t in self.tokens)
