from typing import Protocol
from domain.model.user import AuthToken, User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    The active-token set is keyed by user id and supports atomic append and
    atomic remove-by-value, so concurrent logins never lose entries.
    """
    def create(self, email: str, password_hash: str) -> User:
        """Create a new user. Raise DuplicateError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def get_by_token(self, user_id: str, token: str) -> User | None:
        """Find a user by ID whose active-token set contains this exact token."""
        ...

    def add_token(self, user_id: str, auth_token: AuthToken) -> bool:
        """Append a token to the user's active set. Return False if the user is missing."""
        ...

    def remove_token(self, user_id: str, token: str) -> bool:
        """Remove exactly this token from the user's active set. Return True if one was removed."""
        ...
