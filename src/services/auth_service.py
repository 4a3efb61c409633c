"""Auth service — credentials, bearer tokens, registration and login.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.

A token is only valid while it is both correctly signed and still present in
its owner's active-token set. TokenEngine checks the first half; the second
is a store lookup done by the access guard (``api.security``).
"""

import logging
import uuid
from datetime import datetime, timezone

import bcrypt
from email_validator import EmailNotValidError, validate_email
from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from domain.model.errors import (
    DuplicateError,
    InvalidCredentialsError,
    InvalidTokenError,
    ValidationError,
)
from domain.model.user import TOKEN_USE_AUTH, AuthToken, User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72
JWT_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Re-hash and compare in constant time. A malformed digest never matches."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


class TokenEngine:
    """Mints and verifies signed bearer tokens carrying (subject, use)."""

    def __init__(self, secret_key: str, algorithm: str = JWT_ALGORITHM):
        if not secret_key:
            raise ValueError("secret_key must be a non-empty string")
        self._secret_key = secret_key
        self._algorithm = algorithm

    def issue(self, user_id: str) -> str:
        """Sign a token for ``{sub: user_id, use: "auth"}``.

        Callers must record the result in the user's active-token set;
        use ``issue_token`` for that.
        """
        # jti keeps same-second tokens for one user distinct
        payload = {
            "sub": user_id,
            "use": TOKEN_USE_AUTH,
            "iat": datetime.now(timezone.utc),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str:
        """Return the subject of a correctly signed auth token.

        Does not check the active-token set.

        Raises:
            InvalidTokenError: malformed, tampered, or wrong-use token
        """
        if not isinstance(token, str) or token.count(".") != 2:
            raise InvalidTokenError("Malformed token")

        # Signature must be canonical base64url; the decoder ignores trailing bits
        signature = token.rsplit(".", 1)[1].encode("ascii", errors="replace")
        try:
            if base64url_encode(base64url_decode(signature)) != signature:
                raise InvalidTokenError("Malformed token signature")
        except (ValueError, TypeError) as e:
            raise InvalidTokenError("Malformed token signature") from e

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug("Token verification failed", extra={"error": str(e)})
            raise InvalidTokenError("Token verification failed") from e

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token has no subject")
        if payload.get("use") != TOKEN_USE_AUTH:
            raise InvalidTokenError("Token use is not accepted")
        return user_id


def issue_token(repo: UserRepository, engine: TokenEngine, user_id: str) -> str:
    """Issue a token and append it to the user's active set in one step.

    Raises:
        InvalidCredentialsError: user no longer exists, so nothing was recorded
    """
    token = engine.issue(user_id)
    if not repo.add_token(user_id, AuthToken(token=token, use=TOKEN_USE_AUTH)):
        raise InvalidCredentialsError("Invalid email or password")
    return token


def revoke_token(repo: UserRepository, user_id: str, token: str) -> None:
    """Remove exactly this token from the user's active set. Idempotent."""
    if repo.remove_token(user_id, token):
        logger.info("Token revoked", extra={"userId": user_id})


def normalize_email(email: str) -> str:
    """Canonical form used for both storage and lookup.

    Raises:
        EmailNotValidError: not an email address
    """
    info = validate_email(email.strip(), check_deliverability=False)
    return info.normalized.lower()


def _validate_email(email: str) -> str:
    try:
        return normalize_email(email)
    except EmailNotValidError as e:
        raise ValidationError(f"{email!r} is not a valid email") from e


def _validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    # bcrypt only digests the first 72 bytes
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def register(repo: UserRepository, engine: TokenEngine, email: str, password: str) -> tuple[User, str]:
    """Register a new user and log them in.

    Returns the created User and a freshly issued, recorded token.

    Raises:
        ValidationError: bad email shape, or password too short or too long
        DuplicateError: email already registered
    """
    email = _validate_email(email)
    _validate_password(password)

    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    user = repo.create(email=email, password_hash=hash_password(password))
    token = issue_token(repo, engine, user.id)

    logger.info("User registered", extra={"userId": user.id})
    return user, token


def authenticate(repo: UserRepository, engine: TokenEngine, email: str, password: str) -> tuple[User, str]:
    """Authenticate by email and password and issue a new token.

    Doesn't reveal whether the email exists; no token is issued on failure.

    Raises:
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    try:
        email = normalize_email(email)
    except EmailNotValidError as e:
        raise InvalidCredentialsError("Invalid email or password") from e

    user = repo.get_by_email(email)
    if not user or not user.password_hash or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    token = issue_token(repo, engine, user.id)

    logger.info("User logged in", extra={"userId": user.id})
    return user, token


def logout(repo: UserRepository, user_id: str, token: str) -> None:
    """Revoke only the token presented with this request."""
    revoke_token(repo, user_id, token)
