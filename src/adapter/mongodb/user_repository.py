"""MongoDB implementation of UserRepository.

Active tokens live in an embedded ``tokens`` array on the user document;
append and remove go through ``$push``/``$pull`` so they are atomic per user.
"""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb import USERS_COLLECTION_NAME
from domain.model.errors import DuplicateError, StoreUnavailableError
from domain.model.user import TOKEN_USE_AUTH, AuthToken, User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        from adapter.mongodb.indexes import create_index_safe

        try:
            create_index_safe(self.collection, [('email', 1)], 'idx_users_email', unique=True)
            create_index_safe(self.collection, [('tokens.token', 1)], 'idx_users_tokens')
            return True
        except PyMongoError as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            password_hash=doc.get('password_hash'),
            tokens=[AuthToken(token=t['token'], use=t['use']) for t in doc.get('tokens', [])],
        )

    def create(self, email: str, password_hash: str) -> User:
        """Create a new user and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'email': email,
            'password_hash': password_hash,
            'tokens': [],
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError as e:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("Email already registered") from e
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreUnavailableError("Failed to create user") from e

        logger.info("User created", extra={"userId": user_id})
        return self._to_domain(user_doc)

    def _find_one(self, query: dict, context: dict) -> User | None:
        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error("Failed to get user", extra={**context, "error": str(e)})
            raise StoreUnavailableError("Failed to get user") from e
        return self._to_domain(doc) if doc else None

    def get_by_email(self, email: str) -> User | None:
        return self._find_one({'email': email}, {"email": email})

    def get_by_id(self, user_id: str) -> User | None:
        return self._find_one({'_id': user_id}, {"userId": user_id})

    def get_by_token(self, user_id: str, token: str) -> User | None:
        """Find a user by ID and active token in a single query."""
        query = {
            '_id': user_id,
            'tokens': {'$elemMatch': {'token': token, 'use': TOKEN_USE_AUTH}},
        }
        return self._find_one(query, {"userId": user_id})

    def add_token(self, user_id: str, auth_token: AuthToken) -> bool:
        """Append a token to the user's active set."""
        try:
            result = self.collection.update_one(
                {'_id': user_id},
                {
                    '$push': {'tokens': {'token': auth_token.token, 'use': auth_token.use}},
                    '$set': {'updated_at': datetime.now(timezone.utc)},
                },
            )
        except PyMongoError as e:
            logger.error("Failed to add token", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to add token") from e
        return result.matched_count > 0

    def remove_token(self, user_id: str, token: str) -> bool:
        """Remove exactly this token from the user's active set."""
        try:
            result = self.collection.update_one(
                {'_id': user_id, 'tokens.token': token},
                {
                    '$pull': {'tokens': {'token': token}},
                    '$set': {'updated_at': datetime.now(timezone.utc)},
                },
            )
        except PyMongoError as e:
            logger.error("Failed to remove token", extra={"userId": user_id, "error": str(e)})
            raise StoreUnavailableError("Failed to remove token") from e
        if result.matched_count > 0:
            logger.debug("Token removed", extra={"userId": user_id})
        return result.matched_count > 0
