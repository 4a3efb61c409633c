"""Process-wide MongoDB client.

A missing MONGO_URL is a configuration error and is reported once. Any other
connection failure is transient: the caller gets None (surfaced as 503) and
the next call tries again.
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'todo_api')

CLIENT_OPTIONS = {
    'serverSelectionTimeoutMS': 5000,
    'connectTimeoutMS': 5000,
    'socketTimeoutMS': 30000,
    'maxPoolSize': 10,
    'retryWrites': True,
    'retryReads': True,
}

_client: MongoClient | None = None
_missing_url_reported = False


def reset_client():
    """Drop the cached client so the next call reconnects."""
    global _client, _missing_url_reported
    if _client is not None:
        _client.close()
    _client = None
    _missing_url_reported = False


def _ping(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.warning("[MONGODB] Ping failed", extra={"error": str(e)[:200]})
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return a healthy client, reconnecting if the cached one stopped answering.

    Returns:
        MongoDB client, or None while MongoDB is unreachable or unconfigured
    """
    global _client, _missing_url_reported

    if _client is not None:
        if _ping(_client):
            return _client
        _client.close()
        _client = None

    if not MONGO_URL:
        if not _missing_url_reported:
            logger.error("[MONGODB] MONGO_URL not configured.")
            _missing_url_reported = True
        return None

    try:
        client = MongoClient(MONGO_URL, **CLIENT_OPTIONS)
    except PyMongoError as e:
        logger.error("[MONGODB] Invalid connection settings", extra={"error": str(e)[:200]})
        return None

    if not _ping(client):
        client.close()
        return None

    _client = client
    logger.info("[MONGODB] Connected", extra={"database": DATABASE_NAME})
    return client
