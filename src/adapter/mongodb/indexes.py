"""MongoDB index management used at app startup.

Each MongoXxxRepository declares its indexes through create_index_safe, which
replaces a stale index whose name or key spec no longer matches.
"""

from logging import getLogger

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import OperationFailure

logger = getLogger(__name__)


def _find_conflicting(collection: Collection, keys: list, name: str) -> str | None:
    """Name of an existing index that clashes with (keys, name), if any.

    A clash is the same name over different keys, or the same keys under a
    different name.
    """
    wanted = dict(keys)
    for idx_name, idx_info in collection.index_information().items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == name
        same_keys = dict(idx_info.get('key', [])) == wanted
        if same_name != same_keys:
            return idx_name
    return None


def create_index_safe(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, dropping and recreating a conflicting one."""
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except OperationFailure as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise

    stale = _find_conflicting(collection, keys, name)
    if stale is None:
        logger.error("Failed to resolve index conflict", extra={"index": name})
        return False

    logger.warning("Dropping conflicting index", extra={"index": stale, "replacement": name})
    collection.drop_index(stale)
    collection.create_index(keys, name=name, **kwargs)
    return True


def ensure_all_indexes(db: Database) -> bool:
    """Ensure indexes for all collections."""
    from adapter.mongodb.task_repository import MongoTaskRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoTaskRepository(db).ensure_indexes(),
    ]
    return all(results)
