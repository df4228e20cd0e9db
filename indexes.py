import logfire
from bson.errors import BSONError
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from errors import IndexCreateError, IndexDecodeError, IndexListError

EXPIRE_INDEX = "expires_on"
EXPIRE_FIELD = "expires_on"


def index_exists(collection: Collection, name: str) -> bool:
    try:
        cursor = collection.list_indexes()
    except PyMongoError as exc:
        raise IndexListError(f"cannot list indexes: {exc}") from exc

    with cursor:
        try:
            for index in cursor:
                if index.get("name") == name:
                    return True
        except BSONError as exc:
            raise IndexDecodeError(f"unreadable index descriptor: {exc}") from exc
        except PyMongoError as exc:
            raise IndexListError(f"cannot list indexes: {exc}") from exc
    return False


def manage_index(
    collection: Collection,
    name: str = EXPIRE_INDEX,
    field: str = EXPIRE_FIELD
) -> bool:
    """
    Ensure a TTL index expiring documents at the exact moment stored
    in `field` exists. Returns True when the index had to be created.
    """
    with logfire.span("manage TTL index {name}", name=name):
        if index_exists(collection, name):
            print("TTL index exists.")
            return False

        try:
            collection.create_index(
                [(field, ASCENDING)],
                name=name,
                expireAfterSeconds=0
            )
        except PyMongoError as exc:
            raise IndexCreateError(f"cannot create index {name}: {exc}") from exc

        print("TTL index created.")
        return True
