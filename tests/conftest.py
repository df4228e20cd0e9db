from types import SimpleNamespace

import pytest
from pymongo.errors import OperationFailure

import main
from config import BenchmarkConfig


class FakeCursor:

    def __init__(self, items, error=None):
        self._items = list(items)
        self._error = error

    def __iter__(self):
        yield from self._items
        if self._error is not None:
            raise self._error

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False


class FakeCollection:
    """In-memory stand-in for the pymongo collection calls the benchmark makes."""

    def __init__(self):
        self.documents = {}
        self.indexes = [{"v": 2, "key": {"_id": 1}, "name": "_id_"}]
        self.calls = []
        self.failing = set()
        self.errors = {}

    def _record(self, operation):
        self.calls.append(operation)
        if operation in self.failing:
            raise OperationFailure(f"{operation} refused")
        if operation in self.errors:
            raise self.errors[operation]

    def list_indexes(self):
        self._record("list_indexes")
        return FakeCursor(self.indexes, self.errors.get("decode"))

    def create_index(self, keys, **kwargs):
        self._record("create_index")
        self.indexes.append({"v": 2, "key": dict(keys), **kwargs})
        return kwargs["name"]

    def insert_many(self, documents):
        self._record("insert_many")
        for document in documents:
            self.documents[document["_id"]] = dict(document)
        return SimpleNamespace(inserted_ids=[d["_id"] for d in documents])

    def delete_many(self, query):
        self._record("delete_many")
        deleted = len(self.documents)
        self.documents.clear()
        return SimpleNamespace(deleted_count=deleted)

    def update_many(self, query, update):
        self._record("update_many")
        for document in self.documents.values():
            document.update(update["$set"])
        return SimpleNamespace(modified_count=len(self.documents))


class FakeClient:

    def __init__(self, collection, failing=()):
        self.collection = collection
        self.failing = set(failing)
        self.closed = False
        self.admin = SimpleNamespace(command=self._command)

    def _command(self, name):
        if "ping" in self.failing:
            raise OperationFailure("server unreachable")
        return {"ok": 1.0}

    def __getitem__(self, name):
        return {"tokens": self.collection}

    def close(self):
        if "close" in self.failing:
            raise OperationFailure("close refused")
        self.closed = True


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def config():
    return BenchmarkConfig(
        mongo_uri="mongodb://fake:27017",
        database_name="mongo-experiments",
        collection_name="tokens",
        batches=1,
        total_documents=50,
    )


@pytest.fixture
def client_factory(collection):
    clients = []

    def factory(uri, failing=()):
        client = FakeClient(collection, failing)
        clients.append(client)
        return client

    factory.clients = clients
    return factory


@pytest.fixture(autouse=True)
def quiet_logfire(monkeypatch):
    monkeypatch.setattr(main, "configure_logging", lambda: None)
