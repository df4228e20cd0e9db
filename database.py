from collections.abc import Callable

import logfire
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config import BenchmarkConfig
from errors import ConnectError, DisconnectError


def connect(
    config: BenchmarkConfig,
    client_factory: Callable[..., MongoClient] = MongoClient
) -> MongoClient:
    """
    Open a client and make sure the server answers.
    MongoClient connects lazily, hence the ping.
    """
    try:
        client = client_factory(config.mongo_uri)
        client.admin.command("ping")
    except PyMongoError as exc:
        raise ConnectError(f"cannot connect to {config.mongo_uri}: {exc}") from exc
    logfire.info("connected to {uri}", uri=config.mongo_uri)
    return client


def get_collection(client: MongoClient, config: BenchmarkConfig) -> Collection:
    return client[config.database_name][config.collection_name]


def disconnect(client: MongoClient) -> None:
    try:
        client.close()
    except PyMongoError as exc:
        raise DisconnectError(f"cannot close the client: {exc}") from exc
