import argparse
import sys
import time
from collections.abc import Callable, Sequence
from enum import IntEnum

import logfire
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from batches import insert_records
from config import BenchmarkConfig
from database import connect, disconnect, get_collection
from errors import BenchmarkError, DeleteError, DisconnectError, UpdateError
from indexes import manage_index
from schemas import CleanupReport, InsertReport, utcnow


class Experiment(IntEnum):
    DELETE_ALL = 1
    UPDATE_ALL = 2


def run_cleanup(collection: Collection, experiment: Experiment) -> CleanupReport:
    """
    Remove the inserted documents right away (DELETE_ALL) or hand them
    over to the TTL monitor by expiring them now (UPDATE_ALL).
    """
    started_at = utcnow()
    start = time.perf_counter()
    with logfire.span("cleanup {experiment}", experiment=experiment.name):
        if experiment is Experiment.DELETE_ALL:
            try:
                result = collection.delete_many({})
            except PyMongoError as exc:
                raise DeleteError(f"delete_many failed: {exc}") from exc
            affected = result.deleted_count
        else:
            try:
                result = collection.update_many(
                    {}, {"$set": {"expires_on": utcnow()}}
                )
            except PyMongoError as exc:
                raise UpdateError(f"update_many failed: {exc}") from exc
            affected = result.modified_count

    return CleanupReport(
        experiment=int(experiment),
        started_at=started_at,
        duration=time.perf_counter() - start,
        affected=affected
    )


def run(
    experiment: int,
    config: BenchmarkConfig,
    client_factory: Callable[..., MongoClient] = MongoClient
) -> tuple[InsertReport | None, CleanupReport | None]:
    client = connect(config, client_factory)
    try:
        collection = get_collection(client, config)
        manage_index(collection, config.ttl_index_name)

        if experiment in (Experiment.DELETE_ALL, Experiment.UPDATE_ALL):
            inserted = insert_records(collection, config)
            print(f"inserted {inserted.records} records in {inserted.duration}")

            cleaned = run_cleanup(collection, Experiment(experiment))
            print(f"Deleted exp={cleaned.experiment}, time taken {cleaned.duration}")
        else:
            logfire.info("experiment {experiment} not recognized, stopping", experiment=experiment)
            inserted = cleaned = None
    except Exception:
        try:
            disconnect(client)
        except DisconnectError as exc:
            logfire.warn("{error}", error=str(exc))
        raise

    disconnect(client)
    return inserted, cleaned


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Time bulk inserts followed by a delete-all or an update-all "
                    "of documents carrying a TTL index."
    )
    parser.add_argument(
        "--exp", "-Exp",
        dest="exp",
        type=int,
        default=Experiment.UPDATE_ALL.value,
        help="which experiment to run: 1 deletes, 2 expires (default), "
             "anything else only checks the index"
    )
    return parser.parse_args(argv)


def configure_logging() -> None:
    """
    Keep logs and spans on stderr so stdout carries only the result lines.
    """
    logfire.configure(
        send_to_logfire="if-token-present",
        console=logfire.ConsoleOptions(output=sys.stderr)
    )
    logfire.instrument_pymongo()


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging()

    try:
        run(args.exp, BenchmarkConfig())
    except BenchmarkError as exc:
        logfire.error("benchmark failed: {error}", error=str(exc))
        sys.exit(1)


if __name__ == "__main__":
    main()
