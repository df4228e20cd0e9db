import time
from collections.abc import Iterator

import logfire
from bson.errors import InvalidDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config import BenchmarkConfig
from errors import InsertError
from schemas import InsertReport, Token


def get_batch(offset: int, batch_size: int, ttl_hours: int = 2) -> list[Token]:
    return [
        Token(id=offset + j, ttl_hours=ttl_hours)
        for j in range(batch_size)
    ]


def iter_batches(
    total_documents: int,
    batches: int,
    ttl_hours: int = 2
) -> Iterator[tuple[int, list[Token]]]:
    """
    Yield (offset, tokens) pairs covering `total_documents`.

    When the total is not a multiple of `batches` the last batch is
    still `total_documents // batches` long and runs past the total.
    """
    batch_size = total_documents // batches
    for offset in range(0, total_documents, batch_size):
        yield offset, get_batch(offset, batch_size, ttl_hours)


def insert_records(collection: Collection, config: BenchmarkConfig) -> InsertReport:
    """
    Insert every batch and sum the durations of the insert calls alone,
    leaving out the time spent building documents.
    """
    report = InsertReport()
    batches = iter_batches(
        config.total_documents, config.batches, config.token_ttl_hours
    )
    for offset, batch in batches:
        documents = [token.to_document() for token in batch]
        with logfire.span("insert batch at {offset}", offset=offset, size=len(documents)):
            start = time.perf_counter()
            try:
                collection.insert_many(documents)
            except (InvalidDocument, PyMongoError) as exc:
                raise InsertError(f"batch at offset {offset} failed: {exc}") from exc
            report.duration += time.perf_counter() - start
        report.records += len(documents)
        report.batches += 1
    return report
