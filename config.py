from typing import Self

from environs import env
from pydantic import BaseModel, PositiveInt, model_validator

env.read_env()


class BenchmarkConfig(BaseModel):
    """
    Connection target and sizing of one benchmark run.
    Every default can be overridden from the environment or a .env file.
    """

    mongo_uri: str = env("MONGO_URI", "mongodb://localhost:27017")
    database_name: str = env("MONGO_DATABASE", "mongo-experiments")
    collection_name: str = env("MONGO_COLLECTION", "tokens")
    batches: PositiveInt = env.int("BENCHMARK_BATCHES", 1)
    total_documents: PositiveInt = env.int("BENCHMARK_TOTAL_DOCUMENTS", 100_000)
    ttl_index_name: str = env("TTL_INDEX_NAME", "expires_on")
    token_ttl_hours: PositiveInt = env.int("TOKEN_TTL_HOURS", 2)

    @model_validator(mode="after")
    def check_batches(self) -> Self:
        """
        A batch has to hold at least one document.
        """
        if self.batches > self.total_documents:
            raise ValueError("batches must not exceed total_documents")
        return self

    @property
    def batch_size(self) -> int:
        return self.total_documents // self.batches
