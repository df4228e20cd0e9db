from datetime import datetime, timezone
from typing import Annotated, Any, Self

from dateutil.relativedelta import relativedelta as reldelta
from pydantic import AwareDatetime, BaseModel, Field, NonNegativeInt, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Token(BaseModel):
    """
    A synthetic token document.
    Stored as {_id, name, created_at, expires_on}.
    """

    id: Annotated[
        NonNegativeInt,
        Field(serialization_alias="_id")
    ]
    name: str | None = None
    created_at: AwareDatetime = Field(default_factory=utcnow)
    expires_on: AwareDatetime | None = None
    ttl_hours: Annotated[int, Field(exclude=True)] = 2

    @model_validator(mode="after")
    def fill_derived_fields(self) -> Self:
        """
        Derive the name from the id and stamp the expiry moment
        with a fresh clock reading shifted by the token lifetime.
        """
        if self.name is None:
            self.name = f"token_{self.id}"
        if self.expires_on is None:
            self.expires_on = utcnow() + reldelta(hours=self.ttl_hours)
        return self

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class InsertReport(BaseModel):
    """Outcome of the insert phase."""

    records: NonNegativeInt = 0
    batches: NonNegativeInt = 0
    duration: float = 0.0


class CleanupReport(BaseModel):
    """Outcome of the delete-all or update-all phase."""

    experiment: int
    started_at: AwareDatetime
    duration: float
    affected: NonNegativeInt = 0
