"""
Record data models.

An ItemRecord is the unit of work tracked through the classification
lifecycle. Content fields (id, source, content, created_at) are write-once:
RecordPatch only carries lifecycle fields.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sentiment_pipeline.models.enums import RecordStatus, Sentiment


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class PostAnalysis(BaseModel):
    """Structured classification payload for a single post."""

    model_config = ConfigDict(extra="ignore")

    sentiment: Sentiment = Field(default=Sentiment.NEUTRAL, description="Sentiment label")
    summary: str = Field(..., min_length=1, description="One-sentence summary")

    @field_validator("sentiment", mode="before")
    @classmethod
    def normalize_sentiment(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


FALLBACK_ANALYSIS = PostAnalysis(sentiment=Sentiment.NEUTRAL, summary="Analysis unavailable")


class NewRecord(BaseModel):
    """Normalized candidate ready to be stored as a pending record."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., min_length=1, description="Origin label, e.g. r/aviation")
    content: str = Field(..., min_length=1, description="Normalized text body")


class ItemRecord(BaseModel):
    """
    A stored post tracked through the classification lifecycle.

    Status/payload correlation:
        completed  -> analysis and analyzed_at present, error_message null
        failed     -> error_message present
        pending    -> analysis and error_message null
        processing -> analysis and error_message null
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    source: str
    content: str = Field(..., min_length=1)
    status: RecordStatus = RecordStatus.PENDING
    sentiment: Optional[Sentiment] = None
    analysis: Optional[PostAnalysis] = None
    error_message: Optional[str] = None
    analyzed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def check_status_payload(self) -> "ItemRecord":
        if self.status == RecordStatus.COMPLETED:
            if self.analysis is None or self.analyzed_at is None:
                raise ValueError("completed record requires analysis and analyzed_at")
            if self.error_message is not None:
                raise ValueError("completed record must not carry error_message")
        elif self.status == RecordStatus.FAILED:
            if not self.error_message:
                raise ValueError("failed record requires error_message")
        elif self.analysis is not None or self.error_message is not None:
            raise ValueError(f"{self.status.value} record must not carry analysis or error_message")
        return self

    @classmethod
    def from_new(cls, new_record: NewRecord) -> "ItemRecord":
        """Create a pending record from a normalized candidate."""
        return cls(source=new_record.source, content=new_record.content)

    def apply(self, patch: "RecordPatch") -> "ItemRecord":
        """Return a validated copy of this record with the patch applied."""
        data = self.model_dump()
        data.update(patch.changes())
        return ItemRecord.model_validate(data)


class RecordPatch(BaseModel):
    """
    Partial update of lifecycle fields.

    Only explicitly set fields are applied, so a field set to None clears it
    while an unset field is left untouched.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: Optional[RecordStatus] = None
    sentiment: Optional[Sentiment] = None
    analysis: Optional[PostAnalysis] = None
    error_message: Optional[str] = None
    analyzed_at: Optional[datetime] = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set on this patch."""
        return {name: getattr(self, name) for name in self.model_fields_set}
