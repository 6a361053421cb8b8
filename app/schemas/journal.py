"""
Journal entry and analytics schemas.

POST /analyzer/enrich → EnrichRequest → EnrichedJournalResponse
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Rating = Annotated[int, Field(ge=1, le=10)]


class JournalEntry(BaseModel):
    """One day of the journal, as returned by the journal store."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    local_date: date = Field(description="Calendar day of the entry.", examples=["2024-01-01"])
    topics: str = Field(default="", description="Free-text notes for the day.")
    alignment_rating: Rating = Field(
        description="How well the day's work matched the goal (1-10)."
    )
    contentment_rating: Rating = Field(
        description="Subjective satisfaction with the day (1-10)."
    )
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @property
    def karma(self) -> float:
        return (self.alignment_rating + self.contentment_rating) / 2


class UserProfile(BaseModel):
    """Read-only profile fields used to personalise the prompt."""
    goal: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    first_name: Optional[str] = None

    @field_validator("goal", "first_name", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class EnrichRequest(BaseModel):
    """Entries already filtered to [start_date, end_date] by the caller."""
    entries: list[JournalEntry] = Field(default_factory=list)
    start_date: date = Field(examples=["2024-01-01"])
    end_date: date = Field(examples=["2024-01-31"])

    @model_validator(mode="after")
    def check_range(self) -> "EnrichRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class RankedEntryResponse(BaseModel):
    local_date: str
    topics: str
    alignment_rating: int
    contentment_rating: int
    karma: float


class TrendAnalysisResponse(BaseModel):
    direction: str = Field(description='"improving" | "declining" | "stable"')
    change_percentage: float = Field(
        description="Percent change in mean karma, second half vs first half."
    )


class TemporalPatternsResponse(BaseModel):
    best_day_of_week: Optional[str] = None
    most_productive_time: Optional[str] = Field(
        default=None, description='"weekday" | "weekend", only when both occur.'
    )


class AnalyticsResponse(BaseModel):
    entry_count: int
    avg_alignment_rating: float
    avg_contentment_rating: float
    avg_karma: float
    highest_entry: Optional[RankedEntryResponse]
    lowest_entry: Optional[RankedEntryResponse]
    trend_analysis: TrendAnalysisResponse
    temporal_patterns: TemporalPatternsResponse


class DateRangeResponse(BaseModel):
    start: str
    end: str
    label: str = Field(description='Human readable, e.g. "Jan 1, 2024 to Jan 31, 2024".')
    days: int = Field(description="Inclusive number of days in the range.")


class EnrichedJournalResponse(BaseModel):
    date_range: DateRangeResponse
    analytics: AnalyticsResponse
