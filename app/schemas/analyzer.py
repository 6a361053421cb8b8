"""
Analyzer preference schemas and the enumerations every template table is
keyed by.

POST /analyzer/prompt                    → ComposePromptRequest → ComposePromptResponse
POST /analyzer/preferences/validate      → AnalyzerPreferences  → ValidationResponse
POST /analyzer/preferences/apply-preset  → ApplyPresetRequest   → AnalyzerPreferences
POST /analyzer/preview                   → AnalyzerPreferences  → PreviewResponse
"""
from __future__ import annotations

import enum
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, model_validator

from app.schemas.journal import EnrichedJournalResponse, JournalEntry, UserProfile


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class VoiceTone(str, enum.Enum):
    professional = "professional"
    friendly = "friendly"
    motivational = "motivational"
    sage = "sage"
    quirky = "quirky"


class ResponseType(str, enum.Enum):
    action_focused = "action-focused"
    pattern_focused = "pattern-focused"


class AnalysisOptionKey(str, enum.Enum):
    # Declaration order is the catalog order used when assembling prompts.
    key_themes = "key-themes"
    progress_analysis = "progress-analysis"
    concrete_tasks = "concrete-tasks"
    week_strategy = "week-strategy"
    resources = "resources"
    energy_trends = "energy-trends"
    time_management = "time-management"
    blockers = "blockers"


class FocusArea(str, enum.Enum):
    alignment = "alignment"
    contentment = "contentment"
    both = "both"


class OutputFormat(str, enum.Enum):
    markdown = "markdown"
    plain = "plain"


HONESTY_LEVELS = (1, 2, 3, 4, 5, 6)


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

class AdvancedSettings(BaseModel):
    compare_with_previous: bool
    include_karma_analysis: bool
    focus_area: FocusArea
    output_format: OutputFormat


class AnalyzerPreferences(BaseModel):
    """
    Stylistic configuration for one analysis session.

    `honesty_level` is range-checked by `validate_preferences`, not here, so
    an out-of-range value reaches the caller's validation gate intact.
    """
    voice_tone: VoiceTone
    honesty_level: int
    response_type: ResponseType
    selected_options: set[AnalysisOptionKey]
    advanced_settings: AdvancedSettings

    @field_serializer("selected_options")
    def serialize_options(self, options: set[AnalysisOptionKey]) -> list[str]:
        return [key.value for key in AnalysisOptionKey if key in options]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class ComposePromptRequest(BaseModel):
    """Everything the composer needs; entries are pre-filtered by the caller."""
    entries: list[JournalEntry] = Field(default_factory=list)
    start_date: date = Field(examples=["2024-01-01"])
    end_date: date = Field(examples=["2024-01-31"])
    preferences: Optional[AnalyzerPreferences] = Field(
        default=None,
        description="Omit to use the default preferences.",
    )
    profile: UserProfile = Field(default_factory=UserProfile)

    @model_validator(mode="after")
    def check_range(self) -> "ComposePromptRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ApplyPresetRequest(BaseModel):
    preset: str = Field(examples=["Deep Dive"])
    preferences: Optional[AnalyzerPreferences] = Field(
        default=None,
        description="Current preferences to overlay. Omit to start from defaults.",
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class ValidationResponse(BaseModel):
    valid: bool
    error: Optional[str] = None


class PreviewResponse(BaseModel):
    preview: str


class ComposePromptResponse(BaseModel):
    prompt: str
    enriched: EnrichedJournalResponse


class AnalysisOptionResponse(BaseModel):
    key: str
    label: str
    description: str


class SmartPresetResponse(BaseModel):
    name: str
    description: str
    icon: str
    preferences: dict = Field(description="Only the fields this preset overrides.")


class VoiceToneInfoResponse(BaseModel):
    tone: str
    label: str
    emoji: str
    subtitle: str
    preview: str


class HonestyLevelInfoResponse(BaseModel):
    level: int
    label: str
    emoji: str
    description: str
    band: str = Field(description='"gentle" | "moderate" | "direct"')
    color: str = Field(description='"green" | "yellow" | "red"')
