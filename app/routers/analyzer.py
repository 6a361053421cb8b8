"""
Analyzer router.

GET  /analyzer/options                    — analysis option catalog
GET  /analyzer/presets                    — smart preset catalog
GET  /analyzer/tones                      — voice tone metadata
GET  /analyzer/honesty-levels             — honesty level metadata
GET  /analyzer/preferences/default        — fresh default preferences
POST /analyzer/preferences/apply-preset   — overlay a preset on preferences
POST /analyzer/preferences/validate       — check preferences before composing
POST /analyzer/preview                    — one-line summary of preferences
POST /analyzer/enrich                     — analytics for a list of entries
POST /analyzer/prompt                     — analytics + composed prompt
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter

from app.core.config import settings
from app.core.errors import (
    InvalidPreferencesError,
    NoEntriesError,
    PresetNotFoundError,
    TooManyEntriesError,
)
from app.schemas.analyzer import (
    HONESTY_LEVELS,
    AnalysisOptionResponse,
    AnalyzerPreferences,
    ApplyPresetRequest,
    ComposePromptRequest,
    ComposePromptResponse,
    HonestyLevelInfoResponse,
    PreviewResponse,
    SmartPresetResponse,
    ValidationResponse,
    VoiceTone,
    VoiceToneInfoResponse,
)
from app.schemas.common import ErrorResponse
from app.schemas.journal import (
    AnalyticsResponse,
    DateRangeResponse,
    EnrichedJournalResponse,
    EnrichRequest,
    JournalEntry,
    RankedEntryResponse,
    TemporalPatternsResponse,
    TrendAnalysisResponse,
)
from app.services.analytics import (
    EnrichedJournalData,
    RankedEntry,
    calculate_days_between,
    enrich_journal_data,
    format_date_range,
)
from app.services.preferences import apply_preset
from app.services.presets import (
    ANALYSIS_OPTIONS,
    SMART_PRESETS,
    default_preferences,
    find_preset,
)
from app.services.prompt_composer import (
    check_honesty_level,
    compose_prompt,
    generate_prompt_preview,
    validate_preferences,
)
from app.services.templates import HONESTY_LEVEL_LABELS, VOICE_TONE_INFO, honesty_band

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyzer", tags=["analyzer"])

_ERRORS = {422: {"model": ErrorResponse, "description": "No entries or invalid input."}}


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _ranked_to_response(r: Optional[RankedEntry]) -> Optional[RankedEntryResponse]:
    if r is None:
        return None
    return RankedEntryResponse(
        local_date=r.entry.local_date.isoformat(),
        topics=r.entry.topics,
        alignment_rating=r.entry.alignment_rating,
        contentment_rating=r.entry.contentment_rating,
        karma=r.karma,
    )


def _enriched_to_response(data: EnrichedJournalData) -> EnrichedJournalResponse:
    a = data.analytics
    return EnrichedJournalResponse(
        date_range=DateRangeResponse(
            start=data.start_date.isoformat(),
            end=data.end_date.isoformat(),
            label=format_date_range(data.start_date, data.end_date),
            days=calculate_days_between(data.start_date, data.end_date),
        ),
        analytics=AnalyticsResponse(
            entry_count=a.entry_count,
            avg_alignment_rating=a.avg_alignment_rating,
            avg_contentment_rating=a.avg_contentment_rating,
            avg_karma=a.avg_karma,
            highest_entry=_ranked_to_response(a.highest_entry),
            lowest_entry=_ranked_to_response(a.lowest_entry),
            trend_analysis=TrendAnalysisResponse(
                direction=a.trend_analysis.direction,
                change_percentage=a.trend_analysis.change_percentage,
            ),
            temporal_patterns=TemporalPatternsResponse(
                best_day_of_week=a.temporal_patterns.best_day_of_week,
                most_productive_time=a.temporal_patterns.most_productive_time,
            ),
        ),
    )


def _enrich_or_raise(
    entries: list[JournalEntry], start_date: date, end_date: date
) -> EnrichedJournalData:
    if len(entries) > settings.MAX_ENTRIES:
        raise TooManyEntriesError(max_entries=settings.MAX_ENTRIES, received=len(entries))
    data = enrich_journal_data(entries, start_date, end_date)
    if data is None:
        raise NoEntriesError(start=start_date.isoformat(), end=end_date.isoformat())
    return data


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------

@router.get(
    "/options",
    response_model=list[AnalysisOptionResponse],
    summary="Analysis option catalog, in prompt order",
)
def list_options():
    return [
        AnalysisOptionResponse(key=o.key.value, label=o.label, description=o.description)
        for o in ANALYSIS_OPTIONS
    ]


@router.get(
    "/presets",
    response_model=list[SmartPresetResponse],
    summary="Smart presets (sparse preference overlays)",
)
def list_presets():
    return [
        SmartPresetResponse(
            name=p.name,
            description=p.description,
            icon=p.icon,
            preferences=p.overrides(),
        )
        for p in SMART_PRESETS
    ]


@router.get(
    "/tones",
    response_model=list[VoiceToneInfoResponse],
    summary="Voice tone labels and previews",
)
def list_tones():
    return [
        VoiceToneInfoResponse(
            tone=tone.value,
            label=VOICE_TONE_INFO[tone].label,
            emoji=VOICE_TONE_INFO[tone].emoji,
            subtitle=VOICE_TONE_INFO[tone].subtitle,
            preview=VOICE_TONE_INFO[tone].preview,
        )
        for tone in VoiceTone
    ]


@router.get(
    "/honesty-levels",
    response_model=list[HonestyLevelInfoResponse],
    summary="Honesty level labels with their colour band",
)
def list_honesty_levels():
    result = []
    for level in HONESTY_LEVELS:
        info = HONESTY_LEVEL_LABELS[level]
        band = honesty_band(level)
        result.append(HonestyLevelInfoResponse(
            level=level,
            label=info.label,
            emoji=info.emoji,
            description=info.description,
            band=band.name,
            color=band.color,
        ))
    return result


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

@router.get(
    "/preferences/default",
    response_model=AnalyzerPreferences,
    summary="Default analyzer preferences",
)
def get_default_preferences():
    return default_preferences()


@router.post(
    "/preferences/apply-preset",
    response_model=AnalyzerPreferences,
    summary="Apply a smart preset to the given preferences",
    responses={404: {"model": ErrorResponse, "description": "Unknown preset name."}},
)
def apply_preset_route(payload: ApplyPresetRequest):
    """
    Overlay the named preset on `preferences`. Only the fields the preset
    defines change; everything else is returned exactly as sent.
    """
    preset = find_preset(payload.preset)
    if preset is None:
        raise PresetNotFoundError(
            name=payload.preset, available=[p.name for p in SMART_PRESETS]
        )
    current = payload.preferences or default_preferences()
    return apply_preset(current, preset)


@router.post(
    "/preferences/validate",
    response_model=ValidationResponse,
    summary="Check preferences before composing a prompt",
)
def validate_preferences_route(payload: AnalyzerPreferences):
    result = validate_preferences(payload)
    return ValidationResponse(valid=result.valid, error=result.error)


@router.post(
    "/preview",
    response_model=PreviewResponse,
    summary="Describe what the given preferences will produce",
    responses=_ERRORS,
)
def preview(payload: AnalyzerPreferences):
    error = check_honesty_level(payload.honesty_level)
    if error:
        raise InvalidPreferencesError(error)
    return PreviewResponse(preview=generate_prompt_preview(payload))


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

@router.post(
    "/enrich",
    response_model=EnrichedJournalResponse,
    summary="Analytics for a set of journal entries",
    responses=_ERRORS,
)
def enrich(payload: EnrichRequest):
    """
    Entries must already be filtered to `[start_date, end_date]`.
    Returns **422 NO_ENTRIES** when the list is empty.
    """
    data = _enrich_or_raise(payload.entries, payload.start_date, payload.end_date)
    return _enriched_to_response(data)


@router.post(
    "/prompt",
    response_model=ComposePromptResponse,
    summary="Compose the analysis prompt",
    responses=_ERRORS,
)
def compose(payload: ComposePromptRequest):
    """
    Validate preferences, analyse the entries and compose the prompt.

    ### Errors
    | Code | When |
    |---|---|
    | `INVALID_PREFERENCES` | honesty outside 1–6 or no analysis option selected |
    | `NO_ENTRIES`          | empty entry list |
    | `TOO_MANY_ENTRIES`    | more than `MAX_ENTRIES` entries |
    """
    preferences = payload.preferences or default_preferences()
    validation = validate_preferences(preferences)
    if not validation.valid:
        raise InvalidPreferencesError(validation.error)

    data = _enrich_or_raise(payload.entries, payload.start_date, payload.end_date)
    prompt = compose_prompt(preferences, data, payload.profile)
    logger.info(
        "Composed prompt: %d entries, tone=%s, %d option(s), %d chars",
        data.analytics.entry_count,
        preferences.voice_tone.value,
        len(preferences.selected_options),
        len(prompt),
    )
    return ComposePromptResponse(prompt=prompt, enriched=_enriched_to_response(data))
