"""
Prompt composer — turns analytics, preferences and the user profile into
the final text handed to an external AI assistant.

Section order
-------------
  1. Context framing (name, goal, goal window)
  2. Voice/tone instructions
  3. Honesty instructions
  4. Response-type instructions
  5. Data block: goal, timeframe, entries, key metrics
  6. Selected analysis options, in catalog order
  7. Advanced-settings requests
  8. Output format instructions and closing line

`compose_prompt` is pure and deterministic. It assumes preferences already
passed `validate_preferences` and that enriched data exists; both are the
caller's gate.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from app.schemas.analyzer import (
    HONESTY_LEVELS,
    AnalyzerPreferences,
    FocusArea,
    OutputFormat,
    ResponseType,
)
from app.schemas.journal import UserProfile
from app.services.analytics import (
    EnrichedJournalData,
    TrendDirection,
    calculate_days_between,
    format_date_range,
    format_decimal,
    format_entries_for_prompt,
)
from app.services.presets import ANALYSIS_OPTIONS
from app.services.templates import (
    HONESTY_LEVEL_TEMPLATES,
    PLACEHOLDER,
    RESPONSE_TYPE_TEMPLATES,
    VOICE_TONE_TEMPLATES,
    honesty_band,
)

SECTION_RULE = "═" * 51

DEFAULT_GOAL = "Personal growth and achievement"
DEFAULT_NAME = "friend"

_TREND_EMOJI = {
    TrendDirection.IMPROVING: "📈",
    TrendDirection.DECLINING: "📉",
    TrendDirection.STABLE: "➡️",
}

_FOCUS_DESCRIPTIONS = {
    FocusArea.alignment: "alignment (how well my work matched my goal)",
    FocusArea.contentment: "contentment (how satisfied I felt)",
}

_CLOSING_LINES = {
    ResponseType.action_focused: "Now, analyze my journey and give me the concrete next steps I need.",
    ResponseType.pattern_focused: "Now, analyze my journey and help me understand the patterns behind it.",
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PreferenceValidation:
    valid: bool
    error: Optional[str] = None


def check_honesty_level(level) -> Optional[str]:
    """Error message for an out-of-range honesty level, else None."""
    if isinstance(level, bool) or level not in HONESTY_LEVELS:
        return f"Honesty level must be between 1 and 6 (got {level})."
    return None


def validate_preferences(preferences: AnalyzerPreferences) -> PreferenceValidation:
    """
    Gate run by callers before `compose_prompt`.
    An empty option selection is rejected: the prompt would ask for no analysis.
    """
    error = check_honesty_level(preferences.honesty_level)
    if error:
        return PreferenceValidation(valid=False, error=error)
    if not preferences.selected_options:
        return PreferenceValidation(
            valid=False,
            error="Please select at least one analysis option.",
        )
    return PreferenceValidation(valid=True)


# ---------------------------------------------------------------------------
# Variables
# ---------------------------------------------------------------------------

def _extract_variables(data: EnrichedJournalData, profile: UserProfile) -> dict[str, Optional[str]]:
    analytics = data.analytics
    return {
        "goal": profile.goal or DEFAULT_GOAL,
        "user_name": profile.first_name or DEFAULT_NAME,
        "timeframe": format_date_range(data.start_date, data.end_date),
        "entry_count": str(analytics.entry_count),
        "avg_karma": format_decimal(analytics.avg_karma),
        "avg_alignment": format_decimal(analytics.avg_alignment_rating),
        "avg_contentment": format_decimal(analytics.avg_contentment_rating),
        "trend_direction": analytics.trend_analysis.direction,
        "trend_percentage": format_decimal(abs(analytics.trend_analysis.change_percentage)),
        "best_day": analytics.temporal_patterns.best_day_of_week,
        "productive_time": analytics.temporal_patterns.most_productive_time,
        "highest_karma": (
            format_decimal(analytics.highest_entry.karma) if analytics.highest_entry else None
        ),
        "lowest_karma": (
            format_decimal(analytics.lowest_entry.karma) if analytics.lowest_entry else None
        ),
    }


def interpolate(template: str, variables: dict[str, Optional[str]]) -> str:
    """Fill {{name}} placeholders; unknown or undefined names are left as written."""
    def _sub(match: re.Match) -> str:
        value = variables.get(match.group(1))
        return match.group(0) if value is None else value

    return PLACEHOLDER.sub(_sub, template)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _context_section(profile: UserProfile, goal: str) -> str:
    greeting = f"Hi, I'm {profile.first_name}." if profile.first_name else "Hi!"
    lines = [
        f"{greeting} I keep a daily journal where I rate each day for alignment "
        "(how well my work matched my goal) and contentment (how satisfied I felt), "
        "both from 1 to 10. A day's karma is the average of the two.",
        f"Act as my personal progress analyst. My goal is: {goal}",
    ]
    if profile.start_date and profile.end_date:
        lines.append(
            f"I set this goal for {format_date_range(profile.start_date, profile.end_date)}."
        )
    return "\n".join(lines)


def _metrics_section(data: EnrichedJournalData, preferences: AnalyzerPreferences) -> str:
    analytics = data.analytics
    settings = preferences.advanced_settings
    trend = analytics.trend_analysis
    patterns = analytics.temporal_patterns

    lines = ["KEY METRICS:"]
    if settings.include_karma_analysis:
        lines.append(f"- Average Karma Score: {format_decimal(analytics.avg_karma)}/10")
    if settings.focus_area in (FocusArea.alignment, FocusArea.both):
        lines.append(f"- Average Alignment: {format_decimal(analytics.avg_alignment_rating)}/10")
    if settings.focus_area in (FocusArea.contentment, FocusArea.both):
        lines.append(f"- Average Contentment: {format_decimal(analytics.avg_contentment_rating)}/10")
    lines.append(
        f"- Performance Trend: {trend.direction} {_TREND_EMOJI[trend.direction]} "
        f"({format_decimal(abs(trend.change_percentage))}% change)"
    )
    if patterns.best_day_of_week:
        lines.append(f"- Best Day of Week: {patterns.best_day_of_week}")
    if patterns.most_productive_time:
        lines.append(f"- Most Productive: {patterns.most_productive_time}s")
    return "\n".join(lines)


def _data_section(data: EnrichedJournalData, preferences: AnalyzerPreferences) -> str:
    count = data.analytics.entry_count
    noun = "entry" if count == 1 else "entries"
    return (
        f"RECENT DATA ({count} {noun}, most recent first):\n\n"
        f"{format_entries_for_prompt(data.entries)}\n\n"
        f"{_metrics_section(data, preferences)}"
    )


def _options_section(preferences: AnalyzerPreferences, variables: dict) -> str:
    # Catalog order, never the set's iteration order.
    fragments = [
        interpolate(option.prompt_fragment, variables)
        for option in ANALYSIS_OPTIONS
        if option.key in preferences.selected_options
    ]
    return "PROVIDE THE FOLLOWING ANALYSIS:\n\n" + "\n".join(fragments)


def _advanced_section(data: EnrichedJournalData, preferences: AnalyzerPreferences) -> str:
    analytics = data.analytics
    settings = preferences.advanced_settings
    lines: list[str] = []

    if settings.compare_with_previous:
        trend = analytics.trend_analysis
        lines.append(
            "- Comparison: Compare this period to the previous equivalent time period, "
            "if you have access to historical data. Within this period my karma trend is "
            f"{trend.direction} ({format_decimal(abs(trend.change_percentage))}% change "
            "from the first half to the second). Highlight key differences and progress."
        )

    if settings.include_karma_analysis and analytics.highest_entry and analytics.lowest_entry:
        high, low = analytics.highest_entry, analytics.lowest_entry
        if high is low:
            detail = (
                f"My only entry, {high.entry.local_date.isoformat()}, "
                f"scored {format_decimal(high.karma)}/10."
            )
        else:
            detail = (
                f"My highest-karma day was {high.entry.local_date.isoformat()} "
                f"({format_decimal(high.karma)}/10) and my lowest was "
                f"{low.entry.local_date.isoformat()} ({format_decimal(low.karma)}/10)."
            )
        lines.append(
            "- Karma Analysis: Use karma to judge how balanced my days are between "
            f"progress and wellbeing. {detail} Explain what separated my best days from my worst."
        )

    if settings.focus_area in _FOCUS_DESCRIPTIONS:
        lines.append(
            f"- Focus Area: Emphasize my {_FOCUS_DESCRIPTIONS[settings.focus_area]} "
            "throughout the analysis."
        )

    if not lines:
        return ""
    return "ADDITIONAL REQUESTS:\n" + "\n".join(lines)


def _format_section(preferences: AnalyzerPreferences) -> str:
    if preferences.advanced_settings.output_format == OutputFormat.markdown:
        layout = "- Use clear headings and bullet points"
        syntax = "- Use Markdown formatting"
    else:
        layout = "- Use clear section titles and simple dashes for lists"
        syntax = "- Use plain text only, with no Markdown syntax"
    return "\n".join([
        "FORMAT INSTRUCTIONS:",
        layout,
        "- Be specific and evidence-based",
        "- Reference actual entries and dates when making observations",
        syntax,
        "- Keep it practical and actionable",
        "",
        _CLOSING_LINES[preferences.response_type],
    ])


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

def compose_prompt(
    preferences: AnalyzerPreferences,
    data: EnrichedJournalData,
    profile: Optional[UserProfile] = None,
) -> str:
    """Build the complete prompt text. Same inputs always give the same string."""
    profile = profile or UserProfile()
    variables = _extract_variables(data, profile)
    days = calculate_days_between(data.start_date, data.end_date)

    blocks = [
        _context_section(profile, variables["goal"]),
        VOICE_TONE_TEMPLATES[preferences.voice_tone],
        HONESTY_LEVEL_TEMPLATES[preferences.honesty_level],
        RESPONSE_TYPE_TEMPLATES[preferences.response_type],
        SECTION_RULE,
        f"MY GRAND QUEST: {variables['goal']}\n\n"
        f"TIMEFRAME: {variables['timeframe']} ({days} {'day' if days == 1 else 'days'})",
        SECTION_RULE,
        _data_section(data, preferences),
        SECTION_RULE,
        _options_section(preferences, variables),
    ]
    advanced = _advanced_section(data, preferences)
    if advanced:
        blocks.append(advanced)
    blocks.extend([SECTION_RULE, _format_section(preferences)])

    return "\n\n".join(blocks).strip()


def generate_prompt_preview(preferences: AnalyzerPreferences) -> str:
    """One sentence describing what the chosen settings will produce."""
    band = honesty_band(preferences.honesty_level).name
    focus = (
        "actionable steps"
        if preferences.response_type == ResponseType.action_focused
        else "behavioral patterns"
    )
    count = len(preferences.selected_options)
    noun = "option" if count == 1 else "options"
    return (
        f"This prompt will use a {preferences.voice_tone.value} tone with {band} honesty, "
        f"focused on {focus}. It will include {count} analysis {noun}."
    )
