"""
Prompt template tables, keyed by the analyzer enumerations.

Every table must cover every member of its key type. Coverage is checked
once at import time (`check_template_coverage`); a missing entry is a
startup/test failure, never a silent gap in a generated prompt.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from app.schemas.analyzer import HONESTY_LEVELS, ResponseType, VoiceTone
from app.services.presets import ANALYSIS_OPTIONS


PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

# Names a {{placeholder}} in an option fragment may refer to.
PROMPT_VARIABLES = frozenset({
    "goal",
    "user_name",
    "timeframe",
    "entry_count",
    "avg_karma",
    "avg_alignment",
    "avg_contentment",
    "trend_direction",
    "trend_percentage",
    "best_day",
    "productive_time",
    "highest_karma",
    "lowest_karma",
})


# ---------------------------------------------------------------------------
# Voice / tone
# ---------------------------------------------------------------------------

VOICE_TONE_TEMPLATES: dict[VoiceTone, str] = {
    VoiceTone.professional: (
        "You are a professional productivity consultant analyzing performance data.\n"
        "Provide structured, evidence-based insights using business terminology.\n"
        "Maintain a formal yet accessible tone. Focus on metrics and measurable outcomes."
    ),
    VoiceTone.friendly: (
        "You're a supportive friend helping me reflect on my progress.\n"
        "Keep it conversational and warm. Celebrate wins, and gently explore challenges.\n"
        "Use 'we' language and make me feel like we're in this together."
    ),
    VoiceTone.motivational: (
        "You're my hype-up coach analyzing my performance!\n"
        "Bring the energy and enthusiasm. Turn data into fuel for action.\n"
        "Use powerful, energizing language. Make me want to crush my goals!"
    ),
    VoiceTone.sage: (
        "You are a wise mentor reflecting on my journey with me.\n"
        "Speak thoughtfully and philosophically. Connect daily actions to larger meaning.\n"
        "Help me see patterns I might miss. Guide rather than direct."
    ),
    VoiceTone.quirky: (
        "You're a slightly eccentric data wizard making sense of my chaos.\n"
        "Be playful with metaphors and unexpected insights.\n"
        "Make analysis entertaining without losing substance."
    ),
}


@dataclass(frozen=True)
class VoiceToneInfo:
    label: str
    emoji: str
    subtitle: str
    preview: str


VOICE_TONE_INFO: dict[VoiceTone, VoiceToneInfo] = {
    VoiceTone.professional: VoiceToneInfo(
        label="Professional",
        emoji="📊",
        subtitle="Formal, structured, business-like",
        preview='"Based on the metrics, there are three key areas requiring immediate attention..."',
    ),
    VoiceTone.friendly: VoiceToneInfo(
        label="Friendly",
        emoji="🤗",
        subtitle="Warm, conversational, supportive",
        preview="\"Hey! Let's take a look at how things are going. "
                "You've made some great progress here...\"",
    ),
    VoiceTone.motivational: VoiceToneInfo(
        label="Motivational",
        emoji="🔥",
        subtitle="Energetic, inspiring, pump-you-up",
        preview="\"Alright champion, let's break down these wins and turn them into momentum!\"",
    ),
    VoiceTone.sage: VoiceToneInfo(
        label="Sage",
        emoji="🧙",
        subtitle="Wise, reflective, philosophical",
        preview='"Consider the patterns emerging from your journey. '
                'What do they reveal about your path?"',
    ),
    VoiceTone.quirky: VoiceToneInfo(
        label="Quirky",
        emoji="🎭",
        subtitle="Playful, unexpected, creative",
        preview='"Picture your productivity as a jazz improvisation. '
                'Some notes hit, others... well..."',
    ),
}


# ---------------------------------------------------------------------------
# Honesty level (1 = gentlest, 6 = bluntest)
# ---------------------------------------------------------------------------

HONESTY_LEVEL_TEMPLATES: dict[int, str] = {
    1: (
        "Frame feedback positively. Focus on strengths and potential.\n"
        "When addressing challenges, emphasize learning and growth opportunities.\n"
        "Use 'could' and 'might' rather than 'should' and 'must'."
    ),
    2: (
        "Be gentle but honest. Acknowledge difficulties while maintaining an encouraging tone.\n"
        "Focus on what's working well, and gently suggest areas for improvement."
    ),
    3: (
        "Provide balanced feedback acknowledging both strengths and areas for improvement.\n"
        "Be constructive and specific. Offer perspective without sugar-coating."
    ),
    4: (
        "Tell it like it is. Call out patterns clearly, including unproductive ones.\n"
        "Be direct about what's working and what isn't. Prioritize truth over comfort."
    ),
    5: (
        "Give me straight talk. No hedging, no maybe's.\n"
        "If I'm spinning my wheels, say so. If I'm crushing it, say so.\n"
        "Be blunt but not cruel. I can handle reality."
    ),
    6: (
        "I want tough love and hard truths. Hold nothing back.\n"
        "Challenge my excuses and call out self-deception.\n"
        "If something needs to change dramatically, make that crystal clear.\n"
        "I'm here for growth, not comfort."
    ),
}


@dataclass(frozen=True)
class HonestyLevelInfo:
    label: str
    emoji: str
    description: str


HONESTY_LEVEL_LABELS: dict[int, HonestyLevelInfo] = {
    1: HonestyLevelInfo("Gentle", "🌸", "Supportive and encouraging, focuses on positives"),
    2: HonestyLevelInfo("Kind", "😊", "Warm feedback with gentle suggestions"),
    3: HonestyLevelInfo("Balanced", "⚖️", "Fair perspective with constructive feedback"),
    4: HonestyLevelInfo("Honest", "💬", "Straightforward with clear areas for improvement"),
    5: HonestyLevelInfo("Direct", "🎯", "Pulls no punches, calls out what needs fixing"),
    6: HonestyLevelInfo("Brutal", "🔥", "Unfiltered reality check, tough love approach"),
}


@dataclass(frozen=True)
class HonestyBand:
    name: str
    color: str


GENTLE_BAND   = HonestyBand("gentle", "green")
MODERATE_BAND = HonestyBand("moderate", "yellow")
DIRECT_BAND   = HonestyBand("direct", "red")


def honesty_band(level: int) -> HonestyBand:
    """1–2 gentle, 3–4 moderate, 5–6 direct."""
    if level not in HONESTY_LEVELS:
        raise ValueError(f"Honesty level must be between 1 and 6, got {level}")
    if level <= 2:
        return GENTLE_BAND
    if level <= 4:
        return MODERATE_BAND
    return DIRECT_BAND


# ---------------------------------------------------------------------------
# Response type
# ---------------------------------------------------------------------------

RESPONSE_TYPE_TEMPLATES: dict[ResponseType, str] = {
    ResponseType.action_focused: (
        "Prioritize actionable insights and concrete next steps.\n"
        "Every observation should lead to a specific action I can take.\n"
        "Be tactical and practical. What do I do next?"
    ),
    ResponseType.pattern_focused: (
        "Focus on behavioral patterns, recurring themes, and self-awareness insights.\n"
        "Help me see the bigger picture. What am I not seeing about myself?\n"
        "Accountability over action. Understanding over urgency."
    ),
}


# ---------------------------------------------------------------------------
# Coverage check
# ---------------------------------------------------------------------------

def _missing(table: dict, keys) -> list[str]:
    return [str(getattr(k, "value", k)) for k in keys if k not in table]


def _unknown_placeholders(options) -> dict[str, list[str]]:
    unknown = {}
    for option in options:
        names = sorted(set(PLACEHOLDER.findall(option.prompt_fragment)) - PROMPT_VARIABLES)
        if names:
            unknown[option.key.value] = names
    return unknown


def check_template_coverage() -> None:
    """Raise RuntimeError naming every key a template table lacks.

    Option fragments are scanned too: a {{name}} outside PROMPT_VARIABLES
    would otherwise reach the composed prompt unfilled.
    """
    gaps = {
        "VOICE_TONE_TEMPLATES": _missing(VOICE_TONE_TEMPLATES, VoiceTone),
        "VOICE_TONE_INFO": _missing(VOICE_TONE_INFO, VoiceTone),
        "HONESTY_LEVEL_TEMPLATES": _missing(HONESTY_LEVEL_TEMPLATES, HONESTY_LEVELS),
        "HONESTY_LEVEL_LABELS": _missing(HONESTY_LEVEL_LABELS, HONESTY_LEVELS),
        "RESPONSE_TYPE_TEMPLATES": _missing(RESPONSE_TYPE_TEMPLATES, ResponseType),
    }
    gaps = {name: keys for name, keys in gaps.items() if keys}
    if gaps:
        raise RuntimeError(f"Template tables missing entries: {gaps}")
    unknown = _unknown_placeholders(ANALYSIS_OPTIONS)
    if unknown:
        raise RuntimeError(f"Option fragments use unknown placeholders: {unknown}")


check_template_coverage()
