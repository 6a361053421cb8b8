"""
Analysis option catalog, default preferences and smart presets.

The option catalog order is the order option instructions appear in a
composed prompt, whatever order the user selected them in.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Optional

from app.schemas.analyzer import (
    AdvancedSettings,
    AnalysisOptionKey,
    AnalyzerPreferences,
    FocusArea,
    OutputFormat,
    ResponseType,
    VoiceTone,
)


# ---------------------------------------------------------------------------
# Analysis options
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisOption:
    key: AnalysisOptionKey
    label: str
    description: str
    # May contain {{variable}} placeholders filled by the prompt composer.
    prompt_fragment: str


ANALYSIS_OPTIONS: tuple[AnalysisOption, ...] = (
    AnalysisOption(
        key=AnalysisOptionKey.key_themes,
        label="Key Themes & Patterns",
        description="Recurring activities, topics, or skills from recent entries",
        prompt_fragment=(
            "- Key Themes & Patterns: Identify recurring activities, topics, "
            "or skills from my recent log."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.progress_analysis,
        label="Progress vs Goal",
        description="How far I am from achieving my goal",
        prompt_fragment=(
            "- Progress Analysis: Assess how far I am from achieving my goal "
            "({{goal}}), with a short explanation."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.concrete_tasks,
        label="3 Concrete Tasks for Tomorrow",
        description="Specific, actionable steps I can take",
        prompt_fragment=(
            "- 3 Concrete Tasks for Tomorrow: Provide specific, actionable, "
            "and achievable steps."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.week_strategy,
        label="Week-Ahead Strategy",
        description="What to focus on in coming days",
        prompt_fragment=(
            "- Week-Ahead Strategy: Suggest what I should focus on in the coming "
            "days to reach my goal more easily."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.resources,
        label="Resource Recommendations",
        description="Tools, techniques, or references aligned with my goal",
        prompt_fragment=(
            "- Suggested Resources: Recommend high-quality references, tools, "
            "or techniques that align with my goal."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.energy_trends,
        label="Energy & Contentment Trends",
        description="Patterns in alignment and contentment over time",
        prompt_fragment=(
            "- Energy & Contentment Trends: Analyze my energy levels (alignment, "
            "averaging {{avg_alignment}}/10) and contentment patterns (averaging "
            "{{avg_contentment}}/10). When am I most aligned? When do I feel most "
            "content? Identify correlations between activities and these metrics."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.time_management,
        label="Time Management Analysis",
        description="How I allocate time and where to optimize",
        prompt_fragment=(
            "- Time Management Analysis: Based on my entries, evaluate my time "
            "management patterns. Are there patterns in how I allocate time? "
            "Where am I overcommitted? Suggest time optimization strategies."
        ),
    ),
    AnalysisOption(
        key=AnalysisOptionKey.blockers,
        label="Blockers & Challenges",
        description="Obstacles holding me back with solutions",
        prompt_fragment=(
            "- Blockers & Challenges: Identify obstacles and challenges mentioned "
            "or implied in my entries. What's consistently holding me back? What "
            "patterns of resistance appear? Provide strategies to overcome these "
            "blockers."
        ),
    ),
)

_OPTIONS_BY_KEY: dict[AnalysisOptionKey, AnalysisOption] = {
    opt.key: opt for opt in ANALYSIS_OPTIONS
}

_missing_options = [k.value for k in AnalysisOptionKey if k not in _OPTIONS_BY_KEY]
if _missing_options or len(_OPTIONS_BY_KEY) != len(ANALYSIS_OPTIONS):
    raise RuntimeError(f"Analysis option catalog is inconsistent: missing {_missing_options}")


# ---------------------------------------------------------------------------
# Default preferences
# ---------------------------------------------------------------------------

def default_preferences() -> AnalyzerPreferences:
    """A fresh default value on every call; callers may mutate it freely."""
    return AnalyzerPreferences(
        voice_tone=VoiceTone.friendly,
        honesty_level=3,
        response_type=ResponseType.action_focused,
        selected_options={
            AnalysisOptionKey.key_themes,
            AnalysisOptionKey.progress_analysis,
            AnalysisOptionKey.concrete_tasks,
        },
        advanced_settings=AdvancedSettings(
            compare_with_previous=False,
            include_karma_analysis=True,
            focus_area=FocusArea.both,
            output_format=OutputFormat.markdown,
        ),
    )


# ---------------------------------------------------------------------------
# Smart presets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SmartPreset:
    name: str
    description: str
    icon: str
    # Sparse: only the preference fields this preset overrides.
    preferences: dict[str, Any]

    def overrides(self) -> dict[str, Any]:
        """A private copy of the overrides, safe to hand to callers."""
        return copy.deepcopy(self.preferences)


SMART_PRESETS: tuple[SmartPreset, ...] = (
    SmartPreset(
        name="Quick Check",
        description="Fast overview with actionable next steps",
        icon="🚀",
        preferences={
            "voice_tone": "friendly",
            "honesty_level": 3,
            "response_type": "action-focused",
            "selected_options": ["key-themes", "progress-analysis", "concrete-tasks"],
        },
    ),
    SmartPreset(
        name="Deep Dive",
        description="Comprehensive analysis with all insights",
        icon="🔍",
        preferences={
            "voice_tone": "sage",
            "honesty_level": 4,
            "response_type": "pattern-focused",
            "selected_options": [key.value for key in AnalysisOptionKey],
            "advanced_settings": {
                "compare_with_previous": True,
                "include_karma_analysis": True,
                "focus_area": "both",
                "output_format": "markdown",
            },
        },
    ),
    SmartPreset(
        name="Goal Sprint",
        description="Focus on progress and momentum",
        icon="🎯",
        preferences={
            "voice_tone": "motivational",
            "honesty_level": 5,
            "response_type": "action-focused",
            "selected_options": [
                "progress-analysis", "week-strategy", "blockers", "concrete-tasks",
            ],
        },
    ),
    SmartPreset(
        name="Reflection Mode",
        description="Understand patterns and self-awareness",
        icon="🧘",
        preferences={
            "voice_tone": "sage",
            "honesty_level": 3,
            "response_type": "pattern-focused",
            "selected_options": ["key-themes", "energy-trends", "time-management"],
        },
    ),
)


def find_preset(name: str) -> Optional[SmartPreset]:
    """Case-insensitive lookup by preset name."""
    wanted = name.strip().lower()
    for preset in SMART_PRESETS:
        if preset.name.lower() == wanted:
            return preset
    return None
