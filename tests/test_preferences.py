"""
Tests for PreferenceSession, preset overlays and preference (de)serialization.
"""
import json

import pytest
from pydantic import ValidationError

from app.schemas.analyzer import (
    AdvancedSettings,
    AnalysisOptionKey,
    FocusArea,
    OutputFormat,
    ResponseType,
    VoiceTone,
)
from app.services.preferences import (
    PreferenceSession,
    apply_preset,
    deserialize_preferences,
    serialize_preferences,
)
from app.services.presets import SmartPreset, default_preferences, find_preset


class TestPreferenceSession:
    def test_starts_from_defaults(self):
        assert PreferenceSession().preferences == default_preferences()

    def test_update_preference_keeps_other_fields(self):
        session = PreferenceSession()
        prefs = session.update_preference("voice_tone", "sage")
        assert prefs.voice_tone == VoiceTone.sage
        assert prefs.honesty_level == 3
        assert prefs.selected_options == default_preferences().selected_options

    def test_update_preference_with_model_value(self):
        session = PreferenceSession()
        settings = AdvancedSettings(
            compare_with_previous=True,
            include_karma_analysis=False,
            focus_area=FocusArea.contentment,
            output_format=OutputFormat.plain,
        )
        session.update_preference("advanced_settings", settings)
        settings.compare_with_previous = False
        assert session.preferences.advanced_settings.compare_with_previous is True

    def test_update_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            PreferenceSession().update_preference("volume", 11)

    def test_update_invalid_value_rejected(self):
        with pytest.raises(ValidationError):
            PreferenceSession().update_preference("voice_tone", "sarcastic")

    def test_toggle_adds_then_removes(self):
        session = PreferenceSession()
        assert AnalysisOptionKey.blockers in session.toggle_option("blockers").selected_options
        assert AnalysisOptionKey.blockers not in session.toggle_option("blockers").selected_options

    def test_toggle_twice_restores_original(self):
        session = PreferenceSession()
        before = session.preferences.selected_options
        session.toggle_option(AnalysisOptionKey.key_themes)
        session.toggle_option(AnalysisOptionKey.key_themes)
        assert session.preferences.selected_options == before

    def test_toggle_unknown_option(self):
        with pytest.raises(ValueError):
            PreferenceSession().toggle_option("horoscope")

    def test_set_options(self):
        session = PreferenceSession()
        prefs = session.set_options(["resources", "resources", "blockers"])
        assert prefs.selected_options == {
            AnalysisOptionKey.resources, AnalysisOptionKey.blockers,
        }

    def test_set_preferences_with_value(self):
        session = PreferenceSession()
        new = default_preferences()
        new.honesty_level = 6
        session.set_preferences(new)
        new.honesty_level = 1
        assert session.preferences.honesty_level == 6

    def test_set_preferences_with_function(self):
        session = PreferenceSession()
        session.update_preference("honesty_level", 2)
        session.set_preferences(
            lambda prev: prev.model_copy(update={"honesty_level": prev.honesty_level + 3})
        )
        assert session.preferences.honesty_level == 5

    def test_preferences_property_is_a_copy(self):
        session = PreferenceSession()
        session.preferences.selected_options.clear()
        assert session.preferences.selected_options

    def test_reset(self):
        session = PreferenceSession()
        session.apply_preset(find_preset("Deep Dive"))
        assert session.reset() == default_preferences()

    def test_initial_value_is_copied(self):
        initial = default_preferences()
        session = PreferenceSession(initial)
        initial.selected_options.clear()
        assert session.preferences.selected_options


class TestPresetOverlay:
    def test_partial_overlay_keeps_unset_fields(self):
        current = default_preferences().model_copy(update={"honesty_level": 3})
        preset = SmartPreset(
            name="Tone Only", description="", icon="", preferences={"voice_tone": "professional"},
        )
        result = apply_preset(current, preset)
        assert result.voice_tone == VoiceTone.professional
        assert result.honesty_level == 3
        assert result.selected_options == current.selected_options
        assert result.advanced_settings == current.advanced_settings

    def test_goal_sprint_leaves_advanced_settings(self):
        session = PreferenceSession()
        session.update_preference("advanced_settings", {
            "compare_with_previous": True,
            "include_karma_analysis": False,
            "focus_area": "alignment",
            "output_format": "plain",
        })
        prefs = session.apply_preset(find_preset("Goal Sprint"))
        assert prefs.voice_tone == VoiceTone.motivational
        assert prefs.honesty_level == 5
        assert prefs.selected_options == {
            AnalysisOptionKey.progress_analysis,
            AnalysisOptionKey.week_strategy,
            AnalysisOptionKey.blockers,
            AnalysisOptionKey.concrete_tasks,
        }
        assert prefs.advanced_settings.focus_area == FocusArea.alignment
        assert prefs.advanced_settings.output_format == OutputFormat.plain

    def test_deep_dive_replaces_advanced_settings(self):
        prefs = apply_preset(default_preferences(), find_preset("Deep Dive"))
        assert prefs.response_type == ResponseType.pattern_focused
        assert prefs.advanced_settings.compare_with_previous is True
        assert prefs.selected_options == set(AnalysisOptionKey)

    def test_overlay_does_not_touch_input(self):
        current = default_preferences()
        apply_preset(current, find_preset("Deep Dive"))
        assert current == default_preferences()


class TestSerialization:
    def test_round_trip(self):
        prefs = apply_preset(default_preferences(), find_preset("Reflection Mode"))
        assert deserialize_preferences(serialize_preferences(prefs)) == prefs

    def test_options_written_in_catalog_order(self):
        session = PreferenceSession()
        session.set_options(["blockers", "key-themes", "resources"])
        data = json.loads(serialize_preferences(session.preferences))
        assert data["selected_options"] == ["key-themes", "resources", "blockers"]

    @pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]"])
    def test_unreadable_gives_defaults(self, raw):
        assert deserialize_preferences(raw) == default_preferences()

    def test_missing_fields_take_defaults(self):
        prefs = deserialize_preferences(json.dumps({"voice_tone": "quirky"}))
        assert prefs.voice_tone == VoiceTone.quirky
        assert prefs.honesty_level == 3
        assert prefs.selected_options == default_preferences().selected_options

    def test_empty_options_take_defaults(self):
        prefs = deserialize_preferences(json.dumps({"selected_options": []}))
        assert prefs.selected_options == default_preferences().selected_options

    def test_advanced_settings_merged_per_field(self):
        prefs = deserialize_preferences(json.dumps({
            "advanced_settings": {"output_format": "plain"},
        }))
        assert prefs.advanced_settings.output_format == OutputFormat.plain
        assert prefs.advanced_settings.include_karma_analysis is True

    def test_invalid_values_give_defaults(self):
        prefs = deserialize_preferences(json.dumps({"voice_tone": "sarcastic"}))
        assert prefs == default_preferences()
