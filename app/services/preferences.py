"""
Preference state for a single analysis session.

A PreferenceSession has exactly one owner. Every change replaces the held
AnalyzerPreferences with a new validated value; nothing is mutated in
place, and readers always get a private copy.

Presets are sparse overlays: applying one changes only the fields it
names and leaves every other field as it was.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ValidationError

from app.schemas.analyzer import AnalysisOptionKey, AnalyzerPreferences
from app.services.presets import SmartPreset, default_preferences

logger = logging.getLogger(__name__)

PreferencesUpdate = Union[
    AnalyzerPreferences,
    Callable[[AnalyzerPreferences], AnalyzerPreferences],
]

_FIELDS = frozenset(AnalyzerPreferences.model_fields)
_SCALAR_FIELDS = ("voice_tone", "honesty_level", "response_type")


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def _with_fields(prefs: AnalyzerPreferences, updates: dict[str, Any]) -> AnalyzerPreferences:
    """Revalidate `prefs` with some top-level fields replaced."""
    data = prefs.model_dump(mode="json")
    for key, value in updates.items():
        if key not in _FIELDS:
            raise ValueError(f"Unknown preference field: {key!r}")
        data[key] = value.model_dump(mode="json") if isinstance(value, BaseModel) else value
    return AnalyzerPreferences.model_validate(data)


def apply_preset(current: AnalyzerPreferences, preset: SmartPreset) -> AnalyzerPreferences:
    """Overlay the preset's fields on `current`; fields it omits are kept."""
    return _with_fields(current, preset.overrides())


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class PreferenceSession:
    """Holds the current preferences and exposes the setter operations."""

    def __init__(self, initial: Optional[AnalyzerPreferences] = None):
        self._prefs = (
            initial.model_copy(deep=True) if initial is not None else default_preferences()
        )

    @property
    def preferences(self) -> AnalyzerPreferences:
        return self._prefs.model_copy(deep=True)

    def update_preference(self, key: str, value: Any) -> AnalyzerPreferences:
        """Replace one top-level field."""
        self._prefs = _with_fields(self._prefs, {key: value})
        return self.preferences

    def toggle_option(self, key: Union[AnalysisOptionKey, str]) -> AnalyzerPreferences:
        option = AnalysisOptionKey(key)
        options = set(self._prefs.selected_options)
        if option in options:
            options.remove(option)
        else:
            options.add(option)
        return self.update_preference("selected_options", options)

    def set_options(self, options) -> AnalyzerPreferences:
        return self.update_preference("selected_options", set(options))

    def set_preferences(self, update: PreferencesUpdate) -> AnalyzerPreferences:
        """Replace everything, given a new value or a function of the current one."""
        new = update(self.preferences) if callable(update) else update
        if not isinstance(new, AnalyzerPreferences):
            new = AnalyzerPreferences.model_validate(new)
        self._prefs = new.model_copy(deep=True)
        return self.preferences

    def apply_preset(self, preset: SmartPreset) -> AnalyzerPreferences:
        logger.debug("Applying preset %r", preset.name)
        return self.set_preferences(lambda prev: apply_preset(prev, preset))

    def reset(self) -> AnalyzerPreferences:
        return self.set_preferences(default_preferences())


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def serialize_preferences(prefs: AnalyzerPreferences) -> str:
    """JSON text; `selected_options` is written as a catalog-ordered list."""
    return prefs.model_dump_json()


def deserialize_preferences(raw: Optional[str]) -> AnalyzerPreferences:
    """
    Load stored preferences, filling gaps from the defaults:
      - missing or empty top-level fields take the default value
      - an empty option list takes the default options
      - advanced_settings is merged field by field
    Unreadable input logs a warning and returns the defaults.
    """
    defaults = default_preferences()
    if not raw:
        return defaults

    try:
        stored = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse stored analyzer preferences: %s", e)
        return defaults
    if not isinstance(stored, dict):
        logger.warning("Stored analyzer preferences are not an object; using defaults")
        return defaults

    merged = defaults.model_dump(mode="json")
    for key in _SCALAR_FIELDS:
        if stored.get(key):
            merged[key] = stored[key]
    if stored.get("selected_options"):
        merged["selected_options"] = stored["selected_options"]
    advanced = stored.get("advanced_settings")
    if isinstance(advanced, dict):
        for key in merged["advanced_settings"]:
            if key in advanced:
                merged["advanced_settings"][key] = advanced[key]

    try:
        return AnalyzerPreferences.model_validate(merged)
    except ValidationError as e:
        logger.warning("Stored analyzer preferences are invalid: %s", e)
        return defaults
