"""
Integration tests for the analyzer API.
"""
import pytest

LAUNCH_ENTRIES = [
    {"local_date": "2024-01-01", "topics": "Worked on launch",
     "alignment_rating": 8, "contentment_rating": 6},
    {"local_date": "2024-01-02", "topics": "Rested",
     "alignment_rating": 4, "contentment_rating": 9, "createdAt": "2024-01-02T21:15:00Z"},
]


def _prompt_body(**overrides) -> dict:
    body = {
        "entries": LAUNCH_ENTRIES,
        "start_date": "2024-01-01",
        "end_date": "2024-01-02",
        "profile": {"goal": "Ship v1", "first_name": "Ada"},
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestCatalogs:
    def test_options(self, client):
        r = client.get("/analyzer/options")
        assert r.status_code == 200
        keys = [o["key"] for o in r.json()]
        assert keys[0] == "key-themes"
        assert keys[-1] == "blockers"
        assert len(keys) == 8

    def test_presets(self, client):
        r = client.get("/analyzer/presets")
        assert r.status_code == 200
        body = r.json()
        assert [p["name"] for p in body] == [
            "Quick Check", "Deep Dive", "Goal Sprint", "Reflection Mode",
        ]
        assert "advanced_settings" not in body[0]["preferences"]
        assert body[1]["preferences"]["advanced_settings"]["compare_with_previous"] is True

    def test_tones(self, client):
        r = client.get("/analyzer/tones")
        assert r.status_code == 200
        assert [t["tone"] for t in r.json()] == [
            "professional", "friendly", "motivational", "sage", "quirky",
        ]

    def test_honesty_levels(self, client):
        r = client.get("/analyzer/honesty-levels")
        assert r.status_code == 200
        body = r.json()
        assert [lvl["level"] for lvl in body] == [1, 2, 3, 4, 5, 6]
        assert [lvl["color"] for lvl in body] == ["green", "green", "yellow", "yellow", "red", "red"]
        assert body[5]["label"] == "Brutal"


class TestPreferences:
    def test_default(self, client):
        r = client.get("/analyzer/preferences/default")
        assert r.status_code == 200
        body = r.json()
        assert body["voice_tone"] == "friendly"
        assert body["honesty_level"] == 3
        assert body["selected_options"] == ["key-themes", "progress-analysis", "concrete-tasks"]
        assert body["advanced_settings"]["output_format"] == "markdown"

    def test_apply_preset_keeps_unset_fields(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        prefs["advanced_settings"]["focus_area"] = "contentment"
        r = client.post(
            "/analyzer/preferences/apply-preset",
            json={"preset": "Reflection Mode", "preferences": prefs},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["voice_tone"] == "sage"
        assert body["response_type"] == "pattern-focused"
        assert body["selected_options"] == ["key-themes", "energy-trends", "time-management"]
        assert body["advanced_settings"]["focus_area"] == "contentment"

    def test_apply_preset_without_preferences(self, client):
        r = client.post("/analyzer/preferences/apply-preset", json={"preset": "deep dive"})
        assert r.status_code == 200
        assert len(r.json()["selected_options"]) == 8

    def test_apply_unknown_preset(self, client):
        r = client.post("/analyzer/preferences/apply-preset", json={"preset": "Turbo"})
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "PRESET_NOT_FOUND"
        assert "Quick Check" in body["details"]["available"]

    def test_validate_ok(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        r = client.post("/analyzer/preferences/validate", json=prefs)
        assert r.status_code == 200
        assert r.json() == {"valid": True, "error": None}

    def test_validate_empty_selection(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        prefs["selected_options"] = []
        r = client.post("/analyzer/preferences/validate", json=prefs)
        assert r.status_code == 200
        assert r.json()["valid"] is False
        assert r.json()["error"] == "Please select at least one analysis option."

    def test_preview(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        r = client.post("/analyzer/preview", json=prefs)
        assert r.status_code == 200
        assert "friendly tone" in r.json()["preview"]

    def test_preview_bad_honesty(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        prefs["honesty_level"] = 9
        r = client.post("/analyzer/preview", json=prefs)
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_PREFERENCES"


class TestEnrich:
    def test_enrich(self, client):
        r = client.post("/analyzer/enrich", json={
            "entries": LAUNCH_ENTRIES, "start_date": "2024-01-01", "end_date": "2024-01-02",
        })
        assert r.status_code == 200
        body = r.json()
        a = body["analytics"]
        assert a["entry_count"] == 2
        assert a["avg_alignment_rating"] == 6
        assert a["avg_contentment_rating"] == 7.5
        assert a["avg_karma"] == 6.75
        assert a["highest_entry"]["local_date"] == "2024-01-01"
        assert a["highest_entry"]["karma"] == 7
        assert a["lowest_entry"]["karma"] == 6.5
        assert a["trend_analysis"]["direction"] == "declining"
        assert a["temporal_patterns"]["best_day_of_week"] == "Monday"
        assert a["temporal_patterns"]["most_productive_time"] is None
        assert body["date_range"] == {
            "start": "2024-01-01", "end": "2024-01-02",
            "label": "Jan 1, 2024 to Jan 2, 2024", "days": 2,
        }

    def test_enrich_empty(self, client):
        r = client.post("/analyzer/enrich", json={
            "entries": [], "start_date": "2024-01-01", "end_date": "2024-01-31",
        })
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "NO_ENTRIES"
        assert body["details"] == {"start": "2024-01-01", "end": "2024-01-31"}

    def test_enrich_rating_out_of_range(self, client):
        bad = [dict(LAUNCH_ENTRIES[0], alignment_rating=11)]
        r = client.post("/analyzer/enrich", json={
            "entries": bad, "start_date": "2024-01-01", "end_date": "2024-01-02",
        })
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = [e["field"] for e in body["details"]["errors"]]
        assert "entries.0.alignment_rating" in fields

    def test_enrich_reversed_range(self, client):
        r = client.post("/analyzer/enrich", json={
            "entries": LAUNCH_ENTRIES, "start_date": "2024-02-01", "end_date": "2024-01-01",
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


class TestPrompt:
    def test_prompt_with_defaults(self, client):
        r = client.post("/analyzer/prompt", json=_prompt_body())
        assert r.status_code == 200
        body = r.json()
        assert body["prompt"].startswith("Hi, I'm Ada.")
        assert "MY GRAND QUEST: Ship v1" in body["prompt"]
        assert body["enriched"]["analytics"]["avg_karma"] == 6.75

    def test_prompt_is_deterministic(self, client):
        first = client.post("/analyzer/prompt", json=_prompt_body()).json()["prompt"]
        second = client.post("/analyzer/prompt", json=_prompt_body()).json()["prompt"]
        assert first == second

    def test_prompt_option_order_irrelevant(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        a = dict(prefs, selected_options=["blockers", "resources"])
        b = dict(prefs, selected_options=["resources", "blockers"])
        pa = client.post("/analyzer/prompt", json=_prompt_body(preferences=a)).json()["prompt"]
        pb = client.post("/analyzer/prompt", json=_prompt_body(preferences=b)).json()["prompt"]
        assert pa == pb

    def test_prompt_without_profile(self, client):
        body = _prompt_body()
        del body["profile"]
        r = client.post("/analyzer/prompt", json=body)
        assert r.status_code == 200
        assert "None" not in r.json()["prompt"]

    def test_prompt_empty_entries(self, client):
        r = client.post("/analyzer/prompt", json=_prompt_body(entries=[]))
        assert r.status_code == 422
        assert r.json()["code"] == "NO_ENTRIES"

    @pytest.mark.parametrize("change, message", [
        ({"honesty_level": 0}, "Honesty level"),
        ({"selected_options": []}, "at least one analysis option"),
    ])
    def test_prompt_invalid_preferences(self, client, change, message):
        prefs = client.get("/analyzer/preferences/default").json()
        prefs.update(change)
        r = client.post("/analyzer/prompt", json=_prompt_body(preferences=prefs))
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "INVALID_PREFERENCES"
        assert message in body["message"]

    def test_prompt_unknown_tone(self, client):
        prefs = client.get("/analyzer/preferences/default").json()
        prefs["voice_tone"] = "sarcastic"
        r = client.post("/analyzer/prompt", json=_prompt_body(preferences=prefs))
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_prompt_too_many_entries(self, client, monkeypatch):
        from app.core.config import settings
        monkeypatch.setattr(settings, "MAX_ENTRIES", 1)
        r = client.post("/analyzer/prompt", json=_prompt_body())
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "TOO_MANY_ENTRIES"
        assert body["details"] == {"max_entries": 1, "received": 2}
