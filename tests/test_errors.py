"""
Tests for the exception classes and their JSON envelopes.
"""
from app.core.errors import (
    InvalidPreferencesError,
    NoEntriesError,
    PresetNotFoundError,
    TooManyEntriesError,
)


class TestExceptionClasses:
    def test_no_entries_error(self):
        err = NoEntriesError(start="2024-01-01", end="2024-01-31")
        assert err.http_status == 422
        assert err.code == "NO_ENTRIES"
        d = err.to_dict()
        assert d["details"] == {"start": "2024-01-01", "end": "2024-01-31"}

    def test_no_entries_error_without_range(self):
        d = NoEntriesError().to_dict()
        assert d["code"] == "NO_ENTRIES"
        # details should not be in dict when empty
        assert "details" not in d

    def test_too_many_entries_error(self):
        err = TooManyEntriesError(max_entries=1000, received=1500)
        assert err.http_status == 422
        assert err.code == "TOO_MANY_ENTRIES"
        assert "1000" in err.message
        assert "1500" in err.message

    def test_invalid_preferences_error(self):
        err = InvalidPreferencesError("Please select at least one analysis option.")
        assert err.http_status == 422
        assert err.code == "INVALID_PREFERENCES"
        assert err.to_dict() == {
            "code": "INVALID_PREFERENCES",
            "message": "Please select at least one analysis option.",
        }

    def test_preset_not_found_error(self):
        err = PresetNotFoundError(name="Turbo", available=["Quick Check"])
        assert err.http_status == 404
        assert err.code == "PRESET_NOT_FOUND"
        assert "Turbo" in err.message
        assert err.details["available"] == ["Quick Check"]


class TestValidationErrors:
    def test_missing_dates(self, client):
        r = client.post("/analyzer/enrich", json={"entries": []})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        fields = {e["field"] for e in body["details"]["errors"]}
        assert {"start_date", "end_date"} <= fields

    def test_bad_date_format(self, client):
        r = client.post("/analyzer/enrich", json={
            "entries": [], "start_date": "01/01/2024", "end_date": "2024-01-31",
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"
