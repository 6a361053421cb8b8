"""
Shared pytest fixtures.

The analyzer holds no state between requests, so the app is used as-is.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.schemas.journal import JournalEntry


def make_entry(day: str, alignment: int, contentment: int, topics: str = "") -> JournalEntry:
    return JournalEntry(
        local_date=date.fromisoformat(day),
        topics=topics or f"notes for {day}",
        alignment_rating=alignment,
        contentment_rating=contentment,
    )


@pytest.fixture()
def launch_entries() -> list[JournalEntry]:
    """Two-day sample: Jan 1 karma 7.0, Jan 2 karma 6.5."""
    return [
        make_entry("2024-01-01", 8, 6, "Worked on launch"),
        make_entry("2024-01-02", 4, 9, "Rested"),
    ]


@pytest.fixture()
def week_entries() -> list[JournalEntry]:
    """Mon 2024-01-01 through Sun 2024-01-07, weekend scoring highest."""
    return [
        make_entry("2024-01-01", 5, 5, "Planning"),
        make_entry("2024-01-02", 6, 6, "Coding"),
        make_entry("2024-01-03", 4, 6, "Meetings all day"),
        make_entry("2024-01-04", 7, 7, "Shipped feature"),
        make_entry("2024-01-05", 6, 4, "Bug hunt"),
        make_entry("2024-01-06", 9, 9, "Long run and reading"),
        make_entry("2024-01-07", 8, 10, "Family day"),
    ]


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c
