"""
Journal analytics — descriptive statistics over a list of journal entries.

Definitions
-----------
Karma = (alignment_rating + contentment_rating) / 2, recomputed per entry
wherever entries are ranked or averaged. Never stored.

Public API
----------
calculate_analytics(entries)                      -> EntryAnalytics
analyze_trends(entries)                           -> TrendAnalysis
identify_temporal_patterns(entries)               -> TemporalPatterns
enrich_journal_data(entries, start, end)          -> EnrichedJournalData | None
format_entries_for_prompt(entries)                -> str
format_date_range(start, end)                     -> str
calculate_days_between(start, end)                -> int

Pure functions: no I/O, inputs are never mutated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from app.schemas.journal import JournalEntry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types (plain dataclasses — no Pydantic)
# ---------------------------------------------------------------------------

class TrendDirection:
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE    = "stable"


class ProductiveTime:
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


@dataclass(frozen=True)
class RankedEntry:
    entry: JournalEntry
    karma: float


@dataclass
class EntryAnalytics:
    entry_count: int
    avg_alignment_rating: float
    avg_contentment_rating: float
    avg_karma: float                  # always (avg_alignment + avg_contentment) / 2
    highest_entry: Optional[RankedEntry]
    lowest_entry: Optional[RankedEntry]


@dataclass
class TrendAnalysis:
    direction: str
    change_percentage: float


@dataclass
class TemporalPatterns:
    best_day_of_week: Optional[str] = None
    most_productive_time: Optional[str] = None


@dataclass
class JournalAnalytics:
    entry_count: int
    avg_alignment_rating: float
    avg_contentment_rating: float
    avg_karma: float
    highest_entry: Optional[RankedEntry]
    lowest_entry: Optional[RankedEntry]
    trend_analysis: TrendAnalysis
    temporal_patterns: TemporalPatterns


@dataclass
class EnrichedJournalData:
    entries: list[JournalEntry]
    start_date: date
    end_date: date
    analytics: JournalAnalytics


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Trend change (percent) beyond which the direction is no longer "stable".
TREND_THRESHOLD = 5.0

# Indexed by date.weekday(); fixed so results never depend on the host locale.
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)
_WEEKEND = frozenset({5, 6})

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def karma_of(entry: JournalEntry) -> float:
    return entry.karma


def _mean_karma(entries: Sequence[JournalEntry]) -> float:
    return sum(karma_of(e) for e in entries) / len(entries)


def format_decimal(value: float, places: int = 1) -> str:
    """Fixed-point text, rounding the exact float value half-up."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Core statistics
# ---------------------------------------------------------------------------

def calculate_analytics(entries: Sequence[JournalEntry]) -> EntryAnalytics:
    """
    Averages plus best/worst entry by karma.
    Ties keep input order (stable sort), so the first of several equally
    high entries is `highest_entry` and the last equally low is `lowest_entry`.
    """
    if not entries:
        return EntryAnalytics(
            entry_count=0,
            avg_alignment_rating=0.0,
            avg_contentment_rating=0.0,
            avg_karma=0.0,
            highest_entry=None,
            lowest_entry=None,
        )

    total = len(entries)
    avg_alignment = sum(e.alignment_rating for e in entries) / total
    avg_contentment = sum(e.contentment_rating for e in entries) / total
    # Derived from the two averages, not from per-entry karma.
    avg_karma = (avg_alignment + avg_contentment) / 2

    ranked = sorted(
        (RankedEntry(entry=e, karma=karma_of(e)) for e in entries),
        key=lambda r: r.karma,
        reverse=True,
    )

    return EntryAnalytics(
        entry_count=total,
        avg_alignment_rating=avg_alignment,
        avg_contentment_rating=avg_contentment,
        avg_karma=avg_karma,
        highest_entry=ranked[0],
        lowest_entry=ranked[-1],
    )


def analyze_trends(entries: Sequence[JournalEntry]) -> TrendAnalysis:
    """
    Compare mean karma of the first half against the second half.
    The split index is n // 2, so an odd-length list gives the second half
    the extra entry.
    """
    if len(entries) < 2:
        return TrendAnalysis(direction=TrendDirection.STABLE, change_percentage=0.0)

    mid = len(entries) // 2
    first_avg = _mean_karma(entries[:mid])
    second_avg = _mean_karma(entries[mid:])

    if first_avg == 0:
        # Percent change from zero is undefined; report no change.
        logger.debug("First-half karma is zero; trend reported as stable")
        return TrendAnalysis(direction=TrendDirection.STABLE, change_percentage=0.0)

    change = (second_avg - first_avg) / first_avg * 100

    if change > TREND_THRESHOLD:
        direction = TrendDirection.IMPROVING
    elif change < -TREND_THRESHOLD:
        direction = TrendDirection.DECLINING
    else:
        direction = TrendDirection.STABLE

    return TrendAnalysis(direction=direction, change_percentage=change)


def identify_temporal_patterns(entries: Sequence[JournalEntry]) -> TemporalPatterns:
    """
    Best weekday by mean karma, and whether weekdays or weekends score higher.
    `most_productive_time` is only reported when both groups have entries.
    """
    if not entries:
        return TemporalPatterns()

    # Insertion-ordered: the first weekday encountered wins ties.
    by_day: dict[str, list[float]] = {}
    weekday_karma: list[float] = []
    weekend_karma: list[float] = []

    for entry in entries:
        weekday = entry.local_date.weekday()
        karma = karma_of(entry)
        by_day.setdefault(WEEKDAY_NAMES[weekday], []).append(karma)
        if weekday in _WEEKEND:
            weekend_karma.append(karma)
        else:
            weekday_karma.append(karma)

    best_day: Optional[str] = None
    best_avg = 0.0
    for day_name, scores in by_day.items():
        avg = sum(scores) / len(scores)
        if avg > best_avg:
            best_avg = avg
            best_day = day_name

    most_productive: Optional[str] = None
    if weekday_karma and weekend_karma:
        weekday_avg = sum(weekday_karma) / len(weekday_karma)
        weekend_avg = sum(weekend_karma) / len(weekend_karma)
        most_productive = (
            ProductiveTime.WEEKDAY if weekday_avg > weekend_avg else ProductiveTime.WEEKEND
        )

    return TemporalPatterns(
        best_day_of_week=best_day,
        most_productive_time=most_productive,
    )


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

def enrich_journal_data(
    entries: Sequence[JournalEntry],
    start_date: date,
    end_date: date,
) -> Optional[EnrichedJournalData]:
    """
    Run every analysis over `entries`.
    Returns None for an empty list: there is nothing to analyse and the
    caller must not go on to compose a prompt.
    """
    if not entries:
        logger.info("No entries between %s and %s; skipping analysis", start_date, end_date)
        return None

    base = calculate_analytics(entries)
    analytics = JournalAnalytics(
        entry_count=base.entry_count,
        avg_alignment_rating=base.avg_alignment_rating,
        avg_contentment_rating=base.avg_contentment_rating,
        avg_karma=base.avg_karma,
        highest_entry=base.highest_entry,
        lowest_entry=base.lowest_entry,
        trend_analysis=analyze_trends(entries),
        temporal_patterns=identify_temporal_patterns(entries),
    )
    logger.debug(
        "Analysed %d entries (%s to %s): avg karma %.2f, trend %s",
        analytics.entry_count, start_date, end_date,
        analytics.avg_karma, analytics.trend_analysis.direction,
    )
    return EnrichedJournalData(
        entries=list(entries),
        start_date=start_date,
        end_date=end_date,
        analytics=analytics,
    )


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def format_entries_for_prompt(entries: Sequence[JournalEntry]) -> str:
    """One line per entry, most recent first."""
    lines = []
    for entry in sorted(entries, key=lambda e: e.local_date, reverse=True):
        lines.append(
            f"- {entry.local_date.isoformat()} | Karma: {format_decimal(karma_of(entry))}/10 "
            f"(Alignment: {entry.alignment_rating}, Contentment: {entry.contentment_rating}) "
            f"| {entry.topics}"
        )
    return "\n".join(lines)


def _as_date(value: date | str) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def _short_date(d: date) -> str:
    return f"{_MONTH_ABBR[d.month - 1]} {d.day}, {d.year}"


def format_date_range(start: date | str, end: date | str) -> str:
    """e.g. "Jan 1, 2024 to Jan 31, 2024". Accepts dates or ISO strings."""
    return f"{_short_date(_as_date(start))} to {_short_date(_as_date(end))}"


def calculate_days_between(start: date | str, end: date | str) -> int:
    """Number of days in the range, counting both endpoints."""
    return abs((_as_date(end) - _as_date(start)).days) + 1
