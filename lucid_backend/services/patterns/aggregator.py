"""Recurring-pattern summary over a user's dreams.

Pure computation: callers fetch the dreams, pass a reference timestamp and get
back a ``DreamPatterns`` value. Nothing here touches the database or the clock.

Frequency ranking contract: labels are ordered by descending count, and labels
with equal counts keep the order in which they were first encountered while
walking the records in the order given.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

TOP_LABELS = 10
SLEEP_CHART_POINTS = 30
PREVIEW_CHARS = 50
WEEK_WINDOW = timedelta(days=7)
MONTH_WINDOW = timedelta(days=30)


@dataclass(frozen=True)
class FrequencyEntry:
    label: str
    count: int


@dataclass(frozen=True)
class DreamFrequency:
    this_week: int = 0
    this_month: int = 0


@dataclass(frozen=True)
class SleepStats:
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0
    total: int = 0  # number of dreams that carry sleep hours


@dataclass(frozen=True)
class SleepChartPoint:
    date: str
    hours: float
    content: str


@dataclass(frozen=True)
class DreamPatterns:
    total_dreams: int = 0
    top_symbols: List[FrequencyEntry] = field(default_factory=list)
    top_emotions: List[FrequencyEntry] = field(default_factory=list)
    top_themes: List[FrequencyEntry] = field(default_factory=list)
    dream_frequency: DreamFrequency = field(default_factory=DreamFrequency)
    sleep_stats: SleepStats = field(default_factory=SleepStats)
    sleep_chart: List[SleepChartPoint] = field(default_factory=list)


def frequency_table(labels: Iterable[str]) -> Dict[str, int]:
    """Count occurrences; dict order is first-encounter order."""
    counts: Dict[str, int] = {}
    for label in labels:
        counts[label] = counts.get(label, 0) + 1
    return counts


def rank_labels(counts: Dict[str, int], limit: int = TOP_LABELS) -> List[FrequencyEntry]:
    # sorted() is stable, so equal counts stay in first-encounter order
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [FrequencyEntry(label=label, count=count) for label, count in ranked[:limit]]


def top_labels(dreams: Sequence[Any], attribute: str, limit: int = TOP_LABELS) -> List[FrequencyEntry]:
    """Rank the values of one list attribute (symbols, emotions, themes) across dreams."""
    return rank_labels(frequency_table(_flatten(dreams, attribute)), limit)


def summarize_sleep(dreams: Sequence[Any]) -> SleepStats:
    hours = [d.sleep_hours for d in dreams if d.sleep_hours is not None]
    if not hours:
        return SleepStats()
    return SleepStats(
        average=sum(hours) / len(hours),
        min=min(hours),
        max=max(hours),
        total=len(hours),
    )


def count_recent(dreams: Sequence[Any], now: datetime) -> DreamFrequency:
    week_start = now - WEEK_WINDOW
    month_start = now - MONTH_WINDOW
    return DreamFrequency(
        this_week=sum(1 for d in dreams if d.created_at >= week_start),
        this_month=sum(1 for d in dreams if d.created_at >= month_start),
    )


def build_sleep_chart(dreams: Sequence[Any], points: int = SLEEP_CHART_POINTS) -> List[SleepChartPoint]:
    """Most recent ``points`` dreams with sleep hours, oldest first."""
    newest_first = sorted(
        (d for d in dreams if d.sleep_hours is not None),
        key=lambda d: d.created_at,
        reverse=True,
    )
    recent = newest_first[:points]
    recent.reverse()
    return [
        SleepChartPoint(
            date=_date_label(d.created_at),
            hours=d.sleep_hours,
            content=preview(d.content or ""),
        )
        for d in recent
    ]


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def aggregate_patterns(dreams: Sequence[Any], now: datetime) -> DreamPatterns:
    """Summarise symbols, emotions, themes, dream frequency and sleep for a user.

    ``dreams`` may be in any order. ``now`` anchors the 7 / 30 day windows and
    must use the same timezone convention as ``created_at`` (naive UTC in this
    codebase).
    """
    if not dreams:
        return DreamPatterns()

    return DreamPatterns(
        total_dreams=len(dreams),
        top_symbols=top_labels(dreams, "symbols"),
        top_emotions=top_labels(dreams, "emotions"),
        top_themes=top_labels(dreams, "themes"),
        dream_frequency=count_recent(dreams, now),
        sleep_stats=summarize_sleep(dreams),
        sleep_chart=build_sleep_chart(dreams),
    )


def _flatten(dreams: Sequence[Any], attribute: str) -> List[str]:
    labels: List[str] = []
    for dream in dreams:
        values: Optional[Iterable[str]] = getattr(dream, attribute, None)
        if values:
            labels.extend(values)
    return labels


def _date_label(moment: datetime) -> str:
    # "Mar 5" style, no zero padding on the day
    return f"{moment.strftime('%b')} {moment.day}"
