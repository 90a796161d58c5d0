"""Work-rhythm report: histograms, after-hours share, session lengths, commit pattern."""

from __future__ import annotations

import enum
import json
import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Sequence

from devblackbox.output import format_duration
from devblackbox.style import Color, paint

_MAX_BAR_WIDTH = 20
_BAR = "\u2588"
_DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_NO_ACTIVITY = "No commit activity in this period."


@dataclass
class AfterHoursStats:
    """Share of commits made outside core hours and on weekends."""

    total_commits: int = 0
    after_hours_commits: int = 0
    weekend_commits: int = 0
    after_hours_ratio: float = 0.0
    weekend_ratio: float = 0.0


@dataclass
class SessionDistribution:
    """Work sessions in a window with their median, 90th percentile and mean length."""

    sessions: list[Any] = field(default_factory=list)
    median_minutes: int = 0
    p90_minutes: int = 0
    mean_minutes: int = 0


class CommitPattern(enum.Enum):
    """Descriptive label for how commits are spread in time."""

    BURST = "Burst"
    STEADY = "Steady"
    INSUFFICIENT = "Insufficient"


@dataclass
class BurstStats:
    """Commit pattern with the coefficient of variation of gaps between commits."""

    pattern: CommitPattern = CommitPattern.INSUFFICIENT
    cv_of_gaps: float = 0.0


@dataclass
class RhythmReport:
    """All rhythm sections for a window of ``days`` days."""

    days: int
    hour_histogram: Sequence[int]
    dow_histogram: Sequence[int]
    after_hours: AfterHoursStats
    session_distribution: SessionDistribution
    burst_stats: BurstStats


def _checked(histogram: Sequence[int], size: int, name: str) -> list[int]:
    counts = list(histogram)
    if len(counts) != size:
        raise ValueError(f"{name} histogram must have {size} slots, got {len(counts)}")
    if any(count < 0 for count in counts):
        raise ValueError(f"{name} histogram counts must not be negative")
    return counts


def _peak_index(counts: list[int]) -> int:
    # The last of several equal maxima is the peak.
    return max(range(len(counts)), key=lambda i: (counts[i], i))


def _bar_lines(labels: Sequence[str], counts: list[int], peak: int, weekend_from: int | None):
    top = max(counts)
    for i, (label, count) in enumerate(zip(labels, counts)):
        length = count * _MAX_BAR_WIDTH // top
        padding = " " * (_MAX_BAR_WIDTH - length)
        tag = " [wknd]" if weekend_from is not None and i >= weekend_from else ""
        if i == peak and count > 0:
            bar = paint(_BAR * length, Color.GREEN)
            yield f"{label} | {bar}{padding} {count:>4}  <- peak{tag}"
        else:
            bar = paint(_BAR * length, Color.YELLOW)
            yield f"{label} | {bar}{padding} {count:>4}{tag}"


def _commit_word(count: int) -> str:
    return "commit" if count == 1 else "commits"


def render_hour_histogram(histogram: Sequence[int]) -> str:
    """Render 24 hour-of-day counts as a bar chart with the peak hour marked."""
    counts = _checked(histogram, 24, "hour")
    if max(counts) == 0:
        return paint(_NO_ACTIVITY, Color.DIMMED)
    peak = _peak_index(counts)
    labels = [f"{hour:>2}" for hour in range(24)]
    lines = list(_bar_lines(labels, counts, peak, None))
    lines.append(
        f"Peak: {peak:02}:00\u2013{(peak + 1) % 24:02}:00 "
        f"({counts[peak]} {_commit_word(counts[peak])})"
    )
    return "\n".join(lines)


def render_dow_histogram(histogram: Sequence[int]) -> str:
    """Render 7 day-of-week counts (Monday first) as a bar chart."""
    counts = _checked(histogram, 7, "day-of-week")
    if max(counts) == 0:
        return paint(_NO_ACTIVITY, Color.DIMMED)
    peak = _peak_index(counts)
    lines = list(_bar_lines(_DAY_LABELS, counts, peak, 5))
    lines.append(
        f"Peak: {_DAY_LABELS[peak]} ({counts[peak]} {_commit_word(counts[peak])})"
    )
    return "\n".join(lines)


def _percent(ratio: float) -> int:
    return max(0, math.floor(ratio * 100.0 + 0.5))


def render_after_hours_stats(stats: AfterHoursStats) -> str:
    """Render after-hours and weekend commit shares."""
    lines = [
        f"After-hours: {stats.after_hours_commits}/{stats.total_commits} commits "
        f"({_percent(stats.after_hours_ratio)}%)",
        f"Weekend:     {stats.weekend_commits}/{stats.total_commits} commits "
        f"({_percent(stats.weekend_ratio)}%)",
    ]
    if stats.after_hours_ratio > 0.5:
        lines.append("(more than half outside core hours)")
    return "\n".join(lines)


def render_session_distribution(dist: SessionDistribution) -> str:
    """Render median, p90 and mean session length on one line."""
    if not dist.sessions:
        return "No sessions detected in this period"
    count = len(dist.sessions)
    word = "session" if count == 1 else "sessions"
    return (
        f"Session lengths ({count} {word}):  "
        f"median {format_duration(timedelta(minutes=dist.median_minutes))}  "
        f"p90 {format_duration(timedelta(minutes=dist.p90_minutes))}  "
        f"mean {format_duration(timedelta(minutes=dist.mean_minutes))}"
    )


def render_burst_stats(stats: BurstStats) -> str:
    """Render the commit pattern label."""
    if stats.pattern is CommitPattern.BURST:
        return f"Commit pattern: bursty (CV={stats.cv_of_gaps:.2f})"
    if stats.pattern is CommitPattern.STEADY:
        return f"Commit pattern: steady (CV={stats.cv_of_gaps:.2f})"
    return "Commit pattern: insufficient data (< 3 commits)"


def render_rhythm(report: RhythmReport) -> str:
    """Render every rhythm section under its heading."""
    sections = (
        ("Hour of day", render_hour_histogram(report.hour_histogram)),
        ("Day of week", render_dow_histogram(report.dow_histogram)),
        ("Sustainability", render_after_hours_stats(report.after_hours)),
        ("Session lengths", render_session_distribution(report.session_distribution)),
        ("Commit pattern", render_burst_stats(report.burst_stats)),
    )
    lines = [
        paint(f"=== Work Rhythm (last {report.days} days) ===", Color.BOLD, Color.CYAN),
        "",
    ]
    for heading, body in sections:
        lines.extend([paint(heading, Color.BOLD), body, ""])
    lines.pop()
    return "\n".join(lines)


def _json_float(value: float) -> float | None:
    return value if math.isfinite(value) else None


def render_rhythm_json(report: RhythmReport) -> str:
    """Render the rhythm report as pretty-printed JSON."""
    ah = report.after_hours
    dist = report.session_distribution
    document = {
        "days": report.days,
        "hour_histogram": _checked(report.hour_histogram, 24, "hour"),
        "dow_histogram": _checked(report.dow_histogram, 7, "day-of-week"),
        "after_hours": {
            "total_commits": ah.total_commits,
            "after_hours_commits": ah.after_hours_commits,
            "weekend_commits": ah.weekend_commits,
            "after_hours_ratio": _json_float(ah.after_hours_ratio),
            "weekend_ratio": _json_float(ah.weekend_ratio),
        },
        "session_distribution": {
            "session_count": len(dist.sessions),
            "median_minutes": dist.median_minutes,
            "p90_minutes": dist.p90_minutes,
            "mean_minutes": dist.mean_minutes,
        },
        "burst_stats": {
            "pattern": report.burst_stats.pattern.value,
            "cv_of_gaps": _json_float(report.burst_stats.cv_of_gaps),
        },
    }
    return json.dumps(document, indent=2, ensure_ascii=False)