import json
from datetime import timedelta

import pytest

from devblackbox.output import format_duration
from devblackbox.rhythm_report import (
    AfterHoursStats,
    BurstStats,
    CommitPattern,
    RhythmReport,
    SessionDistribution,
    render_after_hours_stats,
    render_burst_stats,
    render_dow_histogram,
    render_hour_histogram,
    render_rhythm,
    render_rhythm_json,
    render_session_distribution,
)
from devblackbox.style import set_color_enabled, strip_ansi


@pytest.fixture(autouse=True)
def no_colors():
    set_color_enabled(False)
    yield
    set_color_enabled(None)


def hours(**slots):
    counts = [0] * 24
    for key, value in slots.items():
        counts[int(key[1:])] = value
    return counts


def make_report():
    return RhythmReport(
        days=30,
        hour_histogram=hours(h9=4, h14=2),
        dow_histogram=[1, 2, 0, 0, 3, 1, 0],
        after_hours=AfterHoursStats(
            total_commits=10,
            after_hours_commits=4,
            weekend_commits=1,
            after_hours_ratio=0.4,
            weekend_ratio=0.1,
        ),
        session_distribution=SessionDistribution(
            sessions=["a", "b"], median_minutes=30, p90_minutes=60, mean_minutes=45
        ),
        burst_stats=BurstStats(pattern=CommitPattern.BURST, cv_of_gaps=1.5),
    )


def test_hour_histogram_empty():
    assert render_hour_histogram([0] * 24) == "No commit activity in this period."


def test_hour_histogram_marks_peak():
    lines = render_hour_histogram(hours(h9=4, h14=2)).splitlines()
    assert len(lines) == 25
    assert lines[9].endswith("<- peak")
    assert "\u2588" * 20 in lines[9]
    assert not lines[14].endswith("<- peak")
    assert lines[14].count("\u2588") < lines[9].count("\u2588")
    assert lines[-1].startswith("Peak: 09:00")
    assert "10:00" in lines[-1]


def test_hour_histogram_bar_columns_align():
    lines = render_hour_histogram(hours(h3=7, h4=1)).splitlines()[:24]
    widths = {len(line.replace("  <- peak", "")) for line in lines}
    assert len(widths) == 1


def test_hour_histogram_tie_picks_last():
    lines = render_hour_histogram(hours(h3=2, h5=2)).splitlines()
    assert lines[5].endswith("<- peak")
    assert not lines[3].endswith("<- peak")
    assert lines[-1].startswith("Peak: 05:00")


def test_hour_histogram_wraps_midnight_and_singular():
    last = render_hour_histogram(hours(h23=1)).splitlines()[-1]
    assert last == "Peak: 23:00\u201300:00 (1 commit)"


def test_hour_histogram_wrong_length():
    with pytest.raises(ValueError):
        render_hour_histogram([1] * 7)


def test_dow_histogram_empty():
    assert render_dow_histogram([0] * 7) == "No commit activity in this period."


def test_dow_histogram_weekend_tags_and_peak():
    lines = render_dow_histogram([1, 0, 0, 0, 0, 3, 1]).splitlines()
    assert len(lines) == 8
    assert lines[0].startswith("Mon | ")
    assert not lines[0].endswith("[wknd]")
    assert lines[5].endswith("<- peak [wknd]")
    assert lines[6].endswith("[wknd]")
    assert lines[-1] == "Peak: Sat (3 commits)"


def test_dow_histogram_wrong_length():
    with pytest.raises(ValueError):
        render_dow_histogram([1] * 24)


def test_after_hours_below_half():
    out = render_after_hours_stats(make_report().after_hours)
    assert out.splitlines()[0].startswith("After-hours: 4/10 commits")
    assert out.splitlines()[1].startswith("Weekend:     1/10 commits")
    assert "(more than half outside core hours)" not in out


def test_after_hours_above_half():
    stats = AfterHoursStats(7, 6, 0, 6 / 7, 0.0)
    out = render_after_hours_stats(stats)
    assert out.splitlines()[-1] == "(more than half outside core hours)"


def test_after_hours_rounds_half_up():
    stats = AfterHoursStats(8, 1, 0, 0.125, 0.0)
    assert "(13%)" in render_after_hours_stats(stats)


def test_session_distribution_empty():
    assert render_session_distribution(SessionDistribution()) == "No sessions detected in this period"


def test_session_distribution_values():
    dist = make_report().session_distribution
    out = render_session_distribution(dist)
    assert out.startswith("Session lengths (2 sessions):")
    assert f"median {format_duration(timedelta(minutes=30))}" in out
    assert f"p90 {format_duration(timedelta(minutes=60))}" in out
    assert f"mean {format_duration(timedelta(minutes=45))}" in out


def test_session_distribution_singular():
    dist = SessionDistribution(sessions=["only"], median_minutes=5, p90_minutes=5, mean_minutes=5)
    assert "(1 session)" in render_session_distribution(dist)


def test_burst_stats_labels():
    assert render_burst_stats(BurstStats(CommitPattern.BURST, 1.5)) == "Commit pattern: bursty (CV=1.50)"
    assert render_burst_stats(BurstStats(CommitPattern.STEADY, 0.25)) == "Commit pattern: steady (CV=0.25)"
    assert (
        render_burst_stats(BurstStats(CommitPattern.INSUFFICIENT, 0.0))
        == "Commit pattern: insufficient data (< 3 commits)"
    )


def test_render_rhythm_sections_in_order():
    out = render_rhythm(make_report())
    assert out.startswith("=== Work Rhythm (last 30 days) ===")
    headings = ["Hour of day", "Day of week", "Sustainability", "Session lengths", "Commit pattern"]
    positions = [out.index(h + "\n") for h in headings]
    assert positions == sorted(positions)
    assert out.endswith(render_burst_stats(make_report().burst_stats))


def test_render_rhythm_colored_strips_to_plain():
    plain = render_rhythm(make_report())
    set_color_enabled(True)
    colored = render_rhythm(make_report())
    assert "\x1b[" in colored
    assert strip_ansi(colored) == plain


def test_render_rhythm_json_round_trip():
    report = make_report()
    data = json.loads(render_rhythm_json(report))
    assert data["days"] == 30
    assert data["hour_histogram"] == list(report.hour_histogram)
    assert data["dow_histogram"] == list(report.dow_histogram)
    assert data["after_hours"]["after_hours_commits"] == 4
    assert data["after_hours"]["after_hours_ratio"] == 0.4
    assert data["session_distribution"] == {
        "session_count": 2,
        "median_minutes": 30,
        "p90_minutes": 60,
        "mean_minutes": 45,
    }
    assert data["burst_stats"] == {"pattern": "Burst", "cv_of_gaps": 1.5}


def test_render_rhythm_json_non_finite_becomes_null():
    report = make_report()
    report.burst_stats = BurstStats(CommitPattern.STEADY, float("nan"))
    data = json.loads(render_rhythm_json(report))
    assert data["burst_stats"]["cv_of_gaps"] is None