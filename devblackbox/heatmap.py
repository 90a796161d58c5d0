"""GitHub-style contribution heatmap: intensity tiers, streaks and rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Mapping, Tuple, Union

from devblackbox.style import truecolor

DAY_LABEL_WIDTH = 4
CELL_WIDTH = 2
DAY_LABELS = ("Mon ", "    ", "Wed ", "    ", "Fri ", "    ", "Sun ")
BLOCK = "\u2588\u2588"
BLANK = "  "
MIN_WEEKS = 1
MAX_WEEKS = 260

DARK_GRAY = "dark_gray"
WHITE = "white"

CellColor = Union[str, Tuple[int, int, int], None]

_MONTH_LABELS = {
    1: "Ja",
    2: "Fe",
    3: "Mr",
    4: "Ap",
    5: "My",
    6: "Jn",
    7: "Jl",
    8: "Au",
    9: "Se",
    10: "Oc",
    11: "Nv",
    12: "De",
}

_TIER_RGB = {
    1: (0, 68, 0),
    2: (0, 128, 0),
    3: (0, 185, 0),
}
_MAX_TIER_RGB = (57, 211, 83)


@dataclass(frozen=True)
class HeatmapStats:
    """Summary statistics derived from heatmap data."""

    total_commits: int
    active_days: int
    longest_streak: int
    current_streak: int


@dataclass(frozen=True)
class Cell:
    """A piece of text in the rendered grid with an optional foreground colour."""

    text: str
    fg: CellColor = None


@dataclass
class HeatmapData:
    """Daily commit counts and the largest count, used for intensity tiers."""

    days: dict[date, int] = field(default_factory=dict)
    max_count: int = 0

    @classmethod
    def from_counts(cls, counts: Mapping[date, int]) -> "HeatmapData":
        """Build from a mapping of day to commit count."""
        days = dict(sorted(counts.items()))
        return cls(days=days, max_count=max(days.values(), default=0))

    def intensity(self, day: date) -> int:
        """Return the intensity tier 0-4 for ``day`` (0 means no commits)."""
        if self.max_count == 0:
            return 0
        count = self.days.get(day, 0)
        if count == 0:
            return 0
        quarter = self.max_count // 4
        if quarter == 0:
            if count >= self.max_count:
                return 4
            ratio = count / self.max_count
            if ratio >= 0.75:
                return 4
            if ratio >= 0.5:
                return 3
            if ratio >= 0.25:
                return 2
            return 1
        if count >= 3 * quarter:
            return 4
        if count >= 2 * quarter:
            return 3
        if count >= quarter:
            return 2
        return 1

    def stats(self, today: date | None = None) -> HeatmapStats:
        """Compute totals, active days and the longest and current streaks."""
        if today is None:
            today = date.today()
        return HeatmapStats(
            total_commits=sum(self.days.values()),
            active_days=sum(1 for count in self.days.values() if count > 0),
            longest_streak=longest_streak(self.days),
            current_streak=current_streak(self.days, today),
        )


def current_streak(days: Mapping[date, int], today: date | None = None) -> int:
    """Count consecutive active days ending today, or yesterday if today is empty."""
    if today is None:
        today = date.today()
    day = today if days.get(today, 0) > 0 else today - timedelta(days=1)
    streak = 0
    while days.get(day, 0) > 0:
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(days: Mapping[date, int]) -> int:
    """Return the longest run of consecutive days with at least one commit."""
    best = 0
    current = 0
    prev: date | None = None
    for day, count in sorted(days.items()):
        if count == 0:
            current = 0
            prev = day
            continue
        if (
            prev is not None
            and day == prev + timedelta(days=1)
            and days.get(prev, 0) > 0
        ):
            current += 1
        else:
            current = 1
        best = max(best, current)
        prev = day
    return best


def intensity_color(tier: int) -> CellColor:
    """Map a tier to a grid colour: dark grey for 0, shades of green above."""
    if tier == 0:
        return DARK_GRAY
    return _TIER_RGB.get(tier, _MAX_TIER_RGB)


def intensity_rgb(tier: int) -> tuple[int, int, int]:
    """Map a tier to the RGB triple used for ANSI output."""
    if tier == 0:
        return (80, 80, 80)
    return _TIER_RGB.get(tier, _MAX_TIER_RGB)


def month_label(month: int) -> str:
    """Return a two-character month abbreviation, or blanks for an invalid month."""
    return _MONTH_LABELS.get(month, "  ")


def validate_weeks(weeks: int) -> int:
    """Return ``weeks`` if it lies in 1..=260, else raise ``ValueError``."""
    if not MIN_WEEKS <= weeks <= MAX_WEEKS:
        raise ValueError(f"weeks must be between {MIN_WEEKS} and {MAX_WEEKS}")
    return weeks


def _monday_of(day: date) -> date:
    return day - timedelta(days=day.weekday())


def heatmap_range(weeks: int, today: date | None = None) -> tuple[date, date]:
    """Return the (start, end) days covering ``weeks`` weeks before this Monday up to today."""
    if today is None:
        today = date.today()
    start = _monday_of(today) - timedelta(weeks=weeks)
    return start, today


def _start_monday(today: date, weeks: int) -> date:
    return _monday_of(today) - timedelta(weeks=max(weeks, 1) - 1)


def _week_months(start: date, weeks: int):
    prev = None
    for w in range(weeks):
        month = (start + timedelta(weeks=w)).month
        yield month if month != prev else None
        prev = month


def render_heatmap_cells(
    data: HeatmapData,
    width: int,
    height: int,
    weeks: int,
    today: date | None = None,
) -> list[list[Cell]]:
    """Lay out the heatmap as rows of cells fitting a ``width`` x ``height`` area.

    The first row holds month labels; then one row per weekday, Monday first.
    Weeks are truncated to fit the width. An empty list means nothing fits.
    """
    if today is None:
        today = date.today()
    available = max(0, width - DAY_LABEL_WIDTH)
    display_weeks = min(weeks, available // CELL_WIDTH)
    if display_weeks <= 0 or height < 2:
        return []

    start = _start_monday(today, display_weeks)
    month_row = [Cell(" " * DAY_LABEL_WIDTH)]
    month_row.extend(
        Cell(month_label(month), WHITE) if month is not None else Cell(BLANK)
        for month in _week_months(start, display_weeks)
    )
    lines = [month_row]

    for row, label in enumerate(DAY_LABELS):
        if len(lines) >= height:
            break
        cells = [Cell(label, DARK_GRAY)]
        for w in range(display_weeks):
            day = start + timedelta(weeks=w, days=row)
            if day > today:
                cells.append(Cell(BLANK))
            else:
                cells.append(Cell(BLOCK, intensity_color(data.intensity(day))))
        lines.append(cells)
    return lines


def render_heatmap_ansi(
    data: HeatmapData, weeks: int, today: date | None = None
) -> str:
    """Render the heatmap with month and day labels plus a stats line as text."""
    if today is None:
        today = date.today()
    start = _start_monday(today, weeks)

    parts = [" " * DAY_LABEL_WIDTH]
    parts.extend(
        month_label(month) if month is not None else BLANK
        for month in _week_months(start, weeks)
    )
    parts.append("\n")

    for row, label in enumerate(DAY_LABELS):
        parts.append(label)
        for w in range(weeks):
            day = start + timedelta(weeks=w, days=row)
            if day > today:
                parts.append(BLANK)
            else:
                parts.append(truecolor(BLOCK, *intensity_rgb(data.intensity(day))))
        parts.append("\n")

    stats = data.stats(today)
    parts.append(
        f"  {stats.total_commits} commits  {stats.active_days} active days  "
        f"{stats.longest_streak} day streak\n"
    )
    if stats.total_commits == 0:
        parts.append("No commits recorded in this period\n")
    return "".join(parts)