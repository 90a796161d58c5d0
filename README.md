# devblackbox

`devblackbox` turns git activity that you have already collected into readable
reports. The activity can include commits, branch switches, pull-request
reviews and AI coding sessions. The package provides:

- terminal summaries, standup notes for chat, JSON and CSV
  (`devblackbox.output`)
- a GitHub-style contribution heatmap with streak statistics
  (`devblackbox.heatmap`)
- a work-rhythm report with hour-of-day and day-of-week histograms,
  after-hours and weekend share, session lengths and commit pattern
  (`devblackbox.rhythm_report`)
- the data types behind these reports (`devblackbox.models`) and switchable
  ANSI styling (`devblackbox.style`)

It uses only the standard library.

## Installation

```
pip install devblackbox
```

## Activity summaries

```python
from datetime import datetime, timedelta, timezone

from devblackbox.models import ActivityEvent, ActivitySummary, RepoSummary
from devblackbox.output import render_csv, render_json, render_standup, render_summary

repo = RepoSummary(
    repo_path="/home/me/code/myproject",
    repo_name="myproject",
    commits=1,
    branches=["main"],
    estimated_time=timedelta(minutes=45),
    events=[
        ActivityEvent(
            event_type="commit",
            branch="main",
            commit_hash="abc1234",
            message="fix bug",
            timestamp=datetime.now(timezone.utc),
        )
    ],
)
summary = ActivitySummary.from_repos("Today", [repo], timedelta(minutes=45))

render_summary(summary)          # terminal text, coloured when enabled
print(render_json(summary))      # pretty-printed JSON
print(render_csv(summary))       # flat CSV with a header row
print(render_standup(summary))   # plain text, no escape codes
```

`ActivitySummary.from_repos` adds up commits across repositories, counts
reviews as distinct PR numbers per repository, and totals AI session time.

In JSON, `reviews` and `ai_sessions` are left out of a repository when they
are empty, and `pr_info` is left out when it is `None`. In CSV, each event,
review and AI session becomes one row. `render_standup` takes an optional
`now` for the date in its header. For the period label `"This Week"` the
header shows the range from Monday to `now`.

`format_duration(timedelta(minutes=90))` gives `"~1h 30m"`, and
`format_duration_plain` gives the same text without the `~`.

`PrInfo.from_gh` builds a pull request from one entry of `gh pr list --json`
output, which uses the `number`, `title`, `state` and `headRefName` fields.
`PrInfo.to_dict` returns the same shape. It raises `ValueError` when a field
is missing or has the wrong type.

## Heatmap

```python
from datetime import date

from devblackbox.heatmap import HeatmapData, render_heatmap_ansi, validate_weeks

data = HeatmapData.from_counts({date(2025, 3, 1): 4, date(2025, 3, 2): 7})
print(render_heatmap_ansi(data, validate_weeks(12), today=date(2025, 3, 5)))
print(data.stats(today=date(2025, 3, 5)))
```

Each day falls into one of five intensity tiers, from 0 to 4, relative to the
busiest day (`HeatmapData.intensity`). The grid has weeks as columns, with the
oldest week on the left, and days as rows, with Monday at the top. Month
labels run above the grid and a statistics line follows it. When no commits
were recorded, a further line says so.

Other functions in `devblackbox.heatmap`:

- `validate_weeks` raises `ValueError` outside the range 1 to 260.
- `heatmap_range` returns the date range to query for a given number of weeks.
- `render_heatmap_cells` lays the grid out as rows of `Cell` objects that fit
  an area of a given width and height, for drawing on a screen of your own.
- `longest_streak` and `current_streak` work on any mapping of dates to counts.

## Work rhythm

```python
from devblackbox.rhythm_report import (
    AfterHoursStats, BurstStats, CommitPattern, RhythmReport, SessionDistribution,
    render_rhythm, render_rhythm_json,
)

hours = [0] * 24
hours[10] = 5
report = RhythmReport(
    days=30,
    hour_histogram=hours,
    dow_histogram=[1, 2, 0, 1, 1, 0, 0],
    after_hours=AfterHoursStats(total_commits=5, after_hours_commits=1, after_hours_ratio=0.2),
    session_distribution=SessionDistribution(),
    burst_stats=BurstStats(CommitPattern.STEADY, 0.4),
)
print(render_rhythm(report))
print(render_rhythm_json(report))
```

Histograms must have 24 (hour) or 7 (day-of-week, Monday first) non-negative
counts. Otherwise `ValueError` is raised.

## Colour

By default, colour is used when standard output is a terminal. The `NO_COLOR`,
`CLICOLOR_FORCE` and `CLICOLOR=0` environment variables are honoured.
`devblackbox.style.set_color_enabled(False)` turns colour off,
`set_color_enabled(True)` forces it on, and `set_color_enabled(None)` returns
to automatic detection. `strip_ansi` removes escape sequences from text.

## What this package does not do

`devblackbox` is a library for reporting only:

- It does not watch repositories.
- It does not run a background recorder.
- It does not store activity in a database.
- It does not query GitHub.
- It has no command-line program.

You collect the activity yourself, build the data types in
`devblackbox.models`, `HeatmapData` or `RhythmReport`, and pass them to the
rendering functions. Session detection, burst classification and after-hours
ratios are likewise inputs to the rhythm report; the package does not compute
them.