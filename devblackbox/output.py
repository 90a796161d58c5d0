"""Rendering of activity summaries as terminal text, JSON, CSV and standup notes."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timedelta, timezone
from typing import Any

from devblackbox.models import ActivitySummary, RepoSummary, ReviewInfo
from devblackbox.style import Color, paint

CSV_HEADER = (
    "period",
    "repo_name",
    "event_type",
    "branch",
    "commit_hash",
    "message",
    "timestamp",
    "repo_estimated_minutes",
    "pr_number",
    "pr_title",
)

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_REVIEW_PRIORITY = {"APPROVED": 3, "CHANGES_REQUESTED": 2}
_CSV_REVIEW_LABELS = {
    "APPROVED": "review_approved",
    "CHANGES_REQUESTED": "review_changes_requested",
}


def _whole_minutes(d: timedelta) -> int:
    """Whole minutes in ``d``, truncated toward zero."""
    micros = d // timedelta(microseconds=1)
    minutes = abs(micros) // 60_000_000
    return minutes if micros >= 0 else -minutes


def _hours_minutes(d: timedelta) -> tuple[int, int]:
    total = _whole_minutes(d)
    hours = abs(total) // 60
    if total < 0:
        hours = -hours
    return hours, total - hours * 60


def format_duration(d: timedelta) -> str:
    """Format a duration with a ``~`` prefix, e.g. ``~1h 30m`` or ``~45m``."""
    return "~" + format_duration_plain(d)


def format_duration_plain(d: timedelta) -> str:
    """Format a duration without a prefix, e.g. ``1h 30m`` or ``45m``."""
    hours, minutes = _hours_minutes(d)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _rfc3339(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    if dt.microsecond == 0:
        spec = "seconds"
    elif dt.microsecond % 1000 == 0:
        spec = "milliseconds"
    else:
        spec = "microseconds"
    return dt.isoformat(timespec=spec)


def _repo_json(repo: RepoSummary) -> dict[str, Any]:
    out: dict[str, Any] = {
        "repo_name": repo.repo_name,
        "repo_path": repo.repo_path,
        "commits": repo.commits,
        "branches": list(repo.branches),
        "estimated_minutes": _whole_minutes(repo.estimated_time),
        "events": [
            {
                "event_type": event.event_type,
                "branch": event.branch,
                "commit_hash": event.commit_hash,
                "message": event.message,
                "timestamp": _rfc3339(event.timestamp),
            }
            for event in repo.events
        ],
    }
    if repo.pr_info is not None:
        out["pr_info"] = [pr.to_dict() for pr in repo.pr_info]
    if repo.reviews:
        out["reviews"] = [
            {
                "pr_number": review.pr_number,
                "pr_title": review.pr_title,
                "action": review.action,
                "reviewed_at": _rfc3339(review.reviewed_at),
            }
            for review in repo.reviews
        ]
    if repo.ai_sessions:
        out["ai_sessions"] = [
            {
                "session_id": session.session_id,
                "started_at": _rfc3339(session.started_at),
                "ended_at": None if session.ended_at is None else _rfc3339(session.ended_at),
                "duration_minutes": _whole_minutes(session.duration),
                "turns": session.turns,
            }
            for session in repo.ai_sessions
        ]
    return out


def render_json(summary: ActivitySummary) -> str:
    """Render the summary as pretty-printed JSON."""
    document = {
        "period_label": summary.period_label,
        "total_commits": summary.total_commits,
        "total_reviews": summary.total_reviews,
        "total_repos": summary.total_repos,
        "total_estimated_minutes": _whole_minutes(summary.total_estimated_time),
        "total_ai_session_minutes": _whole_minutes(summary.total_ai_session_time),
        "repos": [_repo_json(repo) for repo in summary.repos],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def _csv_rows(summary: ActivitySummary):
    period = summary.period_label
    for repo in summary.repos:
        minutes = _whole_minutes(repo.estimated_time)
        first_pr = repo.pr_info[0] if repo.pr_info else None
        pr_number = str(first_pr.number) if first_pr else ""
        pr_title = first_pr.title if first_pr else ""
        for event in repo.events:
            yield (
                period,
                repo.repo_name,
                event.event_type,
                event.branch or "",
                event.commit_hash or "",
                event.message or "",
                _rfc3339(event.timestamp),
                minutes,
                pr_number,
                pr_title,
            )
        for review in repo.reviews:
            yield (
                period,
                repo.repo_name,
                _CSV_REVIEW_LABELS.get(review.action, "review_commented"),
                "",
                "",
                f"PR #{review.pr_number}: {review.pr_title}",
                _rfc3339(review.reviewed_at),
                minutes,
                str(review.pr_number),
                review.pr_title,
            )
        for session in repo.ai_sessions:
            status = "ended" if session.ended_at is not None else "active"
            yield (
                period,
                repo.repo_name,
                "ai_session",
                "",
                "",
                f"Claude Code session ({status}, {_whole_minutes(session.duration)}m)",
                _rfc3339(session.started_at),
                minutes,
                "",
                "",
            )


def render_csv(summary: ActivitySummary) -> str:
    """Render the summary as CSV with a header row, one row per event."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    rows = list(_csv_rows(summary))
    if rows:
        writer.writerow(CSV_HEADER)
        writer.writerows(rows)
    if all(not repo.events for repo in summary.repos):
        writer.writerow(CSV_HEADER)
    return buffer.getvalue().rstrip()


def _review_icon(action: str) -> str:
    if action == "APPROVED":
        return paint("\u2713", Color.GREEN)
    if action == "CHANGES_REQUESTED":
        return paint("\u2717", Color.YELLOW)
    return paint("\U0001f4ac", Color.CYAN)


def _most_significant_reviews(reviews: list[ReviewInfo]) -> list[ReviewInfo]:
    best: dict[int, ReviewInfo] = {}
    for review in reviews:
        current = best.get(review.pr_number)
        if current is None or _REVIEW_PRIORITY.get(review.action, 1) > _REVIEW_PRIORITY.get(
            current.action, 1
        ):
            best[review.pr_number] = review
    return [best[number] for number in sorted(best)]


def _repo_lines(repo: RepoSummary):
    pr_text = " ".join(f"[PR #{pr.number}: {pr.title}]" for pr in repo.pr_info or [])
    pr_suffix = f" {paint(pr_text, Color.CYAN)}" if pr_text else ""
    yield (
        f"{paint(repo.repo_name, Color.BOLD, Color.GREEN)} "
        f"[{paint(', '.join(repo.branches), Color.DIMMED)}] "
        f"({paint(format_duration(repo.estimated_time), Color.YELLOW)}){pr_suffix}"
    )

    for event in repo.events:
        if event.event_type == "commit":
            short = event.commit_hash[:7] if event.commit_hash is not None else "-------"
            yield f"  {paint(short, Color.DIMMED)} {event.message or ''}"
        else:
            detail = f" -> {event.branch}" if event.branch is not None else ""
            yield f"  {paint('~', Color.DIMMED)} {paint(event.event_type, Color.ITALIC)}{detail}"

    if repo.reviews:
        unique = _most_significant_reviews(repo.reviews)
        word = "PR" if len(unique) == 1 else "PRs"
        yield f"  {paint('~', Color.DIMMED)} Reviewed {len(unique)} {word}"
        for review in unique:
            yield f"    {_review_icon(review.action)} PR #{review.pr_number}: {review.pr_title}"

    if repo.ai_sessions:
        total = sum((s.duration for s in repo.ai_sessions), timedelta())
        yield (
            f"  {paint('~', Color.DIMMED)} {len(repo.ai_sessions)} Claude Code sessions "
            f"({paint(format_duration(total), Color.MAGENTA)})"
        )
        for session in repo.ai_sessions:
            if session.ended_at is None:
                status = paint("active", Color.MAGENTA)
            else:
                status = format_duration(session.duration)
            turns = f", {session.turns} turns" if session.turns is not None else ""
            yield f"    {paint('o', Color.MAGENTA)} {status}{turns}"

    yield ""


def render_summary_to_string(summary: ActivitySummary) -> str:
    """Render the summary as terminal text, coloured when colours are enabled."""
    if not summary.repos:
        return paint(f"No activity recorded for {summary.period_label}.", Color.DIMMED)

    repo_word = "repo" if summary.total_repos == 1 else "repos"
    review_suffix = f", {summary.total_reviews} reviews" if summary.total_reviews > 0 else ""
    ai_suffix = (
        f", AI sessions: {format_duration(summary.total_ai_session_time)}"
        if summary.total_ai_session_time > timedelta()
        else ""
    )
    lines = [
        paint(f"=== {summary.period_label} ===", Color.BOLD, Color.CYAN),
        "",
        f"{summary.total_commits} commits{review_suffix}{ai_suffix} across "
        f"{summary.total_repos} {repo_word} ({format_duration(summary.total_estimated_time)})",
        "",
    ]
    for repo in summary.repos:
        lines.extend(_repo_lines(repo))
    return "\n".join(lines)


def render_summary(summary: ActivitySummary) -> None:
    """Print the terminal rendering of the summary to standard output."""
    print(render_summary_to_string(summary), end="")


def _short_date(dt: datetime) -> str:
    return f"{_MONTH_ABBR[dt.month - 1]} {dt.day}"


def render_standup(summary: ActivitySummary, now: datetime | None = None) -> str:
    """Render plain text suited to a chat standup post, without escape codes."""
    if not summary.repos:
        return f"No activity recorded for {summary.period_label}."

    if now is None:
        now = datetime.now().astimezone()
    if summary.period_label == "This Week":
        monday = now - timedelta(days=now.weekday())
        header = f"**{summary.period_label} ({_short_date(monday)} - {_short_date(now)})**"
    else:
        header = f"**{summary.period_label} ({_short_date(now)})**"
    lines = [header, ""]

    for repo in summary.repos:
        lines.append(f"\u2022 {repo.repo_name} (~{format_duration_plain(repo.estimated_time)})")

        branch_commits: dict[str, int] = {}
        for event in repo.events:
            if event.event_type == "commit":
                branch = event.branch if event.branch is not None else "unknown"
                branch_commits[branch] = branch_commits.get(branch, 0) + 1
        for branch in sorted(branch_commits):
            count = branch_commits[branch]
            word = "commit" if count == 1 else "commits"
            lines.append(f"  - {branch}: {count} {word}")

        for pr in repo.pr_info or []:
            action = "Merged" if pr.state == "MERGED" else "Opened"
            lines.append(f"  - {action} PR #{pr.number}")

        if repo.reviews:
            seen = list(dict.fromkeys(review.pr_number for review in repo.reviews))
            lines.append("  - Reviewed " + ", ".join(f"PR #{n}" for n in seen))

        if repo.ai_sessions:
            total = sum((s.duration for s in repo.ai_sessions), timedelta())
            word = "session" if len(repo.ai_sessions) == 1 else "sessions"
            lines.append(
                f"  - {len(repo.ai_sessions)} Claude Code {word} ({format_duration_plain(total)})"
            )

    repo_word = "repo" if summary.total_repos == 1 else "repos"
    lines.append("")
    lines.append(
        f"Total: ~{format_duration_plain(summary.total_estimated_time)} "
        f"across {summary.total_repos} {repo_word}"
    )
    return "\n".join(lines)