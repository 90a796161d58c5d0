"""Data types describing recorded developer activity."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Mapping


class OutputFormat(enum.Enum):
    """How a report is written out."""

    PRETTY = "pretty"
    JSON = "json"
    CSV = "csv"


@dataclass
class PrInfo:
    """A pull request as reported by the GitHub CLI."""

    number: int
    title: str
    state: str
    head_ref_name: str

    @classmethod
    def from_gh(cls, data: Mapping[str, Any]) -> "PrInfo":
        """Build from one entry of ``gh pr list --json`` output."""
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        try:
            number = data["number"]
            title = data["title"]
            state = data["state"]
            head = data["headRefName"]
        except KeyError as exc:
            raise ValueError(f"missing field {exc.args[0]!r}") from None
        if not isinstance(number, int) or isinstance(number, bool):
            raise ValueError("field 'number' must be an integer")
        for name, value in (("title", title), ("state", state), ("headRefName", head)):
            if not isinstance(value, str):
                raise ValueError(f"field {name!r} must be a string")
        return cls(number=number, title=title, state=state, head_ref_name=head)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form, using the GitHub CLI field names."""
        return {
            "number": self.number,
            "title": self.title,
            "state": self.state,
            "headRefName": self.head_ref_name,
        }


@dataclass
class ActivityEvent:
    """A single git event: commit, branch switch, merge and the like."""

    event_type: str
    timestamp: datetime
    branch: str | None = None
    commit_hash: str | None = None
    message: str | None = None


@dataclass
class ReviewInfo:
    """A review left on a pull request."""

    pr_number: int
    pr_title: str
    action: str
    reviewed_at: datetime


@dataclass
class AiSessionInfo:
    """An AI assistant session attached to a repository."""

    session_id: str
    started_at: datetime
    duration: timedelta
    ended_at: datetime | None = None
    turns: int | None = None


@dataclass
class RepoSummary:
    """Activity within one repository over a period."""

    repo_path: str
    repo_name: str
    commits: int = 0
    branches: list[str] = field(default_factory=list)
    estimated_time: timedelta = field(default_factory=timedelta)
    events: list[ActivityEvent] = field(default_factory=list)
    pr_info: list[PrInfo] | None = None
    reviews: list[ReviewInfo] = field(default_factory=list)
    ai_sessions: list[AiSessionInfo] = field(default_factory=list)
    presence_intervals: list[tuple[datetime, datetime]] = field(default_factory=list)


@dataclass
class ActivitySummary:
    """Activity across all repositories over a labelled period."""

    period_label: str
    total_commits: int
    total_reviews: int
    total_repos: int
    total_estimated_time: timedelta
    total_ai_session_time: timedelta
    repos: list[RepoSummary] = field(default_factory=list)

    @classmethod
    def from_repos(
        cls,
        period_label: str,
        repos: list[RepoSummary],
        total_estimated_time: timedelta,
    ) -> "ActivitySummary":
        """Aggregate per-repository totals; reviews count distinct PRs per repo."""
        repos = list(repos)
        return cls(
            period_label=period_label,
            total_commits=sum(repo.commits for repo in repos),
            total_reviews=sum(
                len({review.pr_number for review in repo.reviews}) for repo in repos
            ),
            total_repos=len(repos),
            total_estimated_time=total_estimated_time,
            total_ai_session_time=sum(
                (s.duration for repo in repos for s in repo.ai_sessions), timedelta()
            ),
            repos=repos,
        )