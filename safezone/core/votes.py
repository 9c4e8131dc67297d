"""Vote score aggregation - Pure functions.

Scores are computed in a single pass over the vote rows of one query
instead of re-fetching votes per report.
"""

from dataclasses import dataclass
from typing import Any


UPVOTE = "upvote"
DOWNVOTE = "downvote"


@dataclass(frozen=True)
class Vote:
    """A single user's vote on a report.

    Attributes:
        report_id: Report voted on
        user_id: Voter
        vote_type: 'upvote' or 'downvote'
    """
    report_id: int
    user_id: str
    vote_type: str


@dataclass(frozen=True)
class ReportScore:
    """Aggregated votes for one report."""
    report_id: int
    upvotes: int = 0
    downvotes: int = 0

    @property
    def score(self) -> int:
        """Upvotes minus downvotes."""
        return self.upvotes - self.downvotes

    def to_dict(self) -> dict[str, int]:
        """Convert to a JSON-serializable dict."""
        return {
            "report_id": self.report_id,
            "upvotes": self.upvotes,
            "downvotes": self.downvotes,
            "score": self.score,
        }


def _normalize_vote_type(value: Any) -> str | None:
    """Map 'upvote'/'downvote' or 1/-1 to a vote type."""
    if value in (UPVOTE, DOWNVOTE):
        return value
    if isinstance(value, bool):
        return None
    if value == 1:
        return UPVOTE
    if value == -1:
        return DOWNVOTE
    return None


def parse_vote(data: dict[str, Any]) -> Vote | None:
    """Parse a vote row into a Vote.

    Pure function. Accepts either vote_type or a numeric value field.

    Returns:
        Vote object or None if invalid
    """
    try:
        raw_type = data.get("vote_type", data.get("value"))
        vote_type = _normalize_vote_type(raw_type)
        if vote_type is None:
            return None

        return Vote(
            report_id=int(data["report_id"]),
            user_id=str(data.get("user_id", "")),
            vote_type=vote_type,
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_votes(rows: list[dict[str, Any]]) -> list[Vote]:
    """Parse vote rows, dropping invalid ones."""
    votes = []
    for row in rows:
        vote = parse_vote(row)
        if vote is not None:
            votes.append(vote)
    return votes


def aggregate_scores(
    votes: list[Vote],
    report_ids: list[int] | None = None,
) -> dict[int, ReportScore]:
    """Aggregate votes into per-report scores.

    Pure function. One pass over votes.

    Args:
        votes: Votes to aggregate
        report_ids: If given, only these reports are scored and each
            appears in the result even without votes

    Returns:
        Mapping of report id to ReportScore
    """
    wanted = set(report_ids) if report_ids is not None else None
    counts: dict[int, list[int]] = {rid: [0, 0] for rid in (report_ids or [])}

    for vote in votes:
        if wanted is not None and vote.report_id not in wanted:
            continue
        tally = counts.setdefault(vote.report_id, [0, 0])
        if vote.vote_type == UPVOTE:
            tally[0] += 1
        else:
            tally[1] += 1

    return {
        rid: ReportScore(report_id=rid, upvotes=up, downvotes=down)
        for rid, (up, down) in counts.items()
    }


def rank_by_score(scores: dict[int, ReportScore]) -> list[ReportScore]:
    """Sort scores by score descending, then report id ascending.

    Pure function.
    """
    return sorted(scores.values(), key=lambda s: (-s.score, s.report_id))
