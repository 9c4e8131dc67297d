"""Unit tests for vote score aggregation.

Pure function tests - fast, no mocks needed.
"""

import pytest

from safezone.core.votes import (
    ReportScore,
    Vote,
    aggregate_scores,
    parse_vote,
    parse_votes,
    rank_by_score,
)


def up(report_id, user_id="u"):
    return Vote(report_id=report_id, user_id=user_id, vote_type="upvote")


def down(report_id, user_id="u"):
    return Vote(report_id=report_id, user_id=user_id, vote_type="downvote")


class TestParseVote:
    """Tests for parse_vote()."""

    def test_parses_vote_type(self):
        """vote_type strings are kept."""
        vote = parse_vote({"report_id": 1, "user_id": "a", "vote_type": "downvote"})
        assert vote == Vote(report_id=1, user_id="a", vote_type="downvote")

    @pytest.mark.parametrize("value,expected", [(1, "upvote"), (-1, "downvote")])
    def test_parses_numeric_value(self, value, expected):
        """A numeric value field maps to a vote type."""
        vote = parse_vote({"report_id": 1, "user_id": "a", "value": value})
        assert vote.vote_type == expected

    @pytest.mark.parametrize("row", [
        {"report_id": 1, "vote_type": "meh"},
        {"report_id": 1, "value": 0},
        {"report_id": 1, "value": True},
        {"vote_type": "upvote"},
        {"report_id": "x", "vote_type": "upvote"},
    ])
    def test_invalid_rows(self, row):
        """Unknown types, zero, booleans and bad ids are rejected."""
        assert parse_vote(row) is None

    def test_parse_votes_drops_invalid(self):
        """Invalid rows are skipped."""
        rows = [
            {"report_id": 1, "vote_type": "upvote"},
            {"report_id": 1, "vote_type": "sideways"},
        ]
        assert len(parse_votes(rows)) == 1


class TestAggregateScores:
    """Tests for aggregate_scores()."""

    def test_counts_per_report(self):
        """Upvotes and downvotes are tallied per report."""
        votes = [up(1, "a"), up(1, "b"), down(1, "c"), down(2, "a")]

        scores = aggregate_scores(votes)

        assert scores[1] == ReportScore(report_id=1, upvotes=2, downvotes=1)
        assert scores[1].score == 1
        assert scores[2].score == -1

    def test_requested_reports_without_votes_score_zero(self):
        """Requested reports appear even with no votes."""
        scores = aggregate_scores([up(1)], report_ids=[1, 5])

        assert scores[5] == ReportScore(report_id=5)
        assert scores[5].score == 0

    def test_filters_to_requested_reports(self):
        """Votes for other reports are ignored."""
        scores = aggregate_scores([up(1), up(2)], report_ids=[1])
        assert set(scores) == {1}

    def test_no_votes(self):
        """Empty input, empty result."""
        assert aggregate_scores([]) == {}


class TestRankByScore:
    """Tests for rank_by_score()."""

    def test_highest_score_first_ties_by_id(self):
        """Sorted by score descending, then report id."""
        scores = {
            1: ReportScore(report_id=1, upvotes=1),
            2: ReportScore(report_id=2, upvotes=3),
            3: ReportScore(report_id=3, upvotes=1),
            4: ReportScore(report_id=4, downvotes=2),
        }

        ranked = rank_by_score(scores)

        assert [s.report_id for s in ranked] == [2, 1, 3, 4]

    def test_to_dict(self):
        """Serialized score includes the computed score."""
        score = ReportScore(report_id=9, upvotes=4, downvotes=1)
        assert score.to_dict() == {
            "report_id": 9,
            "upvotes": 4,
            "downvotes": 1,
            "score": 3,
        }
