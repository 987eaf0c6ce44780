"""Unit tests for watch history aggregation."""

from datetime import date, datetime, timezone

from cleanarr.domain import WatchEntry
from cleanarr.sync.watch_history import summarize_plays


def at(day: int, hour: int) -> datetime:
    return datetime(2024, 5, day, hour, tzinfo=timezone.utc)


class TestSummarizePlays:
    """Tests for summarize_plays()."""

    def test_no_plays(self) -> None:
        summary = summarize_plays([])
        assert summary.history == []
        assert summary.last_watched is None
        assert summary.watched_by is None

    def test_same_user_same_day_counts_once(self) -> None:
        summary = summarize_plays([("alice", at(1, 9)), ("alice", at(1, 21))])
        assert summary.history == [WatchEntry("alice", date(2024, 5, 1))]
        assert summary.last_watched == at(1, 21)

    def test_sorted_oldest_first(self) -> None:
        summary = summarize_plays(
            [("bob", at(3, 10)), ("alice", at(1, 10)), ("alice", at(2, 10))]
        )
        assert [(e.user, e.date.day) for e in summary.history] == [
            ("alice", 1),
            ("alice", 2),
            ("bob", 3),
        ]

    def test_most_recent_play_wins(self) -> None:
        summary = summarize_plays([("alice", at(4, 8)), ("bob", at(4, 20))])
        assert summary.watched_by == "bob"
        assert summary.last_watched == at(4, 20)

    def test_two_users_same_day_both_kept(self) -> None:
        summary = summarize_plays([("alice", at(1, 9)), ("bob", at(1, 9))])
        assert len(summary.history) == 2
