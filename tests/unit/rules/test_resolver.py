"""Unit tests for media field resolution."""

from datetime import date

from factories import days_ago, make_episode, make_movie, make_series

from cleanarr.domain import WatchEntry
from cleanarr.rules.resolver import (
    count_distinct_watchers,
    resolve_movie_field,
    resolve_series_field,
)


class TestResolveMovieField:
    """Tests for resolve_movie_field()."""

    def test_simple_fields(self) -> None:
        movie = make_movie(requested_by="alice", monitored=False)
        assert resolve_movie_field(movie, "title") == "Heat"
        assert resolve_movie_field(movie, "year") == 1995
        assert resolve_movie_field(movie, "sizeOnDisk") == 8_000_000_000
        assert resolve_movie_field(movie, "quality") == "Bluray-1080p"
        assert resolve_movie_field(movie, "requestedBy") == "alice"
        assert resolve_movie_field(movie, "monitored") is False

    def test_absent_value_is_none(self) -> None:
        assert resolve_movie_field(make_movie(), "lastWatched") is None

    def test_unknown_field_is_none(self) -> None:
        assert resolve_movie_field(make_movie(), "rating") is None

    def test_series_only_field_is_none(self) -> None:
        assert resolve_movie_field(make_movie(), "episodeCount") is None
        assert resolve_movie_field(make_movie(), "totalSize") is None

    def test_watch_count_counts_distinct_users(self) -> None:
        movie = make_movie(
            watch_history=[
                WatchEntry("alice", date(2024, 1, 1)),
                WatchEntry("bob", date(2024, 1, 2)),
                WatchEntry("alice", date(2024, 2, 1)),
            ]
        )
        assert resolve_movie_field(movie, "watchCount") == 2

    def test_watch_count_ignores_empty_users(self) -> None:
        movie = make_movie(
            watch_history=[
                WatchEntry("", date(2024, 1, 1)),
                WatchEntry("bob", date(2024, 1, 2)),
            ]
        )
        assert resolve_movie_field(movie, "watchCount") == 1

    def test_watch_count_empty_history(self) -> None:
        assert resolve_movie_field(make_movie(), "watchCount") == 0


class TestResolveSeriesField:
    """Tests for resolve_series_field()."""

    def test_last_watched_is_latest_episode(self) -> None:
        episodes = [
            make_episode(id=1, last_watched=days_ago(30)),
            make_episode(id=2, last_watched=days_ago(5)),
            make_episode(id=3),
        ]
        assert resolve_series_field(make_series(), episodes, "lastWatched") == days_ago(5)

    def test_last_watched_none_without_watches(self) -> None:
        episodes = [make_episode(id=1), make_episode(id=2)]
        assert resolve_series_field(make_series(), episodes, "lastWatched") is None

    def test_watch_count_across_episodes(self) -> None:
        episodes = [
            make_episode(id=1, watch_history=[WatchEntry("alice", date(2024, 1, 1))]),
            make_episode(
                id=2,
                watch_history=[
                    WatchEntry("alice", date(2024, 1, 2)),
                    WatchEntry("carol", date(2024, 1, 2)),
                ],
            ),
        ]
        assert resolve_series_field(make_series(), episodes, "watchCount") == 2

    def test_episode_count(self) -> None:
        episodes = [make_episode(id=i) for i in range(1, 4)]
        assert resolve_series_field(make_series(), episodes, "episodeCount") == 3

    def test_total_size(self) -> None:
        assert resolve_series_field(make_series(), [], "totalSize") == 60_000_000_000

    def test_movie_only_field_is_none(self) -> None:
        assert resolve_series_field(make_series(), [], "sizeOnDisk") is None
        assert resolve_series_field(make_series(), [], "quality") is None


def test_count_distinct_watchers_multiple_histories() -> None:
    histories = [
        [WatchEntry("alice", date(2024, 1, 1))],
        [WatchEntry("bob", date(2024, 1, 1)), WatchEntry("alice", date(2024, 1, 3))],
        [],
    ]
    assert count_distinct_watchers(histories) == 2
