"""Unit tests for the pure suggestion generation pass."""

import logging

from factories import NOW, days_ago, make_episode, make_movie, make_series, with_episodes

from cleanarr.domain import MediaType
from cleanarr.rules.parsing import serialize_conditions
from cleanarr.rules.types import Condition, Rule
from cleanarr.suggestions.generator import generate_suggestions

NOT_WATCHED = serialize_conditions(
    [Condition("lastWatched", "before", "180", "customDays")]
)
OLDER_THAN_2000 = serialize_conditions(
    [Condition("year", "smaller", "2000", "customNumber")]
)


def rule(name: str, conditions_json: str, **overrides) -> Rule:
    values = {"id": None, "name": name, "description": f"{name} reason"}
    values.update(overrides)
    return Rule(conditions_json=conditions_json, **values)


class TestGenerateSuggestions:
    """Tests for generate_suggestions()."""

    def test_matching_movie_produces_suggestion(self) -> None:
        movie = make_movie(last_watched=days_ago(200), poster_url="http://img/p.jpg")

        result = generate_suggestions([rule("Stale", NOT_WATCHED)], [movie], [], now=NOW)

        assert result.count == 1
        suggestion = result.suggestions[0]
        assert suggestion.media_type is MediaType.MOVIE
        assert suggestion.media_id == movie.id
        assert suggestion.title == "Heat"
        assert suggestion.year == 1995
        assert suggestion.size == movie.size_on_disk
        assert suggestion.poster_url == "http://img/p.jpg"
        assert suggestion.rule_name == "Stale"
        assert suggestion.reason == "Stale reason"
        assert suggestion.created_at == NOW
        assert suggestion.dismissed is False

    def test_series_suggestion_uses_total_size(self) -> None:
        series = with_episodes(
            make_series(), make_episode(last_watched=days_ago(365))
        )

        result = generate_suggestions([rule("Stale", NOT_WATCHED)], [], [series], now=NOW)

        assert result.count == 1
        assert result.suggestions[0].media_type is MediaType.SERIES
        assert result.suggestions[0].size == 60_000_000_000

    def test_disabled_rule_ignored(self) -> None:
        movie = make_movie(last_watched=days_ago(200))
        result = generate_suggestions(
            [rule("Stale", NOT_WATCHED, enabled=False)], [movie], [], now=NOW
        )
        assert result.count == 0
        assert result.rules_applied == []

    def test_movies_only_rule_skips_series(self) -> None:
        movie = make_movie()
        series = with_episodes(make_series(year=1990))

        result = generate_suggestions(
            [rule("Old", OLDER_THAN_2000, apply_to_series=False)],
            [movie],
            [series],
            now=NOW,
        )

        assert [s.media_type for s in result.suggestions] == [MediaType.MOVIE]

    def test_series_only_rule_skips_movies(self) -> None:
        result = generate_suggestions(
            [rule("Old", OLDER_THAN_2000, apply_to_movies=False)],
            [make_movie()],
            [with_episodes(make_series(year=1990))],
            now=NOW,
        )
        assert [s.media_type for s in result.suggestions] == [MediaType.SERIES]

    def test_one_suggestion_per_matching_rule(self) -> None:
        movie = make_movie(last_watched=days_ago(200))
        result = generate_suggestions(
            [rule("Stale", NOT_WATCHED), rule("Old", OLDER_THAN_2000)],
            [movie],
            [],
            now=NOW,
        )
        assert [s.rule_name for s in result.suggestions] == ["Stale", "Old"]

    def test_dismissed_pair_not_emitted(self) -> None:
        movie = make_movie(last_watched=days_ago(200))
        result = generate_suggestions(
            [rule("Stale", NOT_WATCHED), rule("Old", OLDER_THAN_2000)],
            [movie],
            [],
            dismissed=frozenset({(MediaType.MOVIE, movie.id, "Stale")}),
            now=NOW,
        )
        assert [s.rule_name for s in result.suggestions] == ["Old"]

    def test_invalid_rule_skipped_others_run(self, caplog) -> None:
        movie = make_movie(last_watched=days_ago(200))

        with caplog.at_level(logging.WARNING):
            result = generate_suggestions(
                [rule("Broken", "[{oops"), rule("Stale", NOT_WATCHED)],
                [movie],
                [],
                now=NOW,
            )

        assert result.rules_skipped == ["Broken"]
        assert result.rules_applied == ["Stale"]
        assert result.count == 1
        assert any(getattr(r, "rule", None) == "Broken" for r in caplog.records)

    def test_out_of_range_date_does_not_stop_other_rules(self) -> None:
        """A date that overflows in UTC degrades instead of aborting the pass."""
        far_future = serialize_conditions(
            [Condition("added", "before", "9999-12-31T23:00:00-05:00", "customDate")]
        )
        year_one = serialize_conditions(
            [Condition("added", "after", "0001-01-01T00:00:00+05:00", "customDate")]
        )
        movie = make_movie(last_watched=days_ago(200))

        result = generate_suggestions(
            [rule("Far", far_future), rule("Early", year_one), rule("Stale", NOT_WATCHED)],
            [movie],
            [],
            now=NOW,
        )

        assert result.rules_applied == ["Far", "Early", "Stale"]
        assert "Stale" in [s.rule_name for s in result.suggestions]

    def test_empty_rule_never_matches(self) -> None:
        result = generate_suggestions(
            [rule("Empty", "[]")], [make_movie()], [with_episodes(make_series())], now=NOW
        )
        assert result.count == 0
        assert result.rules_skipped == ["Empty"]

    def test_order_is_rule_then_movies_then_series(self) -> None:
        movies = [make_movie(id=1), make_movie(id=2, radarr_id=102, title="Ronin")]
        series = [with_episodes(make_series(year=1990))]

        result = generate_suggestions(
            [rule("Old", OLDER_THAN_2000)], movies, series, now=NOW
        )

        assert [(s.media_type, s.media_id) for s in result.suggestions] == [
            (MediaType.MOVIE, 1),
            (MediaType.MOVIE, 2),
            (MediaType.SERIES, 1),
        ]
