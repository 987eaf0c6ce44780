"""Watch history aggregation.

Plays are reduced to one entry per user per calendar day (UTC), keeping
the latest play of that day, and ordered oldest first. The most recent
entry supplies last_watched and watched_by.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from cleanarr.domain import WatchEntry


@dataclass(frozen=True)
class WatchSummary:
    """Deduplicated history plus the most recent play."""

    history: list[WatchEntry] = field(default_factory=list)
    last_watched: datetime | None = None
    watched_by: str | None = None


def summarize_plays(plays: Iterable[tuple[str, datetime]]) -> WatchSummary:
    """Build a watch summary from (user, stopped_at) pairs.

    Two plays by the same user on the same day count once, dated by the
    later play.
    """
    latest: dict[tuple[str, object], datetime] = {}
    for user, stopped in plays:
        key = (user, stopped.date())
        if key not in latest or stopped > latest[key]:
            latest[key] = stopped

    if not latest:
        return WatchSummary()

    ordered = sorted(latest.items(), key=lambda item: item[1])
    history = [WatchEntry(user=user, date=day) for (user, day), _ in ordered]
    (last_user, _), last_time = ordered[-1]
    return WatchSummary(history=history, last_watched=last_time, watched_by=last_user)
