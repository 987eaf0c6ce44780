"""Domain models and enums for Cleanarr.

Types describing the media catalog and generated suggestions, independent
of the database layer:

- Media: Movie, Series, Episode, WatchEntry
- Output: Suggestion
- Enums: MediaType

Usage:
    from cleanarr.domain import Movie, Series, Episode, MediaType
"""

from .enums import MediaType
from .models import (
    Episode,
    Movie,
    Series,
    SeriesWithEpisodes,
    Suggestion,
    WatchEntry,
)

__all__ = [
    # Models
    "Episode",
    "Movie",
    "Series",
    "SeriesWithEpisodes",
    "Suggestion",
    "WatchEntry",
    # Enums
    "MediaType",
]
