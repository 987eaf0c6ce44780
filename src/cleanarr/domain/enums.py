"""Domain enums for Cleanarr."""

from enum import Enum


class MediaType(Enum):
    """Kind of media a suggestion refers to.

    Values match the strings stored in the suggestions table.
    """

    MOVIE = "Movie"
    SERIES = "Series"
