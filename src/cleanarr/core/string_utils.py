"""String matching utilities.

All case-insensitive operations use casefold() for proper Unicode handling.
"""

from __future__ import annotations


def compare_strings_ci(a: str, b: str) -> bool:
    """Compare strings case-insensitively.

    Example:
        >>> compare_strings_ci("Comedy", "comedy")
        True
        >>> compare_strings_ci("Dark Comedy", "comedy")
        False
    """
    return a.casefold() == b.casefold()


def contains_ci(haystack: str, needle: str) -> bool:
    """Check if string contains substring (case-insensitive).

    Example:
        >>> contains_ci("Dark Comedy", "COMEDY")
        True
        >>> contains_ci("Drama", "comedy")
        False
    """
    return needle.casefold() in haystack.casefold()
