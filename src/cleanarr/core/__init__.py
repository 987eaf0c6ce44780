"""Core utilities package.

Pure helper functions shared across Cleanarr: UTC timestamp handling,
case-insensitive string matching and display formatting.
"""

from cleanarr.core.datetime_utils import (
    MIN_DATE,
    from_unix_timestamp,
    parse_iso_timestamp,
    parse_optional_timestamp,
    to_iso,
    utc_now,
)
from cleanarr.core.formatting import format_file_size, truncate_title
from cleanarr.core.string_utils import compare_strings_ci, contains_ci

__all__ = [
    "MIN_DATE",
    "compare_strings_ci",
    "contains_ci",
    "format_file_size",
    "from_unix_timestamp",
    "parse_iso_timestamp",
    "parse_optional_timestamp",
    "to_iso",
    "truncate_title",
    "utc_now",
]
