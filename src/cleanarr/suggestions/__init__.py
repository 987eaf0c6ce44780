"""Suggestion generation and management.

Usage:
    from cleanarr.suggestions import SuggestionService

    result = SuggestionService(conn).generate_suggestions()
"""

from cleanarr.suggestions.exceptions import (
    SuggestionError,
    SuggestionGenerationError,
    SuggestionNotFoundError,
)
from cleanarr.suggestions.generator import GenerationResult, generate_suggestions
from cleanarr.suggestions.service import SuggestionService

__all__ = [
    "GenerationResult",
    "SuggestionError",
    "SuggestionGenerationError",
    "SuggestionNotFoundError",
    "SuggestionService",
    "generate_suggestions",
]
