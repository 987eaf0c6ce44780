"""Exceptions raised by the suggestion service."""


class SuggestionError(Exception):
    """Base class for suggestion errors."""

    pass


class SuggestionGenerationError(SuggestionError):
    """Raised when a generation pass fails as a whole.

    The previous suggestion set is left untouched.
    """

    pass


class SuggestionNotFoundError(SuggestionError):
    """Raised when a suggestion ID does not exist."""

    def __init__(self, suggestion_id: int) -> None:
        self.suggestion_id = suggestion_id
        super().__init__(f"Suggestion not found: {suggestion_id}")
