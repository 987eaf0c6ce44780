"""Exceptions raised by rule parsing and rule management."""


class RuleError(Exception):
    """Base class for rule-related errors."""

    pass


class ConditionParseError(RuleError):
    """Raised when a rule's condition JSON is malformed."""

    def __init__(self, message: str, rule_name: str | None = None) -> None:
        self.rule_name = rule_name
        if rule_name:
            message = f"Rule '{rule_name}': {message}"
        super().__init__(message)


class RuleValidationError(RuleError):
    """Raised when user-supplied rule data is invalid."""

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class RuleNotFoundError(RuleError):
    """Raised when a rule ID does not exist."""

    def __init__(self, rule_id: int) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule not found: {rule_id}")


class ProtectedRuleError(RuleError):
    """Raised when deleting one of the built-in rules."""

    def __init__(self, rule_name: str) -> None:
        self.rule_name = rule_name
        super().__init__(
            f"Cannot delete built-in rule '{rule_name}'. Disable it instead."
        )
