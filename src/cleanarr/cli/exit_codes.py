"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (rules, config, input)
    20-29: Not found errors
    30-39: External service errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for Cleanarr CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    RULE_VALIDATION_ERROR = 10
    CONFIG_ERROR = 11
    PROTECTED_RULE = 12

    # Not found errors (20-29)
    RULE_NOT_FOUND = 20
    SUGGESTION_NOT_FOUND = 21
    MEDIA_NOT_FOUND = 22

    # External service errors (30-39)
    SERVICE_NOT_CONFIGURED = 30
    SERVICE_ERROR = 31
    SERVICE_AUTH_ERROR = 32

    # Operation errors (40-49)
    OPERATION_FAILED = 40
    DATABASE_LOCKED = 41
    DATABASE_ERROR = 42
