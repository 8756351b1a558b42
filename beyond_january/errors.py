"""
Exception types for the check-in app.
"""


class BeyondJanuaryError(Exception):
    """Base class for app errors."""
    pass


class ConfigurationError(BeyondJanuaryError, ValueError):
    """Raised when counter bounds or settings are invalid."""
    pass


class InvalidStatusError(BeyondJanuaryError, ValueError):
    """Raised when a check-in status is not one of the known values."""
    pass


class GoalSelectionError(BeyondJanuaryError, ValueError):
    """Raised when a goal pick or rename would break the goal rules."""
    pass


class GoalNotFoundError(BeyondJanuaryError, LookupError):
    """Raised when a goal id does not exist."""
    pass
