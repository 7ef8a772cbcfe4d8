class RailcalError(ValueError):
    """Base error."""

class InvalidDate(RailcalError):
    """Raised when an input is not a well-formed calendar date."""

class InvalidRange(RailcalError):
    """Raised when a week, period or weekday ordinal is outside its valid range."""
