"""Domain errors."""


class MealTrackerError(Exception):
    """Base class for domain errors."""


class RecordNotFoundError(MealTrackerError):
    """Raised when a referenced record does not exist."""


class InvalidCentreCodeError(MealTrackerError):
    """Raised when a centre access code does not match."""


class InvalidPasswordError(MealTrackerError):
    """Raised when an admin password does not match."""


class InvalidBirthdayError(MealTrackerError, ValueError):
    """Raised when a birthday cannot be parsed on write."""
