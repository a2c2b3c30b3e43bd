from django.core.exceptions import ValidationError


class InvalidPayload(ValidationError):
    """Raised when a request body is malformed or misses required fields."""
    pass


class Conflict(Exception):
    """Raised when a write would duplicate a unique business key."""
    pass


class InvalidToken(Exception):
    """Raised when a bearer token fails signature, algorithm or expiry checks."""
    pass
