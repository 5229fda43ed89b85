"""Domain errors raised by the short-link core.

Every error carries a ``kind`` that the HTTP layer echoes back to callers,
so clients can branch on it without parsing messages.
"""


class ShortenerError(Exception):
    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ShortenerError):
    """Malformed or empty input; the caller can correct it."""
    kind = "InvalidInput"


class Conflict(ShortenerError):
    """Requested vanity code is already taken."""
    kind = "Conflict"


class NotFound(ShortenerError):
    kind = "NotFound"


class StorageFailure(ShortenerError):
    """Backend unavailable. The message is safe to show; details go to the log."""
    kind = "StorageFailure"

    def __init__(self, message: str = "Storage backend is unavailable"):
        super().__init__(message)


class Exhausted(ShortenerError):
    """No free short code could be found within the retry budget."""
    kind = "Exhausted"
