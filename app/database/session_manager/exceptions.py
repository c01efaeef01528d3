"""
Database session exceptions.

Kept apart from the calculation engine errors in app.utils.exceptions: these
signal infrastructure problems, never bad activity data.
"""


class DatabaseError(Exception):
    """Base class for session manager errors."""
    pass


class DatabaseNotInitialized(DatabaseError):
    """Raised when a session is requested before Database.init()."""

    def __init__(self, message: str = "Database not initialized. Call Database.init() first."):
        super().__init__(message)


class DatabaseTransactionError(DatabaseError):
    """Raised when committing or rolling back a session fails."""
    pass
