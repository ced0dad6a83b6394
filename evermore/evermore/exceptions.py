"""Custom exceptions for the Evermore application."""


class DuplicateWeddingError(Exception):
    """Raised when more than one wedding row is owned by the same user."""

    def __init__(self, user_id: str, count: int):
        self.user_id = user_id
        self.count = count
        super().__init__(f"Expected at most one wedding for user {user_id}, found {count}.")


class InvalidRowError(Exception):
    """Raised when a row from the store violates the collection's model (e.g. an unknown rsvp_status)."""
