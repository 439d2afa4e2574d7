"""
User directory failures.

Raised by the stores and the service; the router maps them to HTTP responses.
"""

from __future__ import annotations


class UserError(RuntimeError):
    pass


class UserConflictError(UserError):
    """
    A save would break the username or email uniqueness invariant.
    """

    def __init__(self, field: str, value: str | None = None) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field.capitalize()} already exists")


class UserNotFoundError(UserError):
    """
    A mutation targets an id with no stored user.
    """

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User not found with id: {user_id}")
