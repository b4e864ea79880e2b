"""
Typed errors raised by the social graph services.

Every check in the edge, thread and post services runs before any mutation,
so raising one of these never leaves a half-written edge behind. The API
layer turns them into HTTP responses in exceptions.py.
"""


class SocialError(Exception):
    """Base class for all service-level errors."""


class NotFoundError(SocialError):
    """A required record (User, Post, Comment, Artist, ...) does not exist."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} could not be found.")


class ConflictError(SocialError):
    """The requested edge transition is invalid for the current state."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class FollowError(ConflictError):
    """Conflict on the user-follows-user edge."""


class NotAuthorizedError(SocialError):
    """The acting user does not own the resource being mutated."""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Not authorized to {action}")


class PrivacyError(SocialError):
    """A user's privacy setting hides the requested data."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"User's {field} setting is set to private.")
