"""Domain errors raised by the auth and report services.

Each error carries a stable ``kind`` (used as the ``error`` field in API
responses) and the HTTP status the API layer maps it to. Services raise these;
only the exception handler in ``bugtracker.main`` turns them into responses.
"""

from fastapi import status


class BugTrackerError(Exception):
    """Base class for all domain errors."""

    kind = "Error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred") -> None:
        self.message = message
        super().__init__(message)


# Authentication


class InvalidCredentials(BugTrackerError):
    """Unknown username or wrong password (deliberately indistinguishable)."""

    kind = "InvalidCredentials"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message)


class AccountInactive(BugTrackerError):
    kind = "AccountInactive"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "User account is inactive") -> None:
        super().__init__(message)


class TokenError(BugTrackerError):
    """Base for token verification failures."""

    kind = "TokenError"
    status_code = status.HTTP_401_UNAUTHORIZED


class MalformedToken(TokenError):
    kind = "MalformedToken"

    def __init__(self, message: str = "Malformed token") -> None:
        super().__init__(message)


class InvalidSignature(TokenError):
    kind = "InvalidSignature"

    def __init__(self, message: str = "Invalid token signature") -> None:
        super().__init__(message)


class TokenExpired(TokenError):
    kind = "TokenExpired"

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class TokenInvalidated(TokenError):
    kind = "TokenInvalidated"

    def __init__(self, message: str = "Token has been invalidated") -> None:
        super().__init__(message)


class Forbidden(BugTrackerError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message)


# Lookups


class NotFound(BugTrackerError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class UserNotFound(NotFound):
    kind = "UserNotFound"

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class ReportNotFound(NotFound):
    kind = "ReportNotFound"

    def __init__(self, message: str = "Report not found") -> None:
        super().__init__(message)


class MenuNotFound(NotFound):
    kind = "MenuNotFound"

    def __init__(self, message: str = "Menu not found") -> None:
        super().__init__(message)


class SubMenuNotFound(NotFound):
    kind = "SubMenuNotFound"

    def __init__(self, message: str = "Sub-menu not found") -> None:
        super().__init__(message)


class CommentNotFound(NotFound):
    kind = "CommentNotFound"

    def __init__(self, message: str = "Comment not found") -> None:
        super().__init__(message)


# Validation


class ValidationFailed(BugTrackerError):
    kind = "ValidationFailed"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class InvalidMenu(ValidationFailed):
    kind = "InvalidMenu"


class InvalidSubMenu(ValidationFailed):
    kind = "InvalidSubMenu"


class CategoryMismatch(ValidationFailed):
    kind = "CategoryMismatch"


class InvalidAssignee(ValidationFailed):
    kind = "InvalidAssignee"


class InvalidUpload(ValidationFailed):
    kind = "InvalidUpload"


# Conflicts


class DependencyExists(BugTrackerError):
    """Deletion blocked because other rows still reference the target."""

    kind = "DependencyExists"
    status_code = status.HTTP_409_CONFLICT


class Conflict(BugTrackerError):
    """Unique constraint would be violated (username, email)."""

    kind = "Conflict"
    status_code = status.HTTP_409_CONFLICT
