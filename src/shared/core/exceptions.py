"""
Application Exceptions

Every failure a service can report, typed by kind. The API's exception
handlers turn them into HTTP responses; services never build responses.

Hierarchy:
==========
    VideoTubeException (500)
       ├── ValidationError (400)        ← Missing or blank input
       ├── UnauthorizedError (401)      ← Bad credentials or tokens
       │      └── InvalidTokenError
       ├── NotFoundError (404)
       │      ├── UserNotFoundError
       │      └── ChannelNotFoundError
       ├── ConflictError (409)          ← Username/email taken, duplicate edge
       └── InternalError (500)          ← Storage write or asset upload failed
              └── AssetUploadError

Each class fixes its status code and error code; callers pass a message
and, optionally, a details dict.

Usage:
======
    from src.shared.core.exceptions import UnauthorizedError

    raise UnauthorizedError("Invalid user credentials")
    # → 401 {"error": {"code": "UNAUTHORIZED", "message": "Invalid user credentials", "details": {}}}
"""

from typing import Any, ClassVar, Optional


class VideoTubeException(Exception):
    """
    Base class of all application errors.

    Attributes:
        message: Human-readable explanation, also the exception's str()
        status_code: HTTP status the API answers with
        error_code: Stable machine-readable code
        details: Extra context for clients
    """

    default_status_code: ClassVar[int] = 500
    default_error_code: ClassVar[str] = "INTERNAL_ERROR"
    default_message: ClassVar[str] = "Something went wrong"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.status_code = status_code or self.default_status_code
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Error envelope returned in the response body."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(VideoTubeException):
    """Required input is missing or blank."""

    default_status_code = 400
    default_error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class UnauthorizedError(VideoTubeException):
    """
    The caller is not who they claim to be.

    Raised for wrong passwords, missing or malformed tokens, and refresh
    tokens that were already rotated away.
    """

    default_status_code = 401
    default_error_code = "UNAUTHORIZED"
    default_message = "Unauthorized request"


class InvalidTokenError(UnauthorizedError):
    """Access token failed signature or expiry checks."""

    default_message = "Invalid access token"


class NotFoundError(VideoTubeException):
    """
    A looked-up resource does not exist.

    Example:
        raise NotFoundError("User", user_id)
        # "User with id '550e8400-...' not found"
    """

    default_status_code = 404
    default_error_code = "NOT_FOUND"

    def __init__(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> None:
        if message is None:
            message = (
                f"{resource} with id '{resource_id}' not found" if resource_id else f"{resource} not found"
            )
        super().__init__(message=message, details=details)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: Optional[str] = None) -> None:
        super().__init__("User", resource_id=user_id)


class ChannelNotFoundError(NotFoundError):
    """No user has the requested channel username."""

    def __init__(self, username: str) -> None:
        super().__init__(
            "Channel",
            details={"username": username},
            message="Channel does not exist",
        )


class ConflictError(VideoTubeException):
    """A uniqueness rule would be broken (username, email, subscription)."""

    default_status_code = 409
    default_error_code = "CONFLICT"
    default_message = "Resource conflict"


class InternalError(VideoTubeException):
    """A collaborator (database write, asset store) failed."""


class AssetUploadError(InternalError):
    """The asset store returned no URL for an upload."""

    def __init__(self, asset_name: str) -> None:
        super().__init__(
            message=f"{asset_name} upload failed",
            details={"asset": asset_name.lower()},
        )
