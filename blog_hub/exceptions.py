"""
Error kinds raised by blog_hub services.

Views translate these into JSON responses with the matching status code.
"""


class BlogHubError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = "server_error"
    status_code = 500
    default_message = "Server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {"success": False, "kind": self.kind, "message": self.message}


class ValidationFailed(BlogHubError):
    """Missing or malformed input."""

    kind = "validation"
    status_code = 400
    default_message = "Invalid input"


class NotFound(BlogHubError):
    """The referenced blog, comment or user does not exist."""

    kind = "not_found"
    status_code = 404
    default_message = "Not found"


class Forbidden(BlogHubError):
    """The actor exists but does not own the entity."""

    kind = "forbidden"
    status_code = 403
    default_message = "Not authorized to modify this resource"


class Unauthorized(BlogHubError):
    """No valid actor identity was presented."""

    kind = "unauthorized"
    status_code = 401
    default_message = "User not authenticated"


class ServerError(BlogHubError):
    """A write failed after the request was accepted."""
