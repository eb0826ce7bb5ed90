"""Error taxonomy shared by the API client and the editing session."""


class DiaryError(Exception):
    """Base class for diary failures."""

    pass


class ValidationError(DiaryError):
    """Raised when an entry is rejected before or by the server (e.g. empty title)."""

    pass


class AuthenticationError(DiaryError):
    """Raised when there is no usable access token."""

    pass


class AuthorizationError(DiaryError):
    """Raised when an entry belongs to another user."""

    pass


class NotFoundError(DiaryError):
    """Raised when an entry does not exist."""

    pass


class NetworkOrServerError(DiaryError):
    """Raised when a request fails in transport or on the server."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
