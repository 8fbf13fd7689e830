"""
Domain Errors
-------------
Raised by crud/services and translated to HTTP responses by the handler
registered in coachtrack.main.
"""


class CoachTrackError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CoachTrackError):
    """A required field is missing or malformed."""
    status_code = 400


class NotFoundError(CoachTrackError):
    """Entity is absent or not owned by the caller."""
    status_code = 404


class ConflictError(CoachTrackError):
    """A domain rule refused the operation (e.g. no sessions left)."""
    status_code = 400


class StorageError(CoachTrackError):
    """Transaction or connectivity failure. The message is safe to show."""
    status_code = 500
