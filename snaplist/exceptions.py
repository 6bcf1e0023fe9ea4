"""Application exceptions.

Services raise these; the handlers registered in ``utils.error_handler``
turn them into the JSON envelope with the matching HTTP status.
"""


class SnapListError(Exception):
    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(SnapListError):
    status_code = 400

    def __init__(self, message: str = "Validation failed", field: str | None = None):
        super().__init__(message)
        self.field = field


class AuthError(SnapListError):
    status_code = 401


class ForbiddenError(SnapListError):
    status_code = 403


class NotFoundError(SnapListError):
    status_code = 404

    def __init__(self, resource: str = "resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class PlanLimitError(SnapListError):
    """Raised when a membership tier quota would be exceeded."""

    status_code = 403
