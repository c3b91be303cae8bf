"""Error kinds raised by the service layer.

Each error carries the HTTP status the API layer answers with, so routers
never translate them by hand.
"""


class TaskboardError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    """A required field is missing or a value breaks an entity rule."""
    status_code = 400
    kind = "validation_error"


class NotFoundError(TaskboardError):
    """The identifier does not resolve to a stored entity."""
    status_code = 404
    kind = "not_found"


class StoreError(TaskboardError):
    """The underlying database operation failed."""
    status_code = 500
    kind = "store_error"
