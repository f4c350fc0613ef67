"""
Domain errors raised by the service layer.

Each error carries a short, user-facing message and the HTTP status the web
layer answers with. Services never raise HTTPException directly.
"""


class TrackerError(Exception):
    status_code = 400
    default_message = "Something went wrong"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(TrackerError):
    status_code = 401
    default_message = "Please sign in to continue"


class Forbidden(TrackerError):
    status_code = 403
    default_message = "You are not allowed to do that"


class NotFound(TrackerError):
    status_code = 404
    default_message = "Not found"


class Conflict(TrackerError):
    status_code = 409
    default_message = "That record already exists"


class ValidationError(TrackerError):
    status_code = 422
    default_message = "Invalid input"
