class IncorrectCredentials(Exception):
    pass


class NotFoundException(Exception):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class InvalidTransition(Exception):
    def __init__(self, booking_id: str, current: str, action: str):
        self.booking_id = booking_id
        self.current = current
        self.action = action

    def __str__(self):
        return f"cannot {self.action} booking '{self.booking_id}' while it is {self.current}"


class BookingConflict(Exception):
    """The stored booking changed since the caller read it."""

    def __init__(self, booking_id: str):
        self.booking_id = booking_id

    def __str__(self):
        return f"booking '{self.booking_id}' was modified by another request"


class InventoryReleaseFailed(Exception):
    """Status was written but freeing the stay's inventory did not finish."""

    def __init__(self, booking_id: str, cause: Exception):
        self.booking_id = booking_id
        self.cause = cause

    def __str__(self):
        return f"booking '{self.booking_id}' updated but inventory release failed: {self.cause}"


class ImageUploadFailed(Exception):
    pass
