"""
Errors raised by the seating services
"""


class SeatingError(Exception):
    """Base class for seating failures reported back to the caller"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SeatingError):
    status_code = 404


class NoMatchingGuestsError(SeatingError):
    def __init__(self, message: str = "No guests match the selected filters"):
        super().__init__(message)


class AllGuestsSeatedError(SeatingError):
    def __init__(self, message: str = "All guests matching the filters are already seated"):
        super().__init__(message)


class AllocationFailedError(SeatingError):
    """The allocation transaction failed and was rolled back"""

    status_code = 500

    def __init__(self, cause: Exception):
        super().__init__(f"Failed to auto-arrange tables: {cause}")
        self.cause = cause
