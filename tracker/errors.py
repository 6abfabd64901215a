class TrackerError(Exception):
    """Base class for errors raised by the tracker package."""


class ValidationError(TrackerError):
    """Raised when a submitted form is missing or has invalid input.

    `details` is the error payload produced by the validators, e.g.
    {"error": "missing_amount", "message": "..."}.
    """

    def __init__(self, details: dict):
        super().__init__(details.get("message", "invalid input"))
        self.details = details

    @property
    def code(self) -> str:
        return self.details.get("error", "")


class UnknownRangeError(TrackerError, ValueError):
    def __init__(self, range_key: str):
        super().__init__(f"Unknown trend range: {range_key!r}")
        self.range_key = range_key
