"""Exceptions raised by the risk scoring core"""


class InvalidObservation(ValueError):
    """A weather observation field is missing or not a finite number"""

    def __init__(self, field: str, value=None, message: str = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Observation field '{field}' must be a finite number, got {value!r}")
