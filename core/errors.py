class PulseError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PulseError):
    pass


class InvalidFrequencyError(ValidationError):
    def __init__(self, frequency):
        super().__init__(f"Unknown income frequency: {frequency!r}")
        self.frequency = frequency


class NotFoundError(PulseError):
    pass


class ComputationError(PulseError):
    """Should never happen with validated input; reported as a generic 500."""
