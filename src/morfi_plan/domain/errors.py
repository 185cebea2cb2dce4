"""Domain error types."""


class MorfiPlanError(Exception):
    """Base class for application errors."""


class ValidationFailedError(MorfiPlanError):
    """Raised when user input is rejected."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(MorfiPlanError):
    """Raised when a referenced entity does not exist."""


class DeliveryFailedError(MorfiPlanError):
    """Raised when the email provider rejects a digest."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
