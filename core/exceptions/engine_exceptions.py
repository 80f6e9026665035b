"""Exceptions raised by the notification engine."""


class NotificationEngineError(Exception):
    """Base exception for notification engine errors."""

    status_code = 500

    def __init__(self, message: str, detail: str | None = None):
        """Initialize engine error.

        Args:
            message: Error message
            detail: Additional details for the caller
        """
        self.detail = detail
        super().__init__(message)


class NotFoundError(NotificationEngineError):
    """A template, notification or batch does not exist (404)."""

    status_code = 404
    resource = "Resource"

    def __init__(self, resource_id: str):
        """Initialize not found error.

        Args:
            resource_id: ID of the missing resource
        """
        self.resource_id = str(resource_id)
        super().__init__(f"{self.resource} with ID {resource_id} not found")


class TemplateNotFoundError(NotFoundError):
    """Notification template not found."""

    resource = "Template"


class NotificationNotFoundError(NotFoundError):
    """Notification not found."""

    resource = "Notification"


class BatchNotFoundError(NotFoundError):
    """Notification batch not found."""

    resource = "Batch"


class ValidationError(NotificationEngineError):
    """Malformed input at the engine boundary (400)."""

    status_code = 400

    def __init__(
        self,
        message: str,
        errors: list[dict] | None = None,
        detail: str | None = None,
    ):
        """Initialize validation error.

        Args:
            message: Error message
            errors: Field-level errors, usually from pydantic
            detail: Additional details for the caller
        """
        self.errors = errors or []
        super().__init__(message, detail=detail)


class ProviderError(NotificationEngineError):
    """A channel provider rejected a message or could not be reached.

    Recorded as a channel failure by the dispatcher and never propagated to
    the caller of ``dispatch``.
    """

    status_code = 502

    def __init__(self, channel: str, message: str, retryable: bool = True):
        """Initialize provider error.

        Args:
            channel: Delivery channel the provider serves
            message: Provider error description
            retryable: Whether another attempt could succeed
        """
        self.channel = channel
        self.retryable = retryable
        super().__init__(f"{channel} provider error: {message}")


class ExpansionError(NotificationEngineError):
    """A batch audience could not be resolved. Fatal to that batch only."""

    status_code = 422


class InvalidTransitionError(NotificationEngineError):
    """A batch state change is not allowed from its current state (409)."""

    status_code = 409

    def __init__(self, batch_id: str, current: str, target: str):
        """Initialize invalid transition error.

        Args:
            batch_id: Batch being transitioned
            current: Status the batch is in
            target: Requested status
        """
        self.batch_id = str(batch_id)
        self.current = current
        self.target = target
        super().__init__(
            f"Batch {batch_id} cannot move from {current} to {target}",
            detail=f"Current status is '{current}'",
        )
