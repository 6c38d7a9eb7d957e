"""Custom exception hierarchy for radar-alerts.

Input errors are raised while building rules and snapshots, before any
evaluation happens. Collaborator errors are raised by storage and delivery
adapters and are handled per item by the rule engine and the sweep.
"""


class RadarAlertsError(Exception):  # noqa: N818
    """Base exception for radar-alerts.

    All custom exceptions in radar-alerts inherit from this class so callers
    can catch every package-specific error with a single except clause.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)
        self.message = message


class InvalidRuleError(RadarAlertsError):
    """Alert rule input is malformed.

    Raised for unknown metrics or conditions, blank names, missing client
    ids and thresholds that are not meaningful for the condition.
    """

    def __init__(self, message: str = "Invalid alert rule") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class InvalidSnapshotError(RadarAlertsError):
    """Metric snapshot holds a non-finite value."""

    def __init__(self, message: str = "Metric snapshot values must be finite") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class CollaboratorError(RadarAlertsError):
    """A storage or delivery collaborator failed.

    Raised by provider and store adapters when the backing service is
    unreachable or rejects a write.
    """

    def __init__(self, message: str = "Collaborator operation failed") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)


class ConfigurationError(RadarAlertsError):
    """Configuration is invalid.

    Raised when the application configuration is invalid or missing
    required values.
    """

    def __init__(self, message: str = "Invalid configuration") -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message.
        """
        super().__init__(message)
