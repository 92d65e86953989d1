"""DataGate exception hierarchy."""


class DataGateError(Exception):
    """Base exception for DataGate errors."""

    def __init__(self, message: str, table: str | None = None) -> None:
        """
        Initialize DataGate exception.

        Args:
            message: Error message
            table: Optional table name context
        """
        self.table = table
        super().__init__(message)


class DataGateValidationError(DataGateError):
    """Request failed local validation and never reached the engine."""

    def __init__(
        self,
        message: str,
        field_name: str | None = None,
        table: str | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field_name: Optional name of the offending field
            table: Optional table name
        """
        self.field_name = field_name
        super().__init__(message, table)


class DataGateAuthError(DataGateError):
    """Credential missing or not accepted."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or 'Invalid or missing API key')


class DataGateTransportError(DataGateError):
    """Execution engine could not be reached (connect failure, timeout, reset)."""

    def __init__(
        self,
        endpoint: str,
        original_error: Exception | None = None,
        message: str | None = None,
    ) -> None:
        """
        Initialize transport error.

        The original error is kept for logging only; the message stays generic.

        Args:
            endpoint: Engine endpoint that was being called
            original_error: Underlying httpx exception
            message: Optional custom message
        """
        self.endpoint = endpoint
        self.original_error = original_error
        super().__init__(message or 'Cannot reach execution engine')


class DataGateUpstreamError(DataGateError):
    """Execution engine was reached but reported a failure."""

    def __init__(
        self,
        upstream_message: str,
        status_code: int,
        endpoint: str | None = None,
    ) -> None:
        """
        Initialize upstream error.

        Args:
            upstream_message: Message reported by the engine, verbatim
            status_code: HTTP status returned by the engine
            endpoint: Engine endpoint that was called
        """
        self.upstream_message = upstream_message
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(upstream_message)
