"""Exception hierarchy for the ordering service.

Each exception carries the HTTP status code and the client-facing message it maps to,
so the API layer can translate any of them into a JSON error body in one place.
"""


class OrderingServiceError(Exception):
    """Base class for all expected ordering service failures."""

    status_code = 500

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable message returned to the caller
            details: Optional underlying error text
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response_body(self) -> dict[str, str]:
        """Build the JSON error body for this error."""
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFoundError(OrderingServiceError):
    """Raised when an identifier has no matching record."""

    status_code = 404


class InvalidRequestError(OrderingServiceError):
    """Raised when a request is well-formed JSON but semantically unacceptable."""

    status_code = 400


class StoreConnectionError(OrderingServiceError):
    """Raised when the document store cannot be reached."""

    def __init__(self, details: str | None = None) -> None:
        super().__init__("Database connection failed", details)


class StoreOperationError(OrderingServiceError):
    """Raised when a document store call fails after the connection is established."""


class InvalidIdentifierError(StoreOperationError):
    """Raised when an identifier does not have the store's identifier format."""


class InvalidUpdateTargetError(InvalidRequestError):
    """Raised when an update names a record by an identifier of the wrong format."""
