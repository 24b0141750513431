"""
Custom exception hierarchy for Stash operations.

Exception Hierarchy:
    StashError (base)
    ├── AuthRequiredError  - No authenticated caller
    ├── NotFoundError      - Target set resolved to nothing
    ├── EmptyInputError    - Import document has no data rows
    ├── FormatError        - Malformed tabular document
    └── PersistenceError   - Store rejected a read/write
        └── QueryTimeoutError

    ValidationError        - Input validation failed
"""


class StashError(Exception):
    """Base exception for all Stash errors."""

    status_code = 500

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    def to_dict(self) -> dict:
        """Structured error payload for API and CLI output."""
        return {"error": self.message, "detail": self.details}


class AuthRequiredError(StashError):
    """Caller identity is missing. Raised by the auth collaborator."""

    status_code = 401

    def __init__(self, message: str = "You must be logged in", details: str = None):
        super().__init__(message, details)


class NotFoundError(StashError):
    """
    Requested entity or export target set does not exist.

    Distinguishes "no collections" (error) from "no items" (not an error).
    """

    status_code = 404


class EmptyInputError(StashError):
    """Import document parsed to zero data rows."""

    status_code = 400

    def __init__(self, message: str = "No data found in CSV", details: str = None):
        super().__init__(message, details)


class FormatError(StashError):
    """
    Tabular document is malformed.

    `line` is the 1-based physical line where parsing failed, when known.
    """

    status_code = 400

    def __init__(self, message: str, details: str = None, line: int = None):
        super().__init__(message, details)
        self.line = line

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.line is not None:
            payload["line"] = self.line
        return payload


class PersistenceError(StashError):
    """
    The store rejected a read or write.

    The store's own message is kept verbatim in `details`.
    """

    status_code = 500


class QueryTimeoutError(PersistenceError):
    """
    Database query exceeded timeout.

    Indicates a long-running statement that should be investigated.
    """

    def __init__(self, query: str, timeout: float, details: str = None):
        self.query = query[:200] + "..." if len(query) > 200 else query
        self.timeout = timeout
        super().__init__(f"Query timed out after {timeout}s", details)


class ValidationError(Exception):
    """
    Input validation failed.

    Used for validating user input before processing. Lenient import
    coercion never raises this.
    """

    status_code = 400

    def __init__(self, field: str, message: str, value: any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"{field}: {message}")

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"

    def to_dict(self) -> dict:
        return {"error": "Validation failed", "detail": str(self)}
