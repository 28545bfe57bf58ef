"""Custom exceptions for fieldshift.

This module provides a hierarchy of exceptions with helpful error messages
so an operator can tell what went wrong from the CLI output alone.
"""


class FieldshiftError(Exception):
    """Base exception for all fieldshift errors.

    All fieldshift exceptions inherit from this class, making it easy
    to catch every tool-specific error in one place.
    """

    def __init__(self, message: str, hint: str | None = None):
        """Initialize the exception.

        Args:
            message: The error message
            hint: Optional hint for resolving the error
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class StoreConnectionError(FieldshiftError):
    """Raised when the content store cannot be reached."""

    def __init__(
        self,
        message: str | None = None,
        original_error: Exception | None = None,
        endpoint: str | None = None,
    ):
        """Initialize the connection error.

        Args:
            message: Custom error message (optional)
            original_error: The original exception that caused this error
            endpoint: The API URL being connected to
        """
        self.original_error = original_error
        self.endpoint = endpoint

        if message:
            final_message = message
            hint = None
        elif original_error:
            final_message, hint = self._format_error(original_error, endpoint)
        else:
            final_message = "Failed to connect to the content store"
            hint = "Check your network connection and project settings."

        super().__init__(final_message, hint)

    def _format_error(
        self, error: Exception, endpoint: str | None
    ) -> tuple[str, str | None]:
        """Format the error message based on the underlying error."""
        error_str = str(error)

        if "Name or service not known" in error_str or "nodename nor servname" in error_str:
            return (
                f"Could not resolve content store host for {endpoint or 'the project'}",
                "Check the SANITY_STUDIO_PROJECT_ID environment variable.",
            )

        if "Connection refused" in error_str or "connect" in error_str.lower():
            return (
                f"Could not connect to the content store at {endpoint or 'the API host'}",
                "Check your network connection and SANITY_API_HOST, if set.",
            )

        return (f"Content store connection error: {error}", None)


class StoreOperationError(FieldshiftError):
    """Raised when a content store request is rejected."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
        hint: str | None = None,
    ):
        """Initialize the operation error.

        Args:
            message: The error message
            operation: The request that failed ('query' or 'mutate')
            status_code: HTTP status returned by the store
            original_error: The original exception
            hint: Optional hint, derived from the status when omitted
        """
        self.operation = operation
        self.status_code = status_code
        self.original_error = original_error

        if hint is None:
            if status_code == 404:
                hint = "Check the project ID, dataset name and API version."
            elif status_code == 400 and operation == "query":
                hint = "The query was rejected; check the document type and field names."
            elif status_code is not None and status_code >= 500:
                hint = "The content store had an internal error; try again later."

        super().__init__(message, hint)


class RevisionConflictError(StoreOperationError):
    """Raised when a patch's revision precondition fails.

    Some document in the transaction was modified after it was fetched,
    so the store rejected the whole transaction and nothing was applied.
    """

    def __init__(
        self,
        message: str = "Transaction rejected: document revision mismatch",
        document_ids: list[str] | None = None,
        status_code: int | None = 409,
    ):
        """Initialize the conflict error.

        Args:
            message: The error message
            document_ids: Documents the store reported as changed, if any
            status_code: HTTP status returned by the store
        """
        self.document_ids = document_ids or []
        super().__init__(
            message,
            operation="mutate",
            status_code=status_code,
            hint=(
                "A document changed while the batch was in flight. "
                "No changes from this batch were applied; re-run the migration."
            ),
        )


class StoreAuthError(FieldshiftError):
    """Raised when the store rejects the credentials."""

    def __init__(self, message: str, status_code: int | None = None):
        """Initialize the auth error.

        Args:
            message: The error message
            status_code: HTTP status returned by the store (401 or 403)
        """
        self.status_code = status_code

        if status_code == 403:
            hint = "The token does not have write access to this dataset."
        else:
            hint = "Check the SANITY_STUDIO_PROJECT_TOKEN environment variable."

        super().__init__(message, hint)


class ConfigurationError(FieldshiftError):
    """Raised when fieldshift configuration is invalid."""

    def __init__(
        self,
        message: str | None = None,
        missing_fields: list[str] | None = None,
    ):
        """Initialize the configuration error.

        Args:
            message: Custom error message
            missing_fields: List of missing configuration fields
        """
        self.missing_fields = missing_fields or []

        if missing_fields:
            fields_str = ", ".join(missing_fields)
            message = f"Missing required configuration: {fields_str}"
            hint = "Set these as environment variables or in your .env file."
        else:
            hint = "Check your fieldshift configuration."

        super().__init__(message or "Invalid fieldshift configuration", hint)


class MigrationConfigurationError(ConfigurationError):
    """Raised when the rename operation itself is misconfigured."""
