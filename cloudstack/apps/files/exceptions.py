"""Exceptions for files app."""

from cloudstack.results import ActionError, ErrorKind


class QuotaExceededError(ActionError):
    """Raised when an upload would exceed the storage capacity."""

    kind = ErrorKind.QUOTA_EXCEEDED

    def __init__(
        self,
        quota_bytes: int,
        used_bytes: int,
        required_bytes: int,
    ) -> None:
        """Initialize QuotaExceededError.

        Args:
            quota_bytes: Total capacity in bytes.
            used_bytes: Currently used bytes.
            required_bytes: Bytes needed for the operation.
        """
        self.quota_bytes = quota_bytes
        self.used_bytes = used_bytes
        self.required_bytes = required_bytes

        available = max(0, quota_bytes - used_bytes)
        super().__init__(
            f'Quota exceeded: need {required_bytes} bytes, '
            f'only {available} bytes available '
            f'(quota: {quota_bytes}, used: {used_bytes})',
        )


class FileAccessDeniedError(ActionError):
    """Raised when the current user may not touch a file."""

    kind = ErrorKind.PERMISSION_DENIED


class NoResultsError(ActionError):
    """Raised when a file listing cannot be produced for a query."""

    kind = ErrorKind.NOT_FOUND
