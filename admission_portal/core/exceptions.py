from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(ServiceError):
    """Store or auth settings are missing; nothing store-backed may run."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


class NotFoundError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class DuplicateError(ServiceError):
    """A value that must be unique within a school is already taken. `value` names it."""

    def __init__(self, message: str, value: str = "") -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)
        self.value = value


class TransientStoreError(ServiceError):
    """Connection-level failure talking to the store. Not retried here."""

    def __init__(
        self,
        message: str = "Could not connect to the database. Please check your internet connection.",
    ) -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


class PartialBatchFailure(ServiceError):
    """
    A chunked write stopped part way. Chunks committed before the failure stay committed;
    `deleted_count` (or `committed_count`) tells the caller how far it got.
    """

    def __init__(self, message: str, committed_count: int) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.committed_count = committed_count

    @property
    def deleted_count(self) -> int:
        return self.committed_count
