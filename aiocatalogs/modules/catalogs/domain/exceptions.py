"""Catalog domain exceptions."""

from fastapi import status

from aiocatalogs.core.domain.exceptions import DomainException, EntityNotFoundError


class UserNotFoundError(EntityNotFoundError):
    """Raised when no configuration exists for a user id."""

    def __init__(self, user_id: str):
        super().__init__("User", user_id)


class ManifestNotFoundError(DomainException):
    """Raised when a manifest URL does not yield a usable addon manifest."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "MANIFEST_NOT_FOUND"

    def __init__(self, url: str):
        super().__init__(f"No valid addon manifest found at '{url}'")


class SourceUpdateFailedError(DomainException):
    """Raised when a source list mutation was a no-op or could not be saved."""

    error_code = "SOURCE_UPDATE_FAILED"

    def __init__(self, action: str, source_id: str):
        super().__init__(f"Could not {action} source '{source_id}'")


class StorageUnavailableError(DomainException):
    """Raised when the configuration store cannot answer a lookup."""

    http_status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error_code = "STORAGE_UNAVAILABLE"

    def __init__(self, detail: str):
        super().__init__(f"Configuration storage unavailable: {detail}")
