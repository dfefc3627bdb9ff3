"""Core exception types for clickonce-fetch."""
from typing import List, Optional


class ClickOnceError(Exception):
    """Base exception for all clickonce-fetch errors."""
    pass


class ConfigError(ClickOnceError):
    """Raised when a public operation receives missing or invalid input."""
    pass


class DecodeError(ClickOnceError):
    """Raised when a manifest or one of its fields cannot be decoded."""
    pass


class NotFoundError(ClickOnceError):
    """Raised when a manifest or deployed file is not available."""
    pass


class IncompleteSubsetError(NotFoundError):
    """Raised when only part of a requested subset was retrieved."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class IntegrityError(ClickOnceError):
    """Raised when a deployed file cannot be verified."""
    pass


class SizeMismatchError(IntegrityError):
    """Raised when a downloaded file has an unexpected size."""
    pass


class DigestMismatchError(IntegrityError):
    """Raised when a downloaded file has an unexpected digest."""
    pass


class TransportError(ClickOnceError):
    """Raised when a network request fails or returns an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(ClickOnceError):
    """Raised when deployed files cannot be saved."""
    pass
