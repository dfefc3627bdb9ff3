"""clickonce-fetch: download and verify the files of ClickOnce applications."""
import logging

from clickonce_fetch.core.errors import (
    ClickOnceError,
    ConfigError,
    DecodeError,
    DigestMismatchError,
    IncompleteSubsetError,
    IntegrityError,
    NotFoundError,
    SizeMismatchError,
    StorageError,
    TransportError,
)
from clickonce_fetch.deploy import DeploymentSession, SessionConfig
from clickonce_fetch.manifest import DeployedFile, EntryRole

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DeploymentSession",
    "SessionConfig",
    "DeployedFile",
    "EntryRole",
    "ClickOnceError",
    "ConfigError",
    "DecodeError",
    "DigestMismatchError",
    "IncompleteSubsetError",
    "IntegrityError",
    "NotFoundError",
    "SizeMismatchError",
    "StorageError",
    "TransportError",
]
