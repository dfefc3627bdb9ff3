"""Deployment retrieval: resolving, downloading, verifying and saving files."""
from clickonce_fetch.deploy.config import SessionConfig
from clickonce_fetch.deploy.session import DeploymentSession
from clickonce_fetch.deploy.storage import LocalFileWriter
from clickonce_fetch.deploy.transport import FetchResult, HttpTransport

__all__ = [
    "DeploymentSession",
    "FetchResult",
    "HttpTransport",
    "LocalFileWriter",
    "SessionConfig",
]
