"""Download deployed files and verify their size and digest."""
import base64
import hashlib
import logging
from typing import Tuple

from clickonce_fetch.core.errors import (
    DigestMismatchError,
    IntegrityError,
    NotFoundError,
    SizeMismatchError,
    TransportError,
)
from clickonce_fetch.deploy.resolver import RemoteFile
from clickonce_fetch.deploy.transport import FetchResult, Transport
from clickonce_fetch.manifest.models import is_manifest

logger = logging.getLogger(__name__)

DEPLOYED_FILE_EXTENSION = ".deploy"
SUPPORTED_ALGORITHMS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


def strip_extension(url: str) -> str:
    """Remove the last extension of the final URL segment.

    https://host/app/a.exe.deploy -> https://host/app/a.exe
    https://host/app/.config      -> https://host/app/
    """
    head, sep, last = url.rpartition("/")
    dot = last.rfind(".")
    if dot < 0:
        return url
    return f"{head}{sep}{last[:dot]}"


def compute_digest(content: bytes, algorithm: str) -> str:
    """Base64 encoded digest of content."""
    return base64.b64encode(SUPPORTED_ALGORITHMS[algorithm](content).digest()).decode("ascii")


def _check_status(result: FetchResult, url: str) -> None:
    if not result.ok:
        raise TransportError(
            f"Unexpected HTTP status {result.status_code} for '{url}'",
            status_code=result.status_code,
        )


def download_and_verify(
    remote_file: RemoteFile,
    try_suffix: bool,
    transport: Transport,
) -> Tuple[bytes, bool]:
    """Download a deployed file and check its size and digest.

    Payload files are usually published with a ``.deploy`` suffix. When
    ``try_suffix`` is set the suffixed URL is tried first; on 404 the last
    extension is stripped and the download retried once, which covers
    deployments published without extension mapping.

    Args:
        remote_file: File to download
        try_suffix: Whether to try the ``.deploy`` suffixed URL first
        transport: Transport used for the requests

    Returns:
        Tuple of (verified content, suffix hint). The hint is False once
        the fallback URL was needed.

    Raises:
        IntegrityError: If the digest algorithm is not supported
        NotFoundError: If both attempts return 404
        SizeMismatchError: If the body size differs from the declared size
        DigestMismatchError: If the body digest differs from the declared digest
        TransportError: On network failure or unexpected status
    """
    filename = remote_file.filename

    if remote_file.algorithm not in SUPPORTED_ALGORITHMS:
        raise IntegrityError(
            f"'{remote_file.algorithm}' digest algorithm not supported for '{filename}'"
        )

    download_url = remote_file.url
    if try_suffix and not is_manifest(filename):
        download_url += DEPLOYED_FILE_EXTENSION

    logger.info(f"Downloading '{filename}' from '{download_url}'")
    result = transport.fetch(download_url)

    if result.not_found:
        download_url = strip_extension(download_url)
        logger.warning(f"Not found, trying to download '{filename}' from '{download_url}'")
        result = transport.fetch(download_url)
        if result.not_found:
            raise NotFoundError(f"No file available at '{download_url}'")
        logger.info(
            f"Application files deployed without default '{DEPLOYED_FILE_EXTENSION}' suffix"
        )
        try_suffix = False

    _check_status(result, download_url)

    body = result.content
    if len(body) != remote_file.size:
        raise SizeMismatchError(
            f"Size mismatch for file '{filename}': expected {remote_file.size}, got {len(body)}"
        )

    if compute_digest(body, remote_file.algorithm) != remote_file.digest:
        raise DigestMismatchError(f"Digest mismatch for file '{filename}'")

    logger.info(f"Downloaded '{filename}'")
    return body, try_suffix
