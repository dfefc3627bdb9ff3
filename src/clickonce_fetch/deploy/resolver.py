"""Remote file resolver: turn manifest entries into downloadable remote files."""
import posixpath
import re
from urllib.parse import urljoin, urlsplit

from pydantic import BaseModel, Field

from clickonce_fetch.core.errors import DecodeError
from clickonce_fetch.manifest.models import ManifestEntry, to_posix_path

_SIZE = re.compile(r"[0-9]+")


class RemoteFile(BaseModel):
    """A deployed file as seen on the deployment server."""

    url: str = Field(..., description="Absolute URL of the file")
    size: int = Field(..., ge=0, description="Expected size in bytes")
    algorithm: str = Field(..., description="Lowercase digest algorithm name")
    digest: str = Field(..., description="Expected base64 encoded digest")

    @property
    def filename(self) -> str:
        return posixpath.basename(urlsplit(self.url).path)


def resolve_url(base_url: str, path: str) -> str:
    """Join a manifest-relative path against the current base URL."""
    return urljoin(base_url, to_posix_path(path))


def digest_algorithm(algorithm_uri: str) -> str:
    """Extract the algorithm name from a DigestMethod URI.

    Examples:
        http://www.w3.org/2000/09/xmldsig#sha1 -> sha1
        http://www.w3.org/2001/04/xmlenc#SHA256 -> sha256
    """
    return urlsplit(algorithm_uri).fragment.lower()


def parse_size(size: str, path: str) -> int:
    if not _SIZE.fullmatch(size.strip()):
        raise DecodeError(f"Invalid size '{size}' declared for '{path}'")
    return int(size)


def resolve_remote_file(base_url: str, entry: ManifestEntry) -> RemoteFile:
    """Resolve a manifest entry against the current base URL.

    Raises:
        DecodeError: If the declared size is not a non-negative integer
    """
    return RemoteFile(
        url=resolve_url(base_url, entry.path),
        size=parse_size(entry.size, entry.path),
        algorithm=digest_algorithm(entry.hash.algorithm),
        digest=entry.hash.digest_value,
    )
