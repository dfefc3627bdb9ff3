"""Manifest models for ClickOnce deployment descriptors."""
import posixpath
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

MANIFEST_EXTENSION = ".manifest"
INSTALL_DEPENDENCY = "install"


class EntryRole(str, Enum):
    """Role of a manifest entry, also used as the type of a deployed file."""

    ASSEMBLY_DEPENDENCY = "AssemblyDependency"
    NON_ASSEMBLY_FILE = "NonAssemblyFile"


class HashDescriptor(BaseModel):
    """Digest declared for a manifest entry."""

    algorithm: str = Field(default="", description="DigestMethod Algorithm URI")
    digest_value: str = Field(default="", description="Base64 encoded digest")


class ManifestEntry(BaseModel):
    """A file or dependent assembly referenced by a manifest.

    Both lists of a manifest share this descriptor; ``role`` tells them
    apart. For dependent assemblies ``path`` holds the ``codebase``
    attribute, for files the ``name`` attribute.
    """

    path: str = Field(default="", description="Manifest-relative path, as declared")
    size: str = Field(default="", description="Declared size in bytes, as declared")
    hash: HashDescriptor = Field(default_factory=HashDescriptor)
    role: EntryRole = Field(..., description="AssemblyDependency or NonAssemblyFile")
    dependency_type: str = Field(default="", description="dependencyType attribute")
    allow_delayed_binding: str = Field(default="", description="allowDelayedBinding attribute")

    @property
    def posix_path(self) -> str:
        """Path with backslash separators replaced by forward slashes."""
        return to_posix_path(self.path)

    @property
    def filename(self) -> str:
        return posixpath.basename(self.posix_path)

    @property
    def is_manifest(self) -> bool:
        return is_manifest(self.filename)

    @property
    def is_install_dependency(self) -> bool:
        return self.dependency_type == INSTALL_DEPENDENCY


class Manifest(BaseModel):
    """Parsed ClickOnce manifest: dependent assemblies and files in document order."""

    files: List[ManifestEntry] = Field(default_factory=list)
    dependent_assemblies: List[ManifestEntry] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "files": [
                    {
                        "path": "App.exe.config",
                        "size": "187",
                        "hash": {
                            "algorithm": "http://www.w3.org/2000/09/xmldsig#sha256",
                            "digest_value": "n0e7p5D4Y0Lq3QJwqO9cXG0t2ofn7A3sEo8Zr3f2a1E=",
                        },
                        "role": "NonAssemblyFile",
                    }
                ],
                "dependent_assemblies": [],
            }
        }
    )


class DeployedFile(BaseModel):
    """A retrieved and verified deployed file."""

    type: EntryRole
    content: bytes


def to_posix_path(path: str) -> str:
    return path.replace("\\", "/")


def deployed_filename(path: str) -> str:
    """Bare filename of a manifest-relative path using either separator."""
    return posixpath.basename(to_posix_path(path))


def is_manifest(filename: str) -> bool:
    """Check if a file is a ClickOnce application manifest."""
    return posixpath.splitext(filename)[1] == MANIFEST_EXTENSION
