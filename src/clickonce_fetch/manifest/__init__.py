"""Manifest handling: models and decoding of ClickOnce manifests."""
from clickonce_fetch.manifest.decoder import decode_manifest
from clickonce_fetch.manifest.models import (
    DeployedFile,
    EntryRole,
    HashDescriptor,
    Manifest,
    ManifestEntry,
)
from clickonce_fetch.core.errors import DecodeError

__all__ = [
    "DeployedFile",
    "EntryRole",
    "HashDescriptor",
    "Manifest",
    "ManifestEntry",
    "decode_manifest",
    "DecodeError",
]
