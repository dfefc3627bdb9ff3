"""Traversal of a manifest graph: retrieve dependent assemblies and files."""
import logging

from clickonce_fetch.core.errors import ConfigError
from clickonce_fetch.deploy.downloader import download_and_verify
from clickonce_fetch.deploy.resolver import resolve_remote_file, resolve_url
from clickonce_fetch.deploy.state import SessionState
from clickonce_fetch.deploy.transport import Transport
from clickonce_fetch.manifest.decoder import decode_manifest
from clickonce_fetch.manifest.models import (
    DeployedFile,
    EntryRole,
    Manifest,
    ManifestEntry,
)

logger = logging.getLogger(__name__)


def retrieve_entry(
    state: SessionState,
    entry: ManifestEntry,
    transport: Transport,
) -> None:
    """Retrieve one manifest entry if it is wanted and not yet retrieved.

    When the entry is itself a manifest, the manifest it describes is
    traversed before returning.
    """
    if entry.path == "":
        logger.info("Missing valid path, skipped")
        return

    filename = entry.filename
    manifest = entry.is_manifest

    if state.subset is not None and not manifest and not state.in_subset(filename):
        logger.info(f"'{filename}' not in requested subset, skipped")
        return

    if state.base_url is None:
        raise ConfigError("No base URL to resolve manifest entries against")

    downloaded = state.deployed_files.get(entry.path)
    if downloaded is not None:
        state.mark_found(filename)
        # Manifests retrieved by an earlier pass are walked again from
        # their stored content, once per pass.
        if not manifest or entry.path in state.visited_manifests:
            logger.info(f"'{entry.path}' already downloaded, skipped")
            return
        logger.info(f"'{entry.path}' already downloaded, traversing stored manifest")
        _rebase(state, entry)
        _traverse_manifest(state, entry, downloaded.content, transport)
        return

    remote_file = resolve_remote_file(state.base_url, entry)
    _rebase(state, entry)

    content, suffix = download_and_verify(remote_file, not state.no_suffix, transport)
    state.no_suffix = not suffix

    logger.info(f"Added '{entry.path}' to deployed files")
    state.deployed_files[entry.path] = DeployedFile(type=entry.role, content=content)
    state.mark_found(filename)

    if manifest:
        _traverse_manifest(state, entry, content, transport)


def _rebase(state: SessionState, entry: ManifestEntry) -> None:
    """Move the base URL to a dependent manifest for the rest of the pass."""
    if entry.role == EntryRole.ASSEMBLY_DEPENDENCY and entry.is_manifest:
        state.base_url = resolve_url(state.base_url, entry.path)
        logger.debug(f"Base URL moved to '{state.base_url}'")


def _traverse_manifest(
    state: SessionState,
    entry: ManifestEntry,
    content: bytes,
    transport: Transport,
) -> None:
    state.visited_manifests.add(entry.path)
    retrieve_all(state, decode_manifest(content), transport)


def retrieve_all(state: SessionState, manifest: Manifest, transport: Transport) -> None:
    """Retrieve every wanted entry of a manifest, depth-first.

    Install dependencies come first, then files, each in document order.
    The first error stops the traversal and propagates.
    """
    for dependent_assembly in manifest.dependent_assemblies:
        if not dependent_assembly.is_install_dependency:
            logger.info(
                f"Dependency '{dependent_assembly.path}' not to install, skipped"
            )
            continue
        retrieve_entry(state, dependent_assembly, transport)

    for f in manifest.files:
        retrieve_entry(state, f, transport)
