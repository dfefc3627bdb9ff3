"""Deployment session: top-level retrieval of a ClickOnce application."""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from clickonce_fetch.core.errors import (
    ClickOnceError,
    ConfigError,
    DecodeError,
    IncompleteSubsetError,
    NotFoundError,
    StorageError,
    TransportError,
)
from clickonce_fetch.deploy.config import SessionConfig
from clickonce_fetch.deploy.state import SessionState
from clickonce_fetch.deploy.storage import FileWriter, LocalFileWriter, save_deployed_files
from clickonce_fetch.deploy.transport import HttpTransport, Transport
from clickonce_fetch.deploy.traversal import retrieve_all
from clickonce_fetch.manifest.decoder import decode_manifest
from clickonce_fetch.manifest.models import DeployedFile, Manifest

logger = logging.getLogger(__name__)


class DeploymentSession:
    """Retrieve the files of a ClickOnce application.

    Typical use:

        with DeploymentSession(SessionConfig(output_dir=Path("out"))) as session:
            session.init("https://example.com/app/App.application")
            session.get(["App.exe"])

    Progress is reported through the ``clickonce_fetch`` loggers.
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        transport: Optional[Transport] = None,
        writer: Optional[FileWriter] = None,
    ):
        self.config = config or SessionConfig()
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport(self.config)
        self._writer = writer or LocalFileWriter()
        self._state = SessionState()
        self._manifest: Optional[Manifest] = None

    @property
    def deployed_files(self) -> Mapping[str, DeployedFile]:
        """Read-only snapshot of the retrieved files, keyed by manifest path."""
        return MappingProxyType(dict(self._state.deployed_files))

    @property
    def offline(self) -> bool:
        return self._state.offline

    @property
    def no_suffix(self) -> bool:
        return self._state.no_suffix

    @property
    def base_url(self) -> Optional[str]:
        return self._state.base_url

    def set_output_dir(self, output_dir: Optional[Union[str, Path]]) -> None:
        """Set the directory where deployed files are saved; None disables saving."""
        self.config = SessionConfig.build(
            **{**self.config.model_dump(), "output_dir": output_dir}
        )

    def init(self, app_url: str) -> None:
        """Load the deployment manifest of an application.

        Args:
            app_url: URL of the ClickOnce deployment manifest

        Raises:
            ConfigError: If app_url is empty
            NotFoundError: If the server answers 404
            DecodeError: If the manifest is empty or malformed
            TransportError: On network failure or unexpected status
        """
        if not app_url:
            raise ConfigError("Missing valid application URL")

        result = self._transport.fetch(app_url)

        if result.not_found:
            raise NotFoundError(f"No application available at '{app_url}'")
        if not result.ok:
            raise TransportError(
                f"Unexpected HTTP status {result.status_code} for '{app_url}'",
                status_code=result.status_code,
            )
        if len(result.content) == 0:
            raise DecodeError("Application file is empty")

        self._manifest = decode_manifest(result.content)
        self._state = SessionState(root_url=result.url, base_url=result.url)
        logger.info(f"Application manifest loaded from '{result.url}'")

    def get(self, subset: Optional[Iterable[str]] = None) -> None:
        """Retrieve the files named in subset, or every file if subset is empty.

        Files are verified as they are downloaded and, when an output
        directory is configured, saved afterwards. Files saved before a
        failure stay on disk.

        Raises:
            ConfigError: If the session is not initialized or subset holds
                an empty name
            NotFoundError: If none of the requested files were found
            IncompleteSubsetError: If some of the requested files were not found
        """
        if self._manifest is None or self._state.root_url is None:
            raise ConfigError("ClickOnce session not initialized")

        self._state.init_subset(subset)

        if not self._state.offline:
            self._state.mark_downloaded_subset()
            self._state.begin_pass()
            try:
                retrieve_all(self._state, self._manifest, self._transport)
            except ClickOnceError:
                try:
                    self._save()
                except StorageError as save_error:
                    logger.error(f"Cannot save retrieved files: {save_error}")
                raise
        else:
            logger.info("Files already offline, download skipped")
            self._state.mark_downloaded_subset()

        missing = self._state.missing_from_subset()
        for name in missing:
            logger.warning(f"Requested file '{name}' not found")

        if missing and len(missing) == len(self._state.subset):
            raise NotFoundError("None of requested files are found")

        self._save()

        if missing:
            raise IncompleteSubsetError(
                f"Not all requested files are found, missing: {', '.join(missing)}",
                missing=missing,
            )

    def get_all(self) -> None:
        """Retrieve every file and keep them for later subset requests."""
        self.get(None)
        self._state.offline = True

    def _save(self) -> None:
        if self.config.output_dir is None:
            return
        saved = save_deployed_files(self._state, self.config.output_dir, self._writer)
        logger.info(f"Saved {saved} files to {self.config.output_dir}")

    def close(self) -> None:
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "DeploymentSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
