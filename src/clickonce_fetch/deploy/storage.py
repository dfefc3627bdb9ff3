"""Save deployed files to a local directory tree."""
import logging
from pathlib import Path
from typing import Protocol

from clickonce_fetch.core.errors import StorageError
from clickonce_fetch.deploy.state import SessionState
from clickonce_fetch.manifest.models import deployed_filename, to_posix_path

logger = logging.getLogger(__name__)


class FileWriter(Protocol):
    """Write bytes to a path, creating parent directories."""

    def write_file(self, path: Path, content: bytes) -> None:
        ...


class LocalFileWriter:
    """FileWriter for the local filesystem."""

    def write_file(self, path: Path, content: bytes) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def output_path(output_dir: Path, deployed_path: str) -> Path:
    """Location of a deployed file below output_dir.

    Raises:
        StorageError: If the path would land outside output_dir
    """
    root = Path(output_dir).resolve()
    target = (root / to_posix_path(deployed_path).lstrip("/")).resolve()
    if root not in target.parents:
        raise StorageError(f"'{deployed_path}' escapes output directory '{output_dir}'")
    return target


def save_deployed_files(
    state: SessionState,
    output_dir: Path,
    writer: FileWriter,
) -> int:
    """Save every deployed file accepted by the subset filter.

    Returns:
        Number of files written
    """
    saved = 0
    for deployed_path, deployed_file in state.deployed_files.items():
        filename = deployed_filename(deployed_path)
        if not state.wants(filename):
            logger.info(f"'{filename}' not in requested subset, skipped")
            continue

        target = output_path(output_dir, deployed_path)
        logger.info(f"Saving {target}")
        try:
            writer.write_file(target, deployed_file.content)
        except OSError as e:
            raise StorageError(f"Cannot save '{deployed_path}' to {target}: {e}") from e
        logger.info(f"Saved {target}")
        saved += 1

    return saved
