"""Mutable state shared by a deployment session and its traversals."""
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from clickonce_fetch.core.errors import ConfigError
from clickonce_fetch.manifest.models import DeployedFile, deployed_filename


class SessionState(BaseModel):
    """Accumulated results and cursors of a deployment session.

    ``base_url`` is the URL against which manifest paths are resolved. It
    starts at the root manifest and moves to a dependent manifest's location
    whenever an install dependency that is itself a manifest is followed;
    entries visited afterwards resolve against the new location.
    """

    root_url: Optional[str] = Field(default=None, description="Root manifest URL, after redirects")
    base_url: Optional[str] = Field(default=None, description="Current base URL")
    deployed_files: Dict[str, DeployedFile] = Field(default_factory=dict)
    subset: Optional[Dict[str, bool]] = Field(
        default=None, description="Requested filenames and whether they were found"
    )
    offline: bool = Field(default=False, description="True once every file was retrieved")
    no_suffix: bool = Field(
        default=False, description="True once files were found without the .deploy suffix"
    )
    visited_manifests: Set[str] = Field(
        default_factory=set, description="Manifest paths traversed during the current pass"
    )

    def begin_pass(self) -> None:
        """Start a traversal from the root manifest."""
        self.base_url = self.root_url
        self.visited_manifests = set()

    def init_subset(self, names: Optional[Iterable[str]]) -> None:
        """Set the subset filter; no names means no filter."""
        names = list(names or [])
        if not names:
            self.subset = None
            return
        if any(name == "" for name in names):
            raise ConfigError("Empty filename is not valid in a subset")
        self.subset = {name: False for name in names}

    def in_subset(self, filename: str) -> bool:
        return self.subset is not None and filename in self.subset

    def wants(self, filename: str) -> bool:
        """Whether a file passes the subset filter (always true without one)."""
        return self.subset is None or filename in self.subset

    def mark_found(self, filename: str) -> None:
        if self.in_subset(filename):
            self.subset[filename] = True

    def mark_downloaded_subset(self) -> None:
        """Mark subset members that are already among the deployed files."""
        for path in self.deployed_files:
            self.mark_found(deployed_filename(path))

    def missing_from_subset(self) -> List[str]:
        if self.subset is None:
            return []
        return [name for name, found in self.subset.items() if not found]
