"""Protocol interfaces for the source-control collaborator.

Resolution only needs to read branch and tag state; the adapter in
semver_release.versioning.git implements this on top of GitPython.
"""

from typing import List, Protocol


class SourceControl(Protocol):
    """Minimal interface resolution needs from a source-control checkout."""

    def current_branch(self) -> str:
        """Name of the checked out branch (head commit sha when detached)."""
        ...

    def is_working_tree_changed(self) -> bool:
        """True when there are uncommitted changes."""
        ...

    def local_tags(self) -> List[str]:
        """Tag names known to the local repository."""
        ...

    def remote_tags(self) -> List[str]:
        """Tag names published on the remote."""
        ...

    def create_tag(self, name: str, push: bool = False) -> None:
        """Create a tag at HEAD, optionally pushing it."""
        ...
