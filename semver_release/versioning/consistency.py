"""
Consistency checks between a release candidate and existing tags.

Tags are grouped by namespace, the text in front of the version triple
(``""`` for plain release tags, ``"featureX-"`` for branch tags). Within a
namespace the triples are compared numerically; a candidate is only
acceptable when it is strictly ahead of every existing tag and not already
present.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from semver_release.core.interfaces import SourceControl

from .exceptions import (
    DirtyWorkingTreeError,
    LocalVersionCorruptError,
    RemoteVersionCorruptError,
)
from .version import SemanticVersion, leading_release_triple

logger = logging.getLogger(__name__)

# A version triple followed by "-" and another triple: a branch tag
_NESTED_TAG_PATTERN = re.compile(r"\d+\.\d+\.\d+-\d+\.\d+\.\d+")


@dataclass(frozen=True)
class ConsistencyVerdict:
    is_local_corrupt: bool
    is_remote_corrupt: bool
    reason: Optional[str] = None

    @property
    def is_consistent(self) -> bool:
        return not (self.is_local_corrupt or self.is_remote_corrupt)


def highest_tag(
    tags: Iterable[str], namespace: str = ""
) -> Optional[Tuple[str, SemanticVersion]]:
    """
    Find the highest tag of a namespace.

    Tags of a nested namespace are skipped: ``1.4.0-1.2.4`` belongs to
    ``"1.4.0-"``, not to ``""``.

    Args:
        tags: Tag names
        namespace: Prefix the tags must start with

    Returns:
        (tag name, release triple) of the highest tag, or None
    """
    best: Optional[Tuple[str, SemanticVersion]] = None
    for tag in tags:
        if not tag.startswith(namespace):
            continue
        remainder = tag[len(namespace) :]
        if _NESTED_TAG_PATTERN.match(remainder):
            continue
        triple = leading_release_triple(remainder)
        if triple is None:
            continue
        if best is None or triple > best[1]:
            best = (tag, triple)
    return best


def is_tag_behind(candidate_tag: str, tags: Iterable[str], namespace: str = "") -> bool:
    """True when candidate_tag is new and strictly ahead of every tag in its namespace."""
    tags = list(tags)
    if candidate_tag in tags:
        return False
    candidate = leading_release_triple(candidate_tag[len(namespace) :])
    if candidate is None:
        # Nothing to order on, only the exact match check applies
        return True
    highest = highest_tag(tags, namespace)
    return highest is None or highest[1] < candidate


class RepositoryConsistencyChecker:
    """Compares candidate tags with the local and remote tag state."""

    def __init__(self, source_control: SourceControl):
        self.source_control = source_control

    def highest_local_tag(self, namespace: str = "") -> Optional[str]:
        found = highest_tag(self.source_control.local_tags(), namespace)
        return found[0] if found else None

    def highest_remote_tag(self, namespace: str = "") -> Optional[str]:
        found = highest_tag(self.source_control.remote_tags(), namespace)
        return found[0] if found else None

    def check_local(self, candidate_tag: str, namespace: str = "") -> bool:
        """True when the candidate already exists locally or is not ahead of local tags."""
        corrupt = not is_tag_behind(
            candidate_tag, self.source_control.local_tags(), namespace
        )
        logger.debug(f"Local tag check for {candidate_tag}: corrupt={corrupt}")
        return corrupt

    def check_remote(self, candidate_tag: str, namespace: str = "") -> bool:
        """True when the candidate already exists remotely or is not ahead of remote tags."""
        corrupt = not is_tag_behind(
            candidate_tag, self.source_control.remote_tags(), namespace
        )
        logger.debug(f"Remote tag check for {candidate_tag}: corrupt={corrupt}")
        return corrupt

    def verdict(self, candidate_tag: str, namespace: str = "") -> ConsistencyVerdict:
        """Run both checks and report them together."""
        local = self.check_local(candidate_tag, namespace)
        remote = self.check_remote(candidate_tag, namespace)
        reason = None
        if remote:
            reason = (
                f"remote tag {self.highest_remote_tag(namespace)} "
                f"is not behind {candidate_tag}"
            )
        elif local:
            reason = (
                f"local tag {self.highest_local_tag(namespace)} "
                f"is not behind {candidate_tag}"
            )
        return ConsistencyVerdict(
            is_local_corrupt=local, is_remote_corrupt=remote, reason=reason
        )

    def ensure_clean(self) -> None:
        if self.source_control.is_working_tree_changed():
            logger.error("Working tree contains uncommitted changes")
            raise DirtyWorkingTreeError()

    def ensure_declared_version(
        self, declared: SemanticVersion, namespace: str = ""
    ) -> None:
        """The declared version may equal the highest local tag but never fall behind it."""
        found = highest_tag(self.source_control.local_tags(), namespace)
        if found is not None and found[1] > declared:
            logger.error(
                f"Declared version {declared} is behind local tag {found[0]}"
            )
            raise LocalVersionCorruptError(str(declared), found[0])

    def ensure_remote_behind(self, candidate_tag: str, namespace: str = "") -> None:
        if self.check_remote(candidate_tag, namespace):
            remote_tag = self.highest_remote_tag(namespace) or candidate_tag
            logger.error("Remote version is higher than local version in your repository")
            logger.error("Please check your repository state")
            raise RemoteVersionCorruptError(candidate_tag, remote_tag)

    def ensure_local_behind(self, candidate_tag: str, namespace: str = "") -> None:
        if self.check_local(candidate_tag, namespace):
            local_tag = self.highest_local_tag(namespace) or candidate_tag
            logger.error(f"Tag {candidate_tag} is not ahead of local tag {local_tag}")
            raise LocalVersionCorruptError(candidate_tag, local_tag)
