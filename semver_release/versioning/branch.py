"""
Branch-name classification.

The current branch decides which version fragment ends up in a branch
release tag. Rules are evaluated in a fixed order and the first match wins:

1. ``x.y.z...``       the branch name is used verbatim
2. ``vX_Y_Z...``      legacy underscore encoding, converted to ``X.Y.Z``
3. mainline branch    the fragment is fetched from the branch-conversion service
4. ``[a-z0-9]*``      generated names (detached heads, CI hashes): ignored
5. anything else      unrecognized
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

import requests

from semver_release.constants import DEFAULT_DELEGATION_TIMEOUT, DEFAULT_MAINLINE_BRANCH

logger = logging.getLogger(__name__)

_EXPLICIT_PATTERN = re.compile(r"\d+\.\d+\.\d+.*")
_LEGACY_PATTERN = re.compile(r"v\d+_\d+_\d+.*")
_GENERATED_PATTERN = re.compile(r"[a-z0-9]*")


@dataclass(frozen=True)
class ExplicitVersion:
    value: str


@dataclass(frozen=True)
class LegacyEncoded:
    value: str


@dataclass(frozen=True)
class Delegated:
    """Fragment returned by the branch-conversion service ("" when unavailable)."""

    value: str


@dataclass(frozen=True)
class Ignored:
    branch: str


@dataclass(frozen=True)
class Unrecognized:
    branch: str


BranchFragment = Union[ExplicitVersion, LegacyEncoded, Delegated, Ignored, Unrecognized]


def decode_legacy_branch(branch: str) -> str:
    """Convert ``v1_4_0_extra`` into ``1.4.0``."""
    raw = branch.replace("v", "").replace("_", ".")
    parts = raw.split(".")
    return ".".join(parts[:3])


class BranchClassifier:
    """Classifies a branch name into a BranchFragment."""

    def __init__(
        self,
        branch_conversion_url: Optional[str] = None,
        mainline_branch: str = DEFAULT_MAINLINE_BRANCH,
        timeout: float = DEFAULT_DELEGATION_TIMEOUT,
    ):
        self.branch_conversion_url = branch_conversion_url
        self.mainline_branch = mainline_branch
        self.timeout = timeout

    def classify(
        self, branch_name: Optional[str], explicit_override: Optional[str] = None
    ) -> BranchFragment:
        """
        Classify a branch name.

        Args:
            branch_name: Current source-control branch
            explicit_override: Configured branch version; when non-empty it
                wins without looking at the branch at all

        Returns:
            The first matching BranchFragment variant
        """
        if explicit_override:
            logger.debug(f"Using configured branch version: {explicit_override}")
            return ExplicitVersion(explicit_override)

        branch = branch_name or ""
        logger.info(f"Current branch                    : {branch}")

        if not branch:
            logger.error("Current branch is empty or null")
            return Unrecognized(branch)

        if _EXPLICIT_PATTERN.fullmatch(branch):
            logger.info("Current branch matches            : x.y.z.*")
            return ExplicitVersion(branch)

        if _LEGACY_PATTERN.fullmatch(branch):
            logger.info("Current branch matches            : vX_Y_Z.*")
            return LegacyEncoded(decode_legacy_branch(branch))

        if branch == self.mainline_branch:
            logger.info(f"Current branch matches            : {self.mainline_branch}")
            return Delegated(self.fetch_branch_version(branch))

        if _GENERATED_PATTERN.fullmatch(branch):
            logger.warning("Current branch matches generated name: [a-z0-9]*")
            logger.warning("Application is running tests")
            return Ignored(branch)

        logger.error(f"Current branch '{branch}' matches no branch rule")
        return Unrecognized(branch)

    def fetch_branch_version(self, branch: str) -> str:
        """
        Ask the branch-conversion service for the version of a branch.

        Failures are logged and reported as an empty fragment.
        """
        if not self.branch_conversion_url:
            logger.error("No branch conversion url configured")
            return ""

        url = f"{self.branch_conversion_url}{branch}"
        logger.info(f"Setup connection to               : {url}")
        try:
            response = requests.get(
                url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            logger.info(f"Versionizer returned response-code: {response.status_code}")
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Could not make request to versionizer: {e}")
            return ""

        branch_version = response.text.strip()
        if branch_version:
            logger.info(f"Versionizer returned branchversion: {branch_version}")
        else:
            logger.error("No branch version could be determined")
        return branch_version
