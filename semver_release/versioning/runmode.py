"""
Run-mode resolution.

The run mode is chosen once from configuration. Every mode bumps the same
way and always yields ``{major}.{minor}.{patch}-SNAPSHOT`` as the next
development version; modes differ only in how the SCM tag and the build
metadata are put together:

=====================  ==========================================  ==================
Mode                   SCM tag                                     METADATA
=====================  ==========================================  ==================
RELEASE / NATIVE       ``{M}.{m}.{p}{metadata}``                   ``{metadata}``
*_BRANCH               ``{fragment}-{M}.{m}.{p}{metadata}``        ``{metadata}``
*_BRANCH_RPM           ``{fragment}-{M}.{m}.{p}{metadata}``        ``{metadata}+{rpm}``
=====================  ==========================================  ==================

The release version is always the plain ``{M}.{m}.{p}`` triple.
"""

import logging
import re
from types import MappingProxyType
from typing import Callable, Dict, Iterator, Mapping, Optional

from semver_release.constants import BumpKind, BundleKey, RunMode

from .exceptions import DelegationUnavailableError, UnsupportedRunModeError
from .version import SemanticVersion

logger = logging.getLogger(__name__)

_RPM_RELEASE_PATTERN = re.compile(r"(\d+)$")
DEFAULT_RPM_RELEASE = "1"


class VersionBundle(Mapping):
    """Read-only mapping from every BundleKey to its derived value."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[BundleKey, str]):
        missing = [key.value for key in BundleKey if key not in values]
        if missing:
            raise ValueError(f"Version bundle is missing keys: {', '.join(missing)}")
        self._values = MappingProxyType({key: str(values[key]) for key in BundleKey})

    def __getitem__(self, key: BundleKey) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[BundleKey]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, VersionBundle):
            return NotImplemented
        return dict(self._values) == dict(other._values)

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        return f"VersionBundle({self.to_dict()!r})"

    @property
    def scm_tag(self) -> str:
        return self._values[BundleKey.SCM_TAG]

    def to_dict(self) -> Dict[str, str]:
        """Plain string-keyed copy, in BundleKey order."""
        return {key.value: value for key, value in self._values.items()}


def rpm_release_number(branch_fragment: str) -> str:
    """Trailing digits of the branch fragment, used as the RPM release number."""
    match = _RPM_RELEASE_PATTERN.search(branch_fragment)
    if match is None:
        return DEFAULT_RPM_RELEASE
    return match.group(1)


class RunModeResolver:
    """
    Derives the versions of the next release for a fixed run mode.

    Args:
        run_mode: Configured run mode
        metadata: Suffix appended verbatim to the SCM tag (e.g. "-solr")
    """

    def __init__(self, run_mode: RunMode, metadata: Optional[str] = None):
        self.run_mode = run_mode
        self.metadata = metadata or ""
        self._handlers: Dict[RunMode, Callable[..., VersionBundle]] = {
            RunMode.RELEASE: self._resolve_plain,
            RunMode.NATIVE: self._resolve_plain,
            RunMode.RELEASE_BRANCH: self._resolve_branch,
            RunMode.NATIVE_BRANCH: self._resolve_branch,
            RunMode.RELEASE_BRANCH_RPM: self._resolve_branch_rpm,
            RunMode.NATIVE_BRANCH_RPM: self._resolve_branch_rpm,
        }

    def ensure_supported(self) -> None:
        if self.run_mode not in self._handlers:
            raise UnsupportedRunModeError(self.run_mode)

    def tag_namespace(self, branch_fragment: Optional[str] = None) -> str:
        """Prefix in front of the version triple in this mode's tags."""
        self.ensure_supported()
        if self.run_mode.uses_branch:
            return f"{self._require_fragment(branch_fragment)}-"
        return ""

    def candidate_tag(
        self,
        current: SemanticVersion,
        bump: BumpKind,
        branch_fragment: Optional[str] = None,
    ) -> str:
        """SCM tag the next release would get, without running the mode handler."""
        release = current.bump(bump)
        return f"{self.tag_namespace(branch_fragment)}{release.release}{self.metadata}"

    def resolve(
        self,
        current: SemanticVersion,
        bump: BumpKind,
        branch_fragment: Optional[str] = None,
    ) -> VersionBundle:
        """
        Run the mode handler and build the version bundle.

        Raises:
            UnsupportedRunModeError: If the run mode has no handler
            DelegationUnavailableError: If a branch mode has no fragment
        """
        self.ensure_supported()
        release = current.bump(bump)

        logger.debug(f"MAJOR-version                     : [ {release.major} ]")
        logger.debug(f"MINOR-version                     : [ {release.minor} ]")
        logger.debug(f"PATCH-version                     : [ {release.patch} ]")

        bundle = self._handlers[self.run_mode](release, branch_fragment)

        logger.info(f"New DEVELOPMENT-version           : [ {bundle[BundleKey.DEVELOPMENT]} ]")
        logger.info(f"New GIT-version                   : [ {bundle.scm_tag} ]")
        logger.info(f"New RELEASE-version               : [ {bundle[BundleKey.RELEASE]} ]")
        return bundle

    def _require_fragment(self, branch_fragment: Optional[str]) -> str:
        if not branch_fragment:
            raise DelegationUnavailableError(
                "", f"run mode {self.run_mode.value} needs a branch version"
            )
        return branch_fragment

    def _bundle(
        self, release: SemanticVersion, scm_tag: str, metadata: str
    ) -> VersionBundle:
        return VersionBundle(
            {
                BundleKey.DEVELOPMENT: str(release.as_snapshot()),
                BundleKey.RELEASE: release.release,
                BundleKey.SCM_TAG: scm_tag,
                BundleKey.METADATA: metadata,
                BundleKey.MAJOR: str(release.major),
                BundleKey.MINOR: str(release.minor),
                BundleKey.PATCH: str(release.patch),
            }
        )

    def _resolve_plain(self, release: SemanticVersion, branch_fragment=None):
        return self._bundle(release, f"{release.release}{self.metadata}", self.metadata)

    def _resolve_branch(self, release: SemanticVersion, branch_fragment=None):
        fragment = self._require_fragment(branch_fragment)
        scm_tag = f"{fragment}-{release.release}{self.metadata}"
        return self._bundle(release, scm_tag, self.metadata)

    def _resolve_branch_rpm(self, release: SemanticVersion, branch_fragment=None):
        fragment = self._require_fragment(branch_fragment)
        rpm_release = rpm_release_number(fragment)
        logger.info(f"RPM release-number                : [ {rpm_release} ]")
        scm_tag = f"{fragment}-{release.release}{self.metadata}"
        return self._bundle(release, scm_tag, f"{self.metadata}+{rpm_release}")
