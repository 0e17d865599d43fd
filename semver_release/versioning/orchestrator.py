"""
Version orchestrator: one complete resolution pass.

Steps run strictly in order and any failure stops the pass:

1. the working tree must be clean
2. the declared version is parsed
3. the branch is classified (configured override first)
4. the declared version must not be behind the local tags
5. the remote must not already hold the candidate tag (optional)
6. the run-mode handler builds the version bundle
7. the candidate tag must not already exist locally

Failures are raised as VersioningError subclasses inside the pass and
turned into a ResolutionOutcome by ``run``; nothing below the command line
decides exit codes.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from semver_release.config import ResolutionConfig
from semver_release.constants import BumpKind, ErrorKind, OutcomeStatus
from semver_release.core.interfaces import SourceControl

from .branch import (
    BranchClassifier,
    BranchFragment,
    Delegated,
    ExplicitVersion,
    Ignored,
    LegacyEncoded,
    Unrecognized,
)
from .consistency import RepositoryConsistencyChecker
from .exceptions import (
    DelegationUnavailableError,
    IgnoredBranch,
    UnrecognizedBranchError,
    VersioningError,
)
from .runmode import RunModeResolver, VersionBundle
from .version import SemanticVersion, parse_version

logger = logging.getLogger(__name__)

LINE_BREAK = "-" * 72


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of a resolution pass: a complete bundle or the reason there is none."""

    status: OutcomeStatus
    bundle: Optional[VersionBundle] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def fragment_value(fragment: BranchFragment) -> str:
    """
    Version fragment carried by a classification.

    Raises:
        IgnoredBranch: For generated branch names
        UnrecognizedBranchError: For branches matching no rule
        DelegationUnavailableError: When the conversion service gave nothing
    """
    if isinstance(fragment, (ExplicitVersion, LegacyEncoded)):
        return fragment.value
    if isinstance(fragment, Delegated):
        if not fragment.value:
            raise DelegationUnavailableError("", "branch conversion service gave no version")
        return fragment.value
    if isinstance(fragment, Ignored):
        raise IgnoredBranch(fragment.branch)
    if isinstance(fragment, Unrecognized):
        raise UnrecognizedBranchError(fragment.branch)
    raise TypeError(f"Unknown branch fragment: {fragment!r}")


class VersionOrchestrator:
    """
    Composes parsing, branch classification, consistency checks and run-mode
    resolution into a single pass.

    Args:
        config: Immutable configuration for this pass
        source_control: Collaborator answering branch and tag questions
        classifier: Optional classifier (built from config when omitted)
    """

    def __init__(
        self,
        config: ResolutionConfig,
        source_control: SourceControl,
        classifier: Optional[BranchClassifier] = None,
    ):
        self.config = config
        self.source_control = source_control
        self.classifier = classifier or BranchClassifier(
            branch_conversion_url=config.branch_conversion_url,
            mainline_branch=config.mainline_branch,
            timeout=config.delegation_timeout,
        )
        self.resolver = RunModeResolver(config.run_mode, config.metadata)
        self.checker = RepositoryConsistencyChecker(source_control)

    def classify_branch(self) -> BranchFragment:
        branch = None
        if not self.config.branch_version:
            logger.info("Determine current branchVersion from GIT-repository")
            branch = self.source_control.current_branch()
        return self.classifier.classify(branch, self.config.branch_version)

    def resolve(
        self, current_version: Union[str, SemanticVersion], bump: BumpKind
    ) -> VersionBundle:
        """
        Run the pass and return the bundle.

        Raises:
            VersioningError: On any failed step; no bundle is produced
        """
        logger.info(LINE_BREAK)
        logger.info(f"Semver-goal                       : {bump.name}")
        logger.info(f"Run-mode                          : {self.config.run_mode.value}")
        logger.info(f"Version from manifest             : [ {current_version} ]")
        logger.info(LINE_BREAK)

        self.resolver.ensure_supported()
        self.checker.ensure_clean()
        current = parse_version(current_version)

        fragment = fragment_value(self.classify_branch())
        branch_fragment = fragment if self.config.run_mode.uses_branch else None
        namespace = self.resolver.tag_namespace(branch_fragment)

        self.checker.ensure_declared_version(current, namespace)

        candidate = self.resolver.candidate_tag(current, bump, branch_fragment)
        if self.config.check_remote_tags:
            self.checker.ensure_remote_behind(candidate, namespace)
        else:
            logger.debug("Remote tag check disabled")

        bundle = self.resolver.resolve(current, bump, branch_fragment)
        self.checker.ensure_local_behind(bundle.scm_tag, namespace)
        logger.info(LINE_BREAK)
        return bundle

    def run(
        self, current_version: Union[str, SemanticVersion], bump: BumpKind
    ) -> ResolutionOutcome:
        """Like ``resolve`` but reports failures as a ResolutionOutcome."""
        try:
            bundle = self.resolve(current_version, bump)
        except IgnoredBranch as e:
            logger.warning(str(e))
            return ResolutionOutcome(OutcomeStatus.SKIPPED, message=str(e))
        except VersioningError as e:
            logger.error(str(e))
            return ResolutionOutcome(
                OutcomeStatus.FAILED, error_kind=e.kind, message=str(e)
            )
        return ResolutionOutcome(OutcomeStatus.RESOLVED, bundle=bundle)
