"""
Versioning module for semver_release.

All version logic lives here so that the command line only wires
configuration, source control and output together.

LAYERS:
=======

1. **Core version logic** (version.py):
   - SemanticVersion: immutable major.minor.patch[-qualifier] with bump operations
   - parse_version / increment_version / compare_versions helpers

2. **Branch classification** (branch.py):
   - BranchClassifier: ordered branch-name rules, delegating the mainline
     branch to an external branch-conversion service
   - BranchFragment variants: ExplicitVersion, LegacyEncoded, Delegated,
     Ignored, Unrecognized

3. **Run modes** (runmode.py):
   - RunModeResolver: derives development/release/SCM tag/metadata values
   - VersionBundle: read-only result handed to manifest writers

4. **Consistency checks** (consistency.py):
   - RepositoryConsistencyChecker: working tree, local and remote tag checks

5. **Orchestration** (orchestrator.py):
   - VersionOrchestrator: one resolution pass, reported as a ResolutionOutcome

6. **Git integration** (git.py):
   - GitRepository: GitPython implementation of the SourceControl protocol

7. **Exception hierarchy** (exceptions.py)
"""

from .branch import (
    BranchClassifier,
    BranchFragment,
    Delegated,
    ExplicitVersion,
    Ignored,
    LegacyEncoded,
    Unrecognized,
)
from .consistency import ConsistencyVerdict, RepositoryConsistencyChecker
from .exceptions import (
    VersioningError,
    MalformedVersionError,
    UnrecognizedBranchError,
    UnsupportedRunModeError,
    RemoteVersionCorruptError,
    LocalVersionCorruptError,
    DirtyWorkingTreeError,
    DelegationUnavailableError,
    SourceControlError,
    IgnoredBranch,
)
from .git import GitRepository
from .orchestrator import ResolutionOutcome, VersionOrchestrator
from .runmode import RunModeResolver, VersionBundle
from .version import SemanticVersion, parse_version, increment_version, compare_versions

__all__ = [
    # Orchestration
    "VersionOrchestrator",
    "ResolutionOutcome",
    # Components
    "BranchClassifier",
    "RepositoryConsistencyChecker",
    "RunModeResolver",
    "GitRepository",
    # Values
    "SemanticVersion",
    "VersionBundle",
    "ConsistencyVerdict",
    "BranchFragment",
    "ExplicitVersion",
    "LegacyEncoded",
    "Delegated",
    "Ignored",
    "Unrecognized",
    # Helpers
    "parse_version",
    "increment_version",
    "compare_versions",
    # Exceptions
    "VersioningError",
    "MalformedVersionError",
    "UnrecognizedBranchError",
    "UnsupportedRunModeError",
    "RemoteVersionCorruptError",
    "LocalVersionCorruptError",
    "DirtyWorkingTreeError",
    "DelegationUnavailableError",
    "SourceControlError",
    "IgnoredBranch",
]
