from enum import Enum
from typing import Optional


APP_NAME = "semver-release"

# Pre-release marker appended to the next development version
SNAPSHOT = "SNAPSHOT"

# Branch-conversion service
DEFAULT_MAINLINE_BRANCH = "master"
DEFAULT_DELEGATION_TIMEOUT = 10.0

DEFAULT_REMOTE_NAME = "origin"


class RunMode(Enum):
    """Release strategy selected once per invocation."""

    RELEASE = "RELEASE"
    RELEASE_BRANCH = "RELEASE_BRANCH"
    RELEASE_BRANCH_RPM = "RELEASE_BRANCH_RPM"
    NATIVE = "NATIVE"
    NATIVE_BRANCH = "NATIVE_BRANCH"
    NATIVE_BRANCH_RPM = "NATIVE_BRANCH_RPM"
    UNSPECIFIED = "UNSPECIFIED"

    @classmethod
    def from_name(cls, name: Optional[str]) -> "RunMode":
        """Convert a configured name; anything unknown becomes UNSPECIFIED."""
        if name is None:
            return cls.UNSPECIFIED
        try:
            return cls(str(name).strip().upper())
        except ValueError:
            return cls.UNSPECIFIED

    @property
    def uses_branch(self) -> bool:
        return self in (
            RunMode.RELEASE_BRANCH,
            RunMode.RELEASE_BRANCH_RPM,
            RunMode.NATIVE_BRANCH,
            RunMode.NATIVE_BRANCH_RPM,
        )

    @property
    def uses_rpm(self) -> bool:
        return self in (RunMode.RELEASE_BRANCH_RPM, RunMode.NATIVE_BRANCH_RPM)


class BumpKind(Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class BundleKey(Enum):
    DEVELOPMENT = "DEVELOPMENT"
    RELEASE = "RELEASE"
    SCM_TAG = "SCM_TAG"
    METADATA = "METADATA"
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"


class OutcomeStatus(Enum):
    RESOLVED = "resolved"
    SKIPPED = "skipped"
    FAILED = "failed"


class ErrorKind(Enum):
    MALFORMED_VERSION = "MalformedVersion"
    UNRECOGNIZED_BRANCH = "UnrecognizedBranch"
    UNSUPPORTED_RUN_MODE = "UnsupportedRunMode"
    REMOTE_VERSION_CORRUPT = "RemoteVersionCorrupt"
    LOCAL_VERSION_CORRUPT = "LocalVersionCorrupt"
    DIRTY_WORKING_TREE = "DirtyWorkingTree"
    DELEGATION_UNAVAILABLE = "DelegationUnavailable"
    SOURCE_CONTROL = "SourceControlError"
