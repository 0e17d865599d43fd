"""
Exception classes for the versioning module.
"""

from typing import Optional

from semver_release.constants import ErrorKind, RunMode


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    kind: Optional[ErrorKind] = None


class MalformedVersionError(VersioningError):
    """Raised when a version string has an invalid format."""

    kind = ErrorKind.MALFORMED_VERSION

    def __init__(self, version_string: str, expected_format: str = "x.y.z[-qualifier]"):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class UnrecognizedBranchError(VersioningError):
    """Raised when a branch name matches none of the classification rules."""

    kind = ErrorKind.UNRECOGNIZED_BRANCH

    def __init__(self, branch: str):
        self.branch = branch
        if branch:
            message = (
                f"Branch '{branch}' does not match digit.digit.digit, "
                "v+digit_digit_digit or the mainline branch"
            )
        else:
            message = "Current branch is empty, no branch version can be determined"
        super().__init__(message)


class UnsupportedRunModeError(VersioningError):
    """Raised when the configured run mode has no handler."""

    kind = ErrorKind.UNSUPPORTED_RUN_MODE

    def __init__(self, run_mode: RunMode):
        self.run_mode = run_mode
        super().__init__(f"Run mode {run_mode.value} is not supported")


class RemoteVersionCorruptError(VersioningError):
    """Raised when the remote already holds a tag at or above the candidate."""

    kind = ErrorKind.REMOTE_VERSION_CORRUPT

    def __init__(self, candidate_tag: str, remote_tag: Optional[str]):
        self.candidate_tag = candidate_tag
        self.remote_tag = remote_tag
        super().__init__(
            f"Remote tag {remote_tag} is not behind candidate {candidate_tag}. "
            "Please check your repository state."
        )


class LocalVersionCorruptError(VersioningError):
    """Raised when local tags already cover the candidate or declared version."""

    kind = ErrorKind.LOCAL_VERSION_CORRUPT

    def __init__(self, version: str, local_tag: Optional[str]):
        self.version = version
        self.local_tag = local_tag
        super().__init__(
            f"Local tag {local_tag} is not behind version {version}. "
            "Please check your repository state."
        )


class DirtyWorkingTreeError(VersioningError):
    """Raised when the working copy has uncommitted changes."""

    kind = ErrorKind.DIRTY_WORKING_TREE

    def __init__(self):
        super().__init__(
            "Working tree has uncommitted changes. Commit or stash them first."
        )


class DelegationUnavailableError(VersioningError):
    """Raised when no usable branch fragment could be determined."""

    kind = ErrorKind.DELEGATION_UNAVAILABLE

    def __init__(self, branch: str, reason: str = "no branch version determined"):
        self.branch = branch
        self.reason = reason
        if branch:
            super().__init__(f"Branch version for '{branch}' unavailable: {reason}")
        else:
            super().__init__(f"Branch version unavailable: {reason}")


class SourceControlError(VersioningError):
    """Raised when the source-control collaborator cannot answer."""

    kind = ErrorKind.SOURCE_CONTROL


class IgnoredBranch(VersioningError):
    """Signals a non-release context; the run stops without producing versions."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' looks generated, assuming a test run")
