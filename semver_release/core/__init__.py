"""Core interfaces and abstractions for semver_release."""

from semver_release.core.interfaces import SourceControl

__all__ = ["SourceControl"]
