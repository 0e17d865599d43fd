"""
Tests for VersionOrchestrator.

All tests in this file are marked as 'short' since they use an in-memory
source-control collaborator and mock the branch-conversion service.
"""

from unittest.mock import MagicMock, patch

import pytest

from semver_release.config import ResolutionConfig
from semver_release.constants import BumpKind, BundleKey, ErrorKind, OutcomeStatus, RunMode
from semver_release.versioning.exceptions import (
    DirtyWorkingTreeError,
    IgnoredBranch,
    MalformedVersionError,
    RemoteVersionCorruptError,
    UnrecognizedBranchError,
)
from semver_release.versioning.orchestrator import VersionOrchestrator


def _orchestrator(scm, **config):
    return VersionOrchestrator(ResolutionConfig(**config), scm)


@pytest.mark.short
class TestResolve:
    def test_native_patch(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.3"], remote_tags=["1.2.3"])
        bundle = _orchestrator(scm).resolve("1.2.3-SNAPSHOT", BumpKind.PATCH)

        assert bundle[BundleKey.DEVELOPMENT] == "1.2.4-SNAPSHOT"
        assert bundle[BundleKey.RELEASE] == "1.2.4"
        assert bundle.scm_tag == "1.2.4"

    def test_release_branch(self, fake_scm):
        scm = fake_scm(branch="Release/ABC")
        bundle = _orchestrator(
            scm, run_mode=RunMode.RELEASE_BRANCH, branch_version="featureX"
        ).resolve("1.2.3-SNAPSHOT", BumpKind.MINOR)

        assert bundle.scm_tag == "featureX-1.3.0"
        assert bundle[BundleKey.RELEASE] == "1.3.0"
        assert "current_branch" not in scm.calls

    def test_branch_name_as_fragment(self, fake_scm):
        scm = fake_scm(branch="v2_1_0_hotfix")
        bundle = _orchestrator(scm, run_mode=RunMode.NATIVE_BRANCH).resolve(
            "1.2.3-SNAPSHOT", BumpKind.PATCH
        )
        assert bundle.scm_tag == "2.1.0-1.2.4"

    def test_mainline_delegation(self, fake_scm):
        scm = fake_scm(branch="master")
        response = MagicMock(status_code=200, text="7.0.0")
        with patch(
            "semver_release.versioning.branch.requests.get", return_value=response
        ):
            bundle = _orchestrator(
                scm,
                run_mode=RunMode.NATIVE_BRANCH,
                branch_conversion_url="http://versionizer.local/",
            ).resolve("1.2.3-SNAPSHOT", BumpKind.PATCH)
        assert bundle.scm_tag == "7.0.0-1.2.4"

    def test_dirty_tree_stops_before_anything_else(self, fake_scm):
        scm = fake_scm(dirty=True)
        with pytest.raises(DirtyWorkingTreeError):
            _orchestrator(scm).resolve("1.2.3-SNAPSHOT", BumpKind.PATCH)
        assert scm.calls == ["is_working_tree_changed"]

    def test_malformed_version(self, fake_scm):
        with pytest.raises(MalformedVersionError):
            _orchestrator(fake_scm()).resolve("1.2", BumpKind.PATCH)

    def test_ignored_branch(self, fake_scm):
        with pytest.raises(IgnoredBranch):
            _orchestrator(fake_scm(branch="feature123")).resolve(
                "1.2.3-SNAPSHOT", BumpKind.PATCH
            )

    def test_unrecognized_branch(self, fake_scm):
        with pytest.raises(UnrecognizedBranchError):
            _orchestrator(fake_scm(branch="Release/ABC")).resolve(
                "1.2.3-SNAPSHOT", BumpKind.PATCH
            )

    def test_remote_ahead_aborts_before_mode_handler(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.3"], remote_tags=["1.2.3", "1.2.4"])
        orchestrator = _orchestrator(scm)
        with patch.object(orchestrator.resolver, "resolve") as handler:
            with pytest.raises(RemoteVersionCorruptError):
                orchestrator.resolve("1.2.3-SNAPSHOT", BumpKind.PATCH)
        handler.assert_not_called()

    def test_remote_check_can_be_disabled(self, fake_scm):
        scm = fake_scm(remote_tags=["5.0.0"])
        bundle = _orchestrator(scm, check_remote_tags=False).resolve(
            "1.2.3-SNAPSHOT", BumpKind.PATCH
        )
        assert bundle.scm_tag == "1.2.4"
        assert "remote_tags" not in scm.calls

    def test_idempotent(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.3"], remote_tags=["1.2.3"])
        orchestrator = _orchestrator(scm, run_mode=RunMode.NATIVE_BRANCH_RPM)
        first = orchestrator.resolve("1.2.3-SNAPSHOT", BumpKind.MINOR)
        second = orchestrator.resolve("1.2.3-SNAPSHOT", BumpKind.MINOR)
        assert first == second


@pytest.mark.short
class TestRun:
    def test_resolved(self, fake_scm):
        outcome = _orchestrator(fake_scm()).run("1.2.3-SNAPSHOT", BumpKind.MAJOR)
        assert outcome.status is OutcomeStatus.RESOLVED
        assert outcome.bundle[BundleKey.DEVELOPMENT] == "2.0.0-SNAPSHOT"
        assert outcome.exit_code == 0

    def test_skipped(self, fake_scm):
        outcome = _orchestrator(fake_scm(branch="abc123")).run(
            "1.2.3-SNAPSHOT", BumpKind.PATCH
        )
        assert outcome.status is OutcomeStatus.SKIPPED
        assert outcome.bundle is None
        assert outcome.exit_code == 0

    @pytest.mark.parametrize(
        "scm_kwargs, config, version, kind",
        [
            ({"dirty": True}, {}, "1.2.3-SNAPSHOT", ErrorKind.DIRTY_WORKING_TREE),
            ({}, {}, "1.2.3.4", ErrorKind.MALFORMED_VERSION),
            ({"branch": "Release/ABC"}, {}, "1.2.3", ErrorKind.UNRECOGNIZED_BRANCH),
            ({}, {"run_mode": "BOGUS"}, "1.2.3", ErrorKind.UNSUPPORTED_RUN_MODE),
            ({"remote_tags": ["1.2.4"]}, {}, "1.2.3", ErrorKind.REMOTE_VERSION_CORRUPT),
            ({"local_tags": ["1.2.4"]}, {"check_remote_tags": False}, "1.2.3", ErrorKind.LOCAL_VERSION_CORRUPT),
            ({"branch": "master"}, {}, "1.2.3", ErrorKind.DELEGATION_UNAVAILABLE),
        ],
    )
    def test_failures(self, fake_scm, scm_kwargs, config, version, kind):
        outcome = _orchestrator(fake_scm(**scm_kwargs), **config).run(
            version, BumpKind.PATCH
        )
        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.error_kind is kind
        assert outcome.bundle is None
        assert outcome.message
        assert outcome.exit_code == 1

    def test_plain_release_after_branch_release(self, fake_scm):
        scm = fake_scm(
            branch="1.4.0",
            local_tags=["1.2.3", "1.4.0-1.2.4"],
            remote_tags=["1.2.3", "1.4.0-1.2.4"],
        )
        outcome = _orchestrator(scm, run_mode=RunMode.NATIVE).run(
            "1.2.3-SNAPSHOT", BumpKind.PATCH
        )
        assert outcome.status is OutcomeStatus.RESOLVED
        assert outcome.bundle.scm_tag == "1.2.4"

    def test_local_tag_already_present(self, fake_scm):
        # 1.2.4 is already tagged, so only a manifest at 1.2.4 may move on
        scm = fake_scm(local_tags=["1.2.3", "1.2.4"], remote_tags=[])
        outcome = _orchestrator(scm).run("1.2.4-SNAPSHOT", BumpKind.PATCH)
        assert outcome.status is OutcomeStatus.RESOLVED

        outcome = _orchestrator(scm).run("1.2.3-SNAPSHOT", BumpKind.PATCH)
        assert outcome.error_kind is ErrorKind.LOCAL_VERSION_CORRUPT
