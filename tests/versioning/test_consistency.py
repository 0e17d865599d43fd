"""
Tests for RepositoryConsistencyChecker.

All tests in this file are marked as 'short' since they use an in-memory
source-control collaborator.
"""

import pytest

from semver_release.versioning.consistency import (
    RepositoryConsistencyChecker,
    highest_tag,
    is_tag_behind,
)
from semver_release.versioning.exceptions import (
    DirtyWorkingTreeError,
    LocalVersionCorruptError,
    RemoteVersionCorruptError,
)
from semver_release.versioning.version import SemanticVersion, parse_version


@pytest.mark.short
class TestHighestTag:
    def test_numeric_not_lexical(self):
        tags = ["1.2.9", "1.2.10", "1.10.0", "1.9.0"]
        assert highest_tag(tags)[0] == "1.10.0"

    def test_namespaces_are_separate(self):
        tags = ["1.2.0", "featureX-3.0.0", "featureY-4.0.0", "featureX-1.0.0"]
        assert highest_tag(tags)[0] == "1.2.0"
        assert highest_tag(tags, "featureX-") == ("featureX-3.0.0", SemanticVersion(3, 0, 0))

    def test_non_version_tags_skipped(self):
        assert highest_tag(["latest", "release-candidate"]) is None
        assert highest_tag([]) is None

    def test_metadata_suffix_is_ignored_for_ordering(self):
        assert highest_tag(["1.2.0-solr", "1.3.0"])[0] == "1.3.0"

    def test_branch_tags_with_version_fragment_are_not_plain_tags(self):
        tags = ["1.2.3", "1.4.0-1.2.4", "1.4.0-1.3.0-solr"]
        assert highest_tag(tags)[0] == "1.2.3"
        assert highest_tag(tags, "1.4.0-")[0] == "1.4.0-1.3.0-solr"

    def test_only_branch_tags(self):
        assert highest_tag(["2.1.0-1.0.0"]) is None


@pytest.mark.short
class TestIsTagBehind:
    def test_new_candidate_ahead(self):
        assert is_tag_behind("1.3.0", ["1.2.0", "1.2.9"])

    def test_existing_candidate(self):
        assert not is_tag_behind("1.3.0", ["1.3.0"])

    def test_equal_version_with_other_suffix(self):
        assert not is_tag_behind("1.3.0-solr", ["1.3.0"])

    def test_candidate_behind(self):
        assert not is_tag_behind("1.3.0", ["1.4.0"])

    def test_no_tags(self):
        assert is_tag_behind("0.0.1", [])

    def test_branch_namespace(self):
        tags = ["featureX-1.3.0", "2.0.0"]
        assert is_tag_behind("featureX-1.4.0", tags, "featureX-")
        assert not is_tag_behind("featureX-1.3.0", tags, "featureX-")

    def test_plain_candidate_ignores_branch_tags(self):
        assert is_tag_behind("1.2.4", ["1.2.3", "1.4.0-1.2.4"])


@pytest.mark.short
class TestRepositoryConsistencyChecker:
    def test_check_local_and_remote(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.0"], remote_tags=["1.2.0", "1.3.0"])
        checker = RepositoryConsistencyChecker(scm)

        assert checker.check_local("1.3.0") is False
        assert checker.check_remote("1.3.0") is True

    def test_highest_tags(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.0", "1.1.0"], remote_tags=["1.4.0"])
        checker = RepositoryConsistencyChecker(scm)
        assert checker.highest_local_tag() == "1.2.0"
        assert checker.highest_remote_tag() == "1.4.0"
        assert checker.highest_remote_tag("featureX-") is None

    def test_verdict(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.0"], remote_tags=["1.3.0"])
        verdict = RepositoryConsistencyChecker(scm).verdict("1.3.0")

        assert verdict.is_local_corrupt is False
        assert verdict.is_remote_corrupt is True
        assert not verdict.is_consistent
        assert "1.3.0" in verdict.reason

    def test_verdict_consistent(self, fake_scm):
        scm = fake_scm(local_tags=["1.2.0"], remote_tags=["1.2.0"])
        verdict = RepositoryConsistencyChecker(scm).verdict("1.2.1")
        assert verdict.is_consistent
        assert verdict.reason is None

    def test_ensure_clean(self, fake_scm):
        RepositoryConsistencyChecker(fake_scm()).ensure_clean()
        with pytest.raises(DirtyWorkingTreeError):
            RepositoryConsistencyChecker(fake_scm(dirty=True)).ensure_clean()

    def test_ensure_remote_behind(self, fake_scm):
        checker = RepositoryConsistencyChecker(fake_scm(remote_tags=["1.3.0"]))
        checker.ensure_remote_behind("1.3.1")
        with pytest.raises(RemoteVersionCorruptError) as exc_info:
            checker.ensure_remote_behind("1.3.0")
        assert exc_info.value.remote_tag == "1.3.0"
        assert exc_info.value.candidate_tag == "1.3.0"

    def test_ensure_local_behind(self, fake_scm):
        checker = RepositoryConsistencyChecker(fake_scm(local_tags=["2.0.0"]))
        with pytest.raises(LocalVersionCorruptError):
            checker.ensure_local_behind("1.9.0")

    def test_declared_version_may_equal_latest_tag(self, fake_scm):
        checker = RepositoryConsistencyChecker(fake_scm(local_tags=["1.2.3"]))
        checker.ensure_declared_version(parse_version("1.2.3-SNAPSHOT"))

    def test_declared_version_behind_tags(self, fake_scm):
        checker = RepositoryConsistencyChecker(fake_scm(local_tags=["1.2.3", "1.4.0"]))
        with pytest.raises(LocalVersionCorruptError, match="1.4.0"):
            checker.ensure_declared_version(parse_version("1.2.3-SNAPSHOT"))

    def test_declared_version_uses_namespace(self, fake_scm):
        checker = RepositoryConsistencyChecker(
            fake_scm(local_tags=["9.0.0", "featureX-1.0.0"])
        )
        checker.ensure_declared_version(parse_version("1.2.3-SNAPSHOT"), "featureX-")
