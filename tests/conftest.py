import io
import logging
import shutil

import pytest

from git import Repo


@pytest.fixture
def capture_logs():
    """Fixture to capture log output during tests."""
    log_stream = io.StringIO()
    handler = logging.StreamHandler(log_stream)
    logger = logging.getLogger("semver_release")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)

    yield log_stream  # Yield the stream to the test function

    # Cleanup after the test
    logger.removeHandler(handler)
    log_stream.close()


class FakeSourceControl:
    """In-memory source-control collaborator."""

    def __init__(self, branch="1.4.0", dirty=False, local_tags=None, remote_tags=None):
        self.branch = branch
        self.dirty = dirty
        self._local_tags = list(local_tags or [])
        self._remote_tags = list(remote_tags or [])
        self.created_tags = []
        self.calls = []

    def current_branch(self):
        self.calls.append("current_branch")
        return self.branch

    def is_working_tree_changed(self):
        self.calls.append("is_working_tree_changed")
        return self.dirty

    def local_tags(self):
        self.calls.append("local_tags")
        return list(self._local_tags)

    def remote_tags(self):
        self.calls.append("remote_tags")
        return list(self._remote_tags)

    def create_tag(self, name, push=False):
        self.created_tags.append((name, push))
        self._local_tags.append(name)


@pytest.fixture
def fake_scm():
    """Factory for in-memory source-control collaborators."""
    return FakeSourceControl


# git fixtures


def _commit_file(repo: Repo, name: str, content: str, message: str):
    path = repo.working_tree_dir + "/" + name
    with open(path, "w") as f:
        f.write(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def git_repo(tmp_path):
    """A local repository on branch 1.4.0 with one commit and a bare 'origin'."""
    if shutil.which("git") is None:
        pytest.skip("git is not available on the system")

    origin_path = tmp_path / "origin.git"
    Repo.init(origin_path, bare=True)
    repo = Repo.init(tmp_path / "work")
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Release Bot")
        cw.set_value("user", "email", "release@example.com")

    _commit_file(repo, "pom.xml", "<version>1.2.3-SNAPSHOT</version>\n", "initial")
    repo.git.checkout("-b", "1.4.0")
    repo.create_remote("origin", str(origin_path))
    return repo


@pytest.fixture
def commit_file():
    return _commit_file
