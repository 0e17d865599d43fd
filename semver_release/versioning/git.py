"""
Git-backed source-control collaborator.

Implements the SourceControl protocol on top of GitPython. Remote tags are
listed with ``git ls-remote --tags`` so no fetch is needed; credentials,
when configured, are injected into https remote urls for that call only.
"""

import logging
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote, urlsplit, urlunsplit

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from semver_release.constants import DEFAULT_REMOTE_NAME

from .exceptions import SourceControlError

logger = logging.getLogger(__name__)


def with_credentials(url: str, username: Optional[str], password: Optional[str]) -> str:
    """Embed username/password into an http(s) url; other urls are returned as is."""
    if not username:
        return url
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https"):
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    userinfo = quote(username, safe="")
    if password:
        userinfo = f"{userinfo}:{quote(password, safe='')}"
    return urlunsplit(
        (parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment)
    )


def parse_ls_remote_tags(output: str) -> List[str]:
    """Tag names from ``git ls-remote --tags`` output, peeled entries folded."""
    tags: List[str] = []
    for line in output.splitlines():
        if "\t" not in line:
            continue
        _, ref = line.split("\t", 1)
        if not ref.startswith("refs/tags/"):
            continue
        name = ref[len("refs/tags/") :]
        if name.endswith("^{}"):
            name = name[: -len("^{}")]
        if name not in tags:
            tags.append(name)
    return tags


class GitRepository:
    """
    Source-control collaborator for a local git checkout.

    Args:
        repo_path: Path inside the working tree (defaults to current directory)
        remote_name: Remote whose tags are compared
        username: Optional SCM user for remote access
        password: Optional SCM password or token for remote access
    """

    def __init__(
        self,
        repo_path: Optional[Path] = None,
        remote_name: str = DEFAULT_REMOTE_NAME,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        if repo_path is None:
            repo_path = Path.cwd()
        self.repo_path = Path(repo_path)
        self.remote_name = remote_name
        self._username = username
        self._password = password

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise SourceControlError(
                f"Not a git repository: {self.repo_path}"
            ) from e

    def current_branch(self) -> str:
        if self.repo.head.is_detached:
            sha = self.repo.head.commit.hexsha
            logger.debug(f"HEAD is detached at {sha}")
            return sha
        return self.repo.active_branch.name

    def is_working_tree_changed(self) -> bool:
        return self.repo.is_dirty(untracked_files=False)

    def local_tags(self) -> List[str]:
        return [tag.name for tag in self.repo.tags]

    def remote_url(self) -> str:
        try:
            remote = self.repo.remote(self.remote_name)
        except ValueError as e:
            raise SourceControlError(f"Remote '{self.remote_name}' not found") from e
        return remote.url

    def remote_tags(self) -> List[str]:
        url = with_credentials(self.remote_url(), self._username, self._password)
        try:
            output = self.repo.git.ls_remote("--tags", url)
        except GitCommandError as e:
            # The command line may contain credentials, keep it out of the message
            raise SourceControlError(
                f"Could not list tags of remote '{self.remote_name}' (exit {e.status})"
            ) from None
        return parse_ls_remote_tags(output)

    def create_tag(self, name: str, push: bool = False) -> None:
        url = None
        if push:
            url = with_credentials(self.remote_url(), self._username, self._password)

        logger.info(f"Creating tag {name}")
        try:
            self.repo.create_tag(name, message=f"Release {name}")
        except GitCommandError as e:
            raise SourceControlError(
                f"Could not create tag {name} (exit {e.status})"
            ) from None

        if url is None:
            return
        logger.info(f"Pushing tag {name} to {self.remote_name}")
        try:
            self.repo.git.push(url, f"refs/tags/{name}")
        except GitCommandError as e:
            # An unpublished local tag would block the next attempt
            self.repo.delete_tag(name)
            raise SourceControlError(
                f"Could not push tag {name} to '{self.remote_name}' (exit {e.status})"
            ) from None
