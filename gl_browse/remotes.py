"""Discovery of the GitLab remote for the current clone."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from gl_browse.config import CredentialStore
from gl_browse.errors import GitCommandError, InvalidProjectError, NotGitLabCloneError
from gl_browse.git import GitClient
from gl_browse.models import GITLAB_HOST_PREFIX, RemoteDescriptor


def filter_gitlab_remotes(candidates: list[RemoteDescriptor]) -> list[RemoteDescriptor]:
    """Keep remotes whose host starts with "gitlab" (case-sensitive prefix)."""
    return [remote for remote in candidates if remote.domain.startswith(GITLAB_HOST_PREFIX)]


def current_remote(candidates: list[RemoteDescriptor]) -> RemoteDescriptor:
    gitlab_remotes = filter_gitlab_remotes(candidates)
    if not gitlab_remotes:
        raise NotGitLabCloneError()
    return gitlab_remotes[0]


def split_project(project: str) -> tuple[str, str]:
    """Split ``owner/project`` (owner may be a nested group) into its parts."""
    value = project.strip().strip("/")
    if "/" not in value:
        raise InvalidProjectError(project)
    group, repository = value.rsplit("/", 1)
    if not group or not repository:
        raise InvalidProjectError(project)
    return group, repository


def _unique(values: list[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


class RemoteRegistry:
    """Remotes configured in the local repository."""

    def __init__(self, git: GitClient):
        self.git = git

    def list_remotes(self) -> list[RemoteDescriptor]:
        return self.git.remotes()

    def gitlab_remotes(self) -> list[RemoteDescriptor]:
        return filter_gitlab_remotes(self.list_remotes())

    def current_remote(self) -> RemoteDescriptor:
        return current_remote(self.list_remotes())


@dataclass
class Resolution:
    """Remote and domain resolved for one invocation."""

    remote: RemoteDescriptor | None
    domain: str | None
    local: bool


class RemoteResolver:
    """Combines local remotes with stored domain preferences."""

    def __init__(
        self,
        registry: RemoteRegistry,
        store: CredentialStore,
        choose: Callable[[list[str]], str] | None = None,
    ):
        self.registry = registry
        self.store = store
        self.choose = choose
        self.logger = logging.getLogger("gl-browse")

    def local_remote(self) -> RemoteDescriptor | None:
        """The GitLab remote of the working copy, or None outside a GitLab clone."""
        try:
            candidates = self.registry.gitlab_remotes()
        except GitCommandError as e:
            self.logger.debug(f"No local remotes: {e}")
            return None
        if not candidates:
            return None

        domains = _unique([remote.domain for remote in candidates])
        if len(domains) == 1:
            return candidates[0]

        domain = self.store.top_priority_domain(domains)
        if not domain and self.choose is not None:
            domain = self.choose(domains)
            self.store.save_preferred_domain(domain)
        for remote in candidates:
            if remote.domain == domain:
                return remote
        return candidates[0]

    def resolve(self, project: str | None = None) -> Resolution:
        remote = self.local_remote()
        local = remote is not None
        domain = remote.domain if remote else (self.store.top_domain() or None)

        if project:
            group, repository = split_project(project)
            if remote is not None:
                remote = remote.with_project(group, repository)
            elif domain:
                remote = RemoteDescriptor(domain=domain, group=group, repository=repository)

        self.logger.debug(f"Resolved remote={remote} domain={domain} local={local}")
        return Resolution(remote=remote, domain=domain, local=local)
