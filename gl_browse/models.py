"""Data models and constants for gl-browse."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PRIMARY_BRANCH = "master"

# Remotes whose host starts with this prefix are treated as GitLab servers.
# Prefix match only, so "gitlabs-mirror.example.com" matches too.
GITLAB_HOST_PREFIX = "gitlab"

CONFIG_PATH_ENV = "GL_BROWSE_CONFIG"
DEFAULT_CONFIG_PATH = os.path.join("~", ".gl-browse.yml")

TOKEN_PROMPT = "Please input GitLab private token :"

# Browser launch commands
DARWIN_BROWSER = ["open"]
WINDOWS_BROWSER = ["cmd", "/c", "start"]
BROWSER_CANDIDATES = [
    "xdg-open",
    "cygstart",
    "x-www-browser",
    "firefox",
    "opera",
    "mozilla",
    "netscape",
]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ResourceKind(Enum):
    ISSUE = "issues"
    MERGE_REQUEST = "merge_requests"
    PIPELINE = "pipelines"

    @property
    def segment(self) -> str:
        return self.value


class BrowseMode(Enum):
    REFERENCE = "reference"
    PATH = "path"
    CURRENT_PATH = "current_path"
    TOP = "top"


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class RemoteDescriptor:
    """A git remote pointing at a GitLab project."""

    domain: str
    group: str
    repository: str
    name: str = ""
    url: str = ""

    def repository_url(self) -> str:
        return "https://" + "/".join([self.domain, self.group, self.repository])

    def branch_url(self, branch: str) -> str:
        return "/".join([self.repository_url(), "tree", branch])

    def tree_url(self, branch: str, path: str) -> str:
        if not path:
            return self.branch_url(branch)
        return "/".join([self.repository_url(), "tree", branch, path])

    def blob_url(self, branch: str, path: str) -> str:
        return "/".join([self.repository_url(), "blob", branch, path])

    def resource_url(self, kind: ResourceKind) -> str:
        return "/".join([self.repository_url(), kind.segment])

    def resource_detail_url(self, kind: ResourceKind, number: int) -> str:
        return "/".join([self.resource_url(kind), str(number)])

    def with_project(self, group: str, repository: str) -> RemoteDescriptor:
        """Return a copy scoped to another project on the same server."""
        return replace(self, group=group, repository=repository)


@dataclass
class ResourceReference:
    """Parsed short reference such as ``#12``, ``!3`` or ``p``."""

    kind: ResourceKind
    number: int | None = None

    @property
    def is_index(self) -> bool:
        return self.number is None


@dataclass
class BrowseTarget:
    """What the current invocation wants to open."""

    mode: BrowseMode
    reference: ResourceReference | None = None
    path: str | None = None


@dataclass
class BrowseResult:
    """Outcome of a browse invocation."""

    url: str
    mode: BrowseMode
    browser: list[str] = field(default_factory=list)
    opened: bool = False

    def to_dict(self) -> dict:
        d = {
            "url": self.url,
            "mode": self.mode.value,
            "opened": self.opened,
        }
        if self.browser:
            d["browser"] = " ".join(self.browser)
        return d
