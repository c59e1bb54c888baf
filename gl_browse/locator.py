"""Turn short references and paths into GitLab web URLs."""

from __future__ import annotations

import os
import re

from gl_browse.errors import (
    InvalidArgumentError,
    InvalidBrowseNumberError,
    NoBrowsableURLError,
    PathNotFoundError,
)
from gl_browse.models import (
    PRIMARY_BRANCH,
    BrowseMode,
    BrowseTarget,
    RemoteDescriptor,
    ResourceKind,
    ResourceReference,
)

# Tested in order; the first literal prefix that matches wins.
BROWSE_PREFIXES: list[tuple[str, ResourceKind]] = [
    ("#", ResourceKind.ISSUE),
    ("i", ResourceKind.ISSUE),
    ("I", ResourceKind.ISSUE),
    ("!", ResourceKind.MERGE_REQUEST),
    ("m", ResourceKind.MERGE_REQUEST),
    ("M", ResourceKind.MERGE_REQUEST),
    ("p", ResourceKind.PIPELINE),
    ("P", ResourceKind.PIPELINE),
]

_NUMBER = re.compile(r"[0-9]+")


def parse_reference(arg: str) -> ResourceReference:
    """Parse ``#12``, ``!``, ``p7`` and friends into a ResourceReference.

    An empty remainder (or ``0``) means the index page of that kind.
    """
    for prefix, kind in BROWSE_PREFIXES:
        if not arg.startswith(prefix):
            continue
        remainder = arg[len(prefix) :]
        if not remainder:
            return ResourceReference(kind=kind)
        if not _NUMBER.fullmatch(remainder):
            raise InvalidBrowseNumberError(remainder)
        number = int(remainder)
        return ResourceReference(kind=kind, number=number or None)
    raise InvalidArgumentError(arg)


def resource_url(remote: RemoteDescriptor, reference: ResourceReference) -> str:
    if reference.number is None:
        return remote.resource_url(reference.kind)
    return remote.resource_detail_url(reference.kind, reference.number)


def url_for_remote(remote: RemoteDescriptor, reference: ResourceReference | None, branch: str) -> str:
    """URL for the locally resolved remote, scoped to ``branch`` when no reference is given."""
    if reference is not None:
        return resource_url(remote, reference)
    if branch == PRIMARY_BRANCH:
        return remote.repository_url()
    return remote.branch_url(branch)


def url_for_project(
    remote: RemoteDescriptor | None, reference: ResourceReference | None, domain: str | None
) -> str:
    """URL for a user-named project; the current branch is never consulted."""
    if remote is not None:
        if reference is not None:
            return resource_url(remote, reference)
        return remote.repository_url()
    if domain:
        return "https://" + domain
    raise NoBrowsableURLError()


def relative_path(root: str, path: str) -> str:
    """Path of ``path`` inside the repository at ``root``.

    The root prefix and exactly one leading separator are removed. Fails when
    the path lies outside the repository or does not exist.
    """
    if path != root and not path.startswith(root.rstrip(os.sep) + os.sep):
        raise PathNotFoundError(path)
    rel = path[len(root) :]
    if rel.startswith(os.sep):
        rel = rel[1:]
    if not os.path.exists(os.path.join(root, rel)):
        raise PathNotFoundError(path)
    return rel.replace(os.sep, "/")


def path_url(remote: RemoteDescriptor, branch: str, root: str, path: str) -> str:
    """Branch-scoped URL for a file or directory inside the repository."""
    rel = relative_path(root, path)
    if os.path.isdir(os.path.join(root, rel)):
        return remote.tree_url(branch, rel)
    return remote.blob_url(branch, rel)


def build_target(
    reference: str | None = None, path: str | None = None, current_path: bool = False, cwd: str | None = None
) -> BrowseTarget:
    """Pick the single browse mode for an invocation: path, then cwd, then reference."""
    cwd = cwd or os.getcwd()
    if path:
        path = os.path.normpath(os.path.join(cwd, os.path.expanduser(path)))
        return BrowseTarget(mode=BrowseMode.PATH, path=path)
    if current_path:
        return BrowseTarget(mode=BrowseMode.CURRENT_PATH, path=cwd)
    if reference:
        return BrowseTarget(mode=BrowseMode.REFERENCE, reference=parse_reference(reference))
    return BrowseTarget(mode=BrowseMode.TOP)
