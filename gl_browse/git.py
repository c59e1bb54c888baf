"""Thin wrapper around the git executable."""

from __future__ import annotations

import logging
import re
import subprocess
import urllib.parse
from typing import Callable

from gl_browse.errors import GitCommandError
from gl_browse.models import PRIMARY_BRANCH, RemoteDescriptor

# git@gitlab.com:group/project.git
_SCP_LIKE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


def parse_remote_url(url: str) -> tuple[str, str, str] | None:
    """Split a remote URL into (domain, group, repository).

    Handles scp-like SSH, ssh://, git:// and http(s):// forms. Returns None
    for URLs that do not name a host and at least ``group/repository``.
    """
    url = url.strip()
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme and parsed.netloc:
        # Host keeps its original case
        host = parsed.netloc.rsplit("@", 1)[-1]
        if host.startswith("["):
            host = host[: host.find("]") + 1]
        else:
            host = host.split(":", 1)[0]
        if parsed.scheme in ("http", "https") and parsed.port:
            host = f"{host}:{parsed.port}"
        path = parsed.path
    else:
        match = _SCP_LIKE.match(url)
        if not match:
            return None
        host = match.group("host")
        path = match.group("path")

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if not host or "/" not in path:
        return None
    group, repository = path.rsplit("/", 1)
    if not group or not repository:
        return None
    return host, group, repository


class GitClient:
    """Runs git in a working directory and returns parsed output."""

    def __init__(self, cwd: str | None = None, runner: Callable[..., subprocess.CompletedProcess] | None = None):
        self.cwd = cwd
        self.runner = runner or subprocess.run
        self.logger = logging.getLogger("gl-browse")

    def _run(self, *args: str) -> str:
        cmd = ["git", *args]
        self.logger.debug(f"Running: {' '.join(cmd)}")
        try:
            proc = self.runner(cmd, cwd=self.cwd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise GitCommandError(list(args), str(e)) from e
        if proc.returncode != 0:
            raise GitCommandError(list(args), (proc.stderr or "").strip() or f"exit status {proc.returncode}")
        return proc.stdout

    def remotes(self) -> list[RemoteDescriptor]:
        """Configured remotes in the order git reports them, one per name."""
        remotes: list[RemoteDescriptor] = []
        seen: set[str] = set()
        for line in self._run("remote", "-v").splitlines():
            fields = line.split()
            if len(fields) < 2 or fields[0] in seen:
                continue
            if len(fields) > 2 and fields[2] != "(fetch)":
                continue
            name, url = fields[0], fields[1]
            seen.add(name)
            parts = parse_remote_url(url)
            if parts is None:
                self.logger.debug(f"Skipping remote {name}: cannot parse {url}")
                continue
            domain, group, repository = parts
            remotes.append(RemoteDescriptor(domain=domain, group=group, repository=repository, name=name, url=url))
        return remotes

    def root(self) -> str:
        return self._run("rev-parse", "--show-toplevel").strip()

    def current_branch(self) -> str:
        return self._run("rev-parse", "--abbrev-ref", "HEAD").strip()

    def remote_branches(self, remote_name: str) -> list[str]:
        out = self._run("for-each-ref", "--format=%(refname:short)", f"refs/remotes/{remote_name}")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def current_remote_branch(self, remote: RemoteDescriptor) -> str:
        """Current branch if the remote tracks it, else the primary branch."""
        branch = self.current_branch()
        if remote.name and f"{remote.name}/{branch}" in self.remote_branches(remote.name):
            return branch
        return PRIMARY_BRANCH
