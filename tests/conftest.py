"""Shared test fixtures for gl-browse tests."""

import argparse
import subprocess
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_browse.commands import Context
from gl_browse.config import CredentialStore
from gl_browse.git import GitClient
from gl_browse.launcher import Launcher
from gl_browse.models import RemoteDescriptor
from gl_browse.remotes import RemoteRegistry, RemoteResolver

CONFIG_DATA = """tokens:
  gitlab.ssl.domain1.jp: token1
  gitlab.ssl.domain2.jp: token2
preferreddomains:
- gitlab.ssl.domain1.jp
- gitlab.ssl.domain2.jp
"""

REMOTE_V_OUTPUT = """origin\tgit@gitlab.ssl.domain1.jp:group/repository.git (fetch)
origin\tgit@gitlab.ssl.domain1.jp:group/repository.git (push)
upstream\thttps://github.com/someone/repository.git (fetch)
upstream\thttps://github.com/someone/repository.git (push)
"""


class FakeGitRunner:
    """Stands in for subprocess.run; answers git commands from a table."""

    def __init__(self, responses: dict[tuple[str, ...], object] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[list[str]] = []

    def __call__(self, cmd, cwd=None, capture_output=False, text=False, check=False):
        self.calls.append(cmd)
        response = self.responses.get(tuple(cmd[1:]))
        if response is None:
            return subprocess.CompletedProcess(cmd, 128, "", "fatal: not a git repository")
        if isinstance(response, tuple):
            returncode, stdout = response
            return subprocess.CompletedProcess(cmd, returncode, stdout, "error")
        return subprocess.CompletedProcess(cmd, 0, response, "")


def git_responses(remotes=REMOTE_V_OUTPUT, root="/repo", branch="master", remote_branches="origin/master\n"):
    return {
        ("remote", "-v"): remotes,
        ("rev-parse", "--show-toplevel"): root + "\n",
        ("rev-parse", "--abbrev-ref", "HEAD"): branch + "\n",
        ("for-each-ref", "--format=%(refname:short)", "refs/remotes/origin"): remote_branches,
    }


class FakePopen:
    """Records spawned commands instead of starting processes."""

    def __init__(self, error: OSError | None = None):
        self.error = error
        self.commands: list[list[str]] = []

    def __call__(self, cmd, **kwargs):
        if self.error is not None:
            raise self.error
        self.commands.append(cmd)
        return None


@pytest.fixture
def config_path(tmp_path) -> Path:
    """Path to a credential store file with two tokens and two preferred domains."""
    path = tmp_path / "gl-browse.yml"
    path.write_text(CONFIG_DATA)
    return path


@pytest.fixture
def store(config_path) -> CredentialStore:
    """Loaded CredentialStore backed by config_path."""
    return CredentialStore(path=str(config_path)).init().load()


@pytest.fixture
def empty_store(tmp_path) -> CredentialStore:
    """Loaded CredentialStore backed by a freshly created file."""
    return CredentialStore(path=str(tmp_path / "empty.yml")).init().load()


@pytest.fixture
def remote() -> RemoteDescriptor:
    """Remote used in URL rendering tests."""
    return RemoteDescriptor(domain="domain", group="group", repository="repository", name="origin")


@pytest.fixture
def fake_popen() -> FakePopen:
    return FakePopen()


def make_context(store, runner, cwd="/repo", popen=None, which=None, platform="linux", choose=None) -> Context:
    """Build a Context wired to fakes."""
    git = GitClient(runner=runner)
    resolver = RemoteResolver(RemoteRegistry(git), store, choose=choose)
    launcher = Launcher(
        platform=platform,
        which=which or (lambda name: f"/usr/bin/{name}" if name == "xdg-open" else None),
        popen=popen or FakePopen(),
    )
    return Context(store=store, git=git, resolver=resolver, launcher=launcher, cwd=cwd)


def make_args(**kwargs) -> argparse.Namespace:
    """Helper to create argparse.Namespace with default values."""
    defaults = {
        "json_output": False,
        "verbose": False,
        "config": None,
        "reference": None,
        "path": None,
        "current_path": False,
        "project": None,
        "print_only": False,
    }
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)
