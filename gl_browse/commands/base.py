"""Base class and registry for commands."""

from __future__ import annotations

import argparse
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from gl_browse.config import CredentialStore
from gl_browse.git import GitClient
from gl_browse.launcher import Launcher
from gl_browse.remotes import RemoteResolver

# ---------------------------------------------------------------------------
# Command Registry
# ---------------------------------------------------------------------------

_command_registry: dict[str, type[Command]] = {}


def register_command(name: str):
    """Decorator to register a command class under a CLI subcommand name."""

    def decorator(cls):
        _command_registry[name] = cls
        cls.command_name = name
        return cls

    return decorator


def get_command_registry() -> dict[str, type[Command]]:
    """Get the command registry."""
    return _command_registry


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


@dataclass
class Context:
    """Collaborators shared by one invocation."""

    store: CredentialStore
    git: GitClient
    resolver: RemoteResolver
    launcher: Launcher
    cwd: str = field(default_factory=os.getcwd)


# ---------------------------------------------------------------------------
# Command Base Class
# ---------------------------------------------------------------------------


class Command(ABC):
    """Base class for all commands."""

    command_name: str = ""

    def __init__(self, context: Context, args: argparse.Namespace):
        self.context = context
        self.args = args
        self.logger = logging.getLogger("gl-browse")

    @staticmethod
    @abstractmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        """Add command-specific CLI arguments."""
        ...

    @abstractmethod
    def run(self) -> int:
        """Execute the command and return the process exit status."""
        ...
