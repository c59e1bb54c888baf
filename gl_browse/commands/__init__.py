"""Commands for gl-browse."""

from gl_browse.commands.base import Command, Context, get_command_registry, register_command

# Import all commands to register them
from gl_browse.commands.browse import BrowseCommand
from gl_browse.commands.domain import DomainCommand
from gl_browse.commands.token import TokenCommand

__all__ = [
    "Command",
    "Context",
    "register_command",
    "get_command_registry",
    "BrowseCommand",
    "DomainCommand",
    "TokenCommand",
]
