"""Print the private token stored for a GitLab domain."""

from __future__ import annotations

import argparse

from gl_browse.commands.base import Command, register_command
from gl_browse.errors import NotGitLabCloneError


@register_command("token")
class TokenCommand(Command):
    """Print the private token for a GitLab domain, asking for it when missing"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--domain", default=None, help="GitLab domain (default: domain of the current repository's remote)"
        )

    def run(self) -> int:
        domain = self.args.domain
        if not domain:
            domain = self.context.resolver.resolve().domain
        if not domain:
            raise NotGitLabCloneError()

        token = self.context.store.get_or_prompt(domain)
        self.logger.debug(f"Token found for {domain}")
        print(token)
        return 0
