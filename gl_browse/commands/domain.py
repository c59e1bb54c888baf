"""List or extend the preferred GitLab domains."""

from __future__ import annotations

import argparse

from gl_browse.commands.base import Command, register_command


@register_command("domain")
class DomainCommand(Command):
    """List preferred GitLab domains, or add one"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument("domain", nargs="?", default=None, help="Domain to append to the preferred list")

    def run(self) -> int:
        store = self.context.store
        if self.args.domain is None:
            for domain in store.preferred_domains:
                print(domain)
            return 0

        if store.has_preferred_domain(self.args.domain):
            self.logger.info(f"Already preferred: {self.args.domain}")
            return 0
        store.save_preferred_domain(self.args.domain)
        self.logger.info(f"Added preferred domain: {self.args.domain}")
        return 0
