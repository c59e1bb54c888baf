"""Open repository, issue, merge request, pipeline and file pages."""

from __future__ import annotations

import argparse
import os

from gl_browse.commands.base import Command, register_command
from gl_browse.errors import NoBrowserError, NotGitLabCloneError, PathNotFoundError
from gl_browse.locator import build_target, path_url, url_for_project, url_for_remote
from gl_browse.logging_utils import log_result
from gl_browse.models import BrowseMode, BrowseResult, BrowseTarget
from gl_browse.remotes import Resolution


@register_command("browse")
class BrowseCommand(Command):
    """Browse repository page"""

    @staticmethod
    def add_arguments(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "reference",
            nargs="?",
            default=None,
            help="Resource to open: #N/iN (issue), !N/mN (merge request), pN (pipeline); omit N for the list page",
        )
        parser.add_argument("-p", "--path", default=None, help="Open a file or directory of the repository")
        parser.add_argument(
            "-c", "--current-path", action="store_true", help="Open the current directory of the repository"
        )
        parser.add_argument("-P", "--project", default=None, help="Target project as OWNER/PROJECT")
        parser.add_argument(
            "--print", action="store_true", dest="print_only", help="Print the URL instead of opening a browser"
        )

    def run(self) -> int:
        target = build_target(self.args.reference, self.args.path, self.args.current_path, cwd=self.context.cwd)
        resolution = self.context.resolver.resolve(self.args.project)
        url = self.resolve_url(target, resolution)
        self.logger.debug(f"Browse {target.mode.value}: {url}")

        if self.args.print_only:
            print(url)
            log_result(self.logger, BrowseResult(url=url, mode=target.mode))
            return 0

        try:
            browser = self.context.launcher.open(url)
        except NoBrowserError:
            # The URL is still useful without a browser
            print(url)
            raise
        log_result(self.logger, BrowseResult(url=url, mode=target.mode, browser=browser, opened=True))
        return 0

    def resolve_url(self, target: BrowseTarget, resolution: Resolution) -> str:
        git = self.context.git

        if target.mode in (BrowseMode.PATH, BrowseMode.CURRENT_PATH):
            if not os.path.exists(target.path):
                raise PathNotFoundError(target.path)
            if not resolution.local or resolution.remote is None:
                raise NotGitLabCloneError()
            root = os.path.realpath(git.root())
            branch = git.current_remote_branch(resolution.remote)
            return path_url(resolution.remote, branch, root, os.path.realpath(target.path))

        if self.args.project or not resolution.local:
            return url_for_project(resolution.remote, target.reference, resolution.domain)

        branch = git.current_remote_branch(resolution.remote)
        return url_for_remote(resolution.remote, target.reference, branch)
