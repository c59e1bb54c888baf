"""Browser discovery and launch."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import Callable

from gl_browse.errors import NoBrowserError, SpawnError
from gl_browse.models import BROWSER_CANDIDATES, DARWIN_BROWSER, WINDOWS_BROWSER


def search_browser_launcher(platform: str, which: Callable[[str], str | None] = shutil.which) -> list[str]:
    """Return the browser command for ``platform``, or an empty list if none is found."""
    if platform == "darwin":
        return list(DARWIN_BROWSER)
    if platform in ("win32", "windows"):
        return list(WINDOWS_BROWSER)
    for candidate in BROWSER_CANDIDATES:
        path = which(candidate)
        if path:
            return [path]
    return []


class Launcher:
    """Opens URLs with the platform browser. Does not wait for the browser to exit."""

    def __init__(
        self,
        platform: str = sys.platform,
        which: Callable[[str], str | None] = shutil.which,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self.platform = platform
        self.which = which
        self.popen = popen
        self.logger = logging.getLogger("gl-browse")

    def command(self) -> list[str]:
        return search_browser_launcher(self.platform, self.which)

    def open(self, url: str) -> list[str]:
        """Spawn the browser on ``url`` and return the command used."""
        command = self.command()
        if not command:
            raise NoBrowserError(url)
        self.logger.debug(f"Launching: {' '.join(command)} {url}")
        try:
            self.popen(
                [*command, url],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise SpawnError(command, url, str(e)) from e
        return command
