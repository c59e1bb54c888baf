"""Exceptions raised by gl-browse components.

Components raise; only the CLI layer reports them to the user.
"""

from __future__ import annotations


class GLBrowseError(Exception):
    """Base class for all gl-browse errors."""


# -- Configuration errors --


class ConfigError(GLBrowseError):
    pass


class StoreNotInitializedError(ConfigError):
    def __init__(self):
        super().__init__("Please initialize the credential store before loading it")


class MalformedConfigError(ConfigError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to parse config {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigReadError(ConfigError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to read config {path}: {reason}")
        self.path = path


class ConfigWriteError(ConfigError):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to write config {path}: {reason}")
        self.path = path


class TokenInputError(ConfigError):
    def __init__(self, domain: str, reason: str):
        super().__init__(f"Failed to read private token for {domain}: {reason}")
        self.domain = domain


class DomainInputError(ConfigError):
    def __init__(self, reason: str):
        super().__init__(f"Failed to read target domain: {reason}")


# -- Resolution errors --


class ResolutionError(GLBrowseError):
    pass


class NotGitLabCloneError(ResolutionError):
    def __init__(self):
        super().__init__("Not a cloned repository from gitlab.")


class NoBrowsableURLError(ResolutionError):
    def __init__(self):
        super().__init__("Not found browse url.")


class InvalidArgumentError(ResolutionError):
    def __init__(self, arg: str):
        super().__init__(f"Invalid arg. {arg}")
        self.arg = arg


class InvalidBrowseNumberError(ResolutionError):
    def __init__(self, number: str):
        super().__init__(f'Invalid browse number. "{number}"')
        self.number = number


class InvalidProjectError(ResolutionError):
    def __init__(self, project: str):
        super().__init__(f"Invalid project, expected OWNER/PROJECT: {project!r}")
        self.project = project


class GitCommandError(ResolutionError):
    def __init__(self, args: list[str], detail: str):
        super().__init__(f"git {' '.join(args)} failed: {detail}")
        self.git_args = args
        self.detail = detail


# -- Environment errors (raised after a URL was computed) --


class BrowseEnvironmentError(GLBrowseError):
    pass


class PathNotFoundError(BrowseEnvironmentError):
    def __init__(self, path: str):
        super().__init__(f"Not found file or path. Path:{path}")
        self.path = path


class NoBrowserError(BrowseEnvironmentError):
    def __init__(self, url: str):
        super().__init__(f"No browser found to open {url}")
        self.url = url


class SpawnError(BrowseEnvironmentError):
    def __init__(self, command: list[str], url: str, reason: str):
        super().__init__(f"Failed to launch {' '.join(command)} for {url}: {reason}")
        self.command = command
        self.url = url
