"""Persistent store for per-domain private tokens and preferred domains.

The store is a small YAML document::

    tokens:
      gitlab.ssl.domain1.jp: token1
      gitlab.ssl.domain2.jp: token2
    preferreddomains:
    - gitlab.ssl.domain1.jp
    - gitlab.ssl.domain2.jp

Token entries keep their order, duplicates included, so a load/save cycle
reproduces the file. Nothing is de-duplicated or repaired.
"""

from __future__ import annotations

import getpass
import logging
import os
from typing import Callable

import yaml

from gl_browse.errors import (
    ConfigReadError,
    ConfigWriteError,
    MalformedConfigError,
    StoreNotInitializedError,
    TokenInputError,
)
from gl_browse.models import CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH, TOKEN_PROMPT

TOKENS_KEY = "tokens"
PREFERRED_DOMAINS_KEY = "preferreddomains"


class _TokenPairs(list):
    """Ordered (domain, token) pairs dumped as a YAML mapping."""


class _StoreDumper(yaml.SafeDumper):
    pass


def _represent_token_pairs(dumper: yaml.SafeDumper, data: _TokenPairs) -> yaml.MappingNode:
    # A list of pairs bypasses key sorting and keeps duplicate keys
    return dumper.represent_mapping("tag:yaml.org,2002:map", list(data))


_StoreDumper.add_representer(_TokenPairs, _represent_token_pairs)


def default_config_path() -> str:
    return os.path.expanduser(os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)


def dump_store(tokens: list[tuple[str, str]], preferred_domains: list[str]) -> str:
    document = {
        TOKENS_KEY: _TokenPairs(tokens),
        PREFERRED_DOMAINS_KEY: list(preferred_domains),
    }
    return yaml.dump(document, Dumper=_StoreDumper, default_flow_style=False, sort_keys=False, allow_unicode=True)


def parse_store(text: str, path: str = "<string>") -> tuple[list[tuple[str, str]], list[str]]:
    """Parse store text into (token pairs, preferred domains).

    Works on the composed node graph rather than ``safe_load`` so that the
    order and duplicates of token entries survive.
    """
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        raise MalformedConfigError(path, str(e)) from e

    tokens: list[tuple[str, str]] = []
    preferred: list[str] = []
    if root is None or _is_null(root):
        return tokens, preferred
    if not isinstance(root, yaml.MappingNode):
        raise MalformedConfigError(path, "top level must be a mapping")

    for key_node, value_node in root.value:
        if not isinstance(key_node, yaml.ScalarNode):
            raise MalformedConfigError(path, "top level keys must be scalars")
        key = key_node.value.lower()
        if key == TOKENS_KEY:
            tokens = _parse_tokens(value_node, path)
        elif key == PREFERRED_DOMAINS_KEY:
            preferred = _parse_domains(value_node, path)
    return tokens, preferred


def _is_null(node: yaml.Node) -> bool:
    return isinstance(node, yaml.ScalarNode) and node.tag == "tag:yaml.org,2002:null"


def _parse_tokens(node: yaml.Node, path: str) -> list[tuple[str, str]]:
    if _is_null(node):
        return []
    # An empty sequence is what an older writer produced for "no tokens"
    if isinstance(node, yaml.SequenceNode) and not node.value:
        return []
    if not isinstance(node, yaml.MappingNode):
        raise MalformedConfigError(path, f"'{TOKENS_KEY}' must be a mapping of domain to token")
    pairs = []
    for key_node, value_node in node.value:
        if not isinstance(key_node, yaml.ScalarNode) or not isinstance(value_node, yaml.ScalarNode):
            raise MalformedConfigError(path, f"'{TOKENS_KEY}' entries must be plain strings")
        pairs.append((key_node.value, value_node.value))
    return pairs


def _parse_domains(node: yaml.Node, path: str) -> list[str]:
    if _is_null(node):
        return []
    if not isinstance(node, yaml.SequenceNode):
        raise MalformedConfigError(path, f"'{PREFERRED_DOMAINS_KEY}' must be a list of domains")
    domains = []
    for item in node.value:
        if not isinstance(item, yaml.ScalarNode):
            raise MalformedConfigError(path, f"'{PREFERRED_DOMAINS_KEY}' entries must be plain strings")
        domains.append(item.value)
    return domains


def _ask_token(message: str) -> str:
    return getpass.getpass(message + " ")


class CredentialStore:
    """Domain -> token mapping plus an ordered preferred-domain list, backed by a file.

    Lifecycle: ``init()`` then ``load()``; every mutation is flushed to disk
    immediately. One instance per process, passed explicitly to callers.
    """

    def __init__(self, path: str | None = None, prompt: Callable[[str], str] | None = None):
        self.path = os.path.expanduser(path) if path else None
        self.prompt = prompt or _ask_token
        self.tokens: list[tuple[str, str]] = []
        self.preferred_domains: list[str] = []
        self.loaded = False
        self.logger = logging.getLogger("gl-browse")

    # -- Lifecycle --

    def init(self) -> CredentialStore:
        if self.path is None:
            self.path = default_config_path()
        if not os.path.exists(self.path):
            self._create()
        return self

    def load(self) -> CredentialStore:
        if self.path is None:
            raise StoreNotInitializedError()
        if not os.path.exists(self.path):
            self._create()
        try:
            with open(self.path, encoding="utf-8") as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise MalformedConfigError(self.path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise ConfigReadError(self.path, str(e)) from e
        self.tokens, self.preferred_domains = parse_store(text, self.path)
        self.loaded = True
        self.logger.debug(
            f"Loaded {self.path}: {len(self.tokens)} tokens, preferred domains {self.preferred_domains}"
        )
        return self

    def save(self) -> None:
        self._require_loaded()
        self._write(dump_store(self.tokens, self.preferred_domains))

    def _create(self) -> None:
        self.logger.debug(f"Creating empty credential store at {self.path}")
        parent = os.path.dirname(self.path)
        if parent:
            try:
                os.makedirs(parent, exist_ok=True)
            except OSError as e:
                raise ConfigWriteError(self.path, str(e)) from e
        self._write(dump_store([], []))

    def _write(self, text: str) -> None:
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise ConfigWriteError(self.path, str(e)) from e

    def _require_loaded(self) -> None:
        if not self.loaded:
            raise StoreNotInitializedError()

    # -- Queries --

    def get_token(self, domain: str) -> str:
        """Return the token stored for ``domain``, or ``""``. Later entries win."""
        self._require_loaded()
        token = ""
        for key, value in self.tokens:
            if key == domain:
                token = value
        return token

    def get_or_prompt(self, domain: str) -> str:
        """Return the stored token, asking the user (once) and persisting it when missing."""
        token = self.get_token(domain)
        if token:
            return token
        try:
            token = self.prompt(TOKEN_PROMPT).strip()
        except EOFError as e:
            raise TokenInputError(domain, "no input") from e
        if not token:
            raise TokenInputError(domain, "empty token")
        self.save_token(domain, token)
        return token

    def top_priority_domain(self, candidates: list[str]) -> str:
        """First of ``candidates`` that is a preferred domain.

        Candidate order decides; the preferred list is only a membership test.
        """
        self._require_loaded()
        for domain in candidates:
            if domain in self.preferred_domains:
                return domain
        return ""

    def top_domain(self) -> str:
        self._require_loaded()
        return self.preferred_domains[0] if self.preferred_domains else ""

    def has_preferred_domain(self, domain: str) -> bool:
        self._require_loaded()
        return domain in self.preferred_domains

    # -- Mutations (append-only, persisted immediately) --

    def save_preferred_domain(self, domain: str) -> None:
        self._require_loaded()
        self.preferred_domains.append(domain)
        self.save()

    def save_token(self, domain: str, token: str) -> None:
        self._require_loaded()
        self.tokens.append((domain, token))
        self.save()
