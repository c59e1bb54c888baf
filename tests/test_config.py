"""Tests for the credential store."""

import os

import pytest

from gl_browse.config import CredentialStore, dump_store, parse_store
from gl_browse.errors import (
    ConfigReadError,
    ConfigWriteError,
    MalformedConfigError,
    StoreNotInitializedError,
    TokenInputError,
)

from conftest import CONFIG_DATA


class TestLifecycle:
    """init/load behaviour."""

    def test_load_before_init_fails(self, tmp_path):
        """Loading without init is a distinct error."""
        store = CredentialStore()
        with pytest.raises(StoreNotInitializedError):
            store.load()

    def test_query_before_load_fails(self, config_path):
        store = CredentialStore(path=str(config_path)).init()
        with pytest.raises(StoreNotInitializedError):
            store.get_token("gitlab.ssl.domain1.jp")

    def test_init_creates_missing_file(self, tmp_path):
        """init lazily creates an empty store."""
        path = tmp_path / "nested" / "config.yml"
        store = CredentialStore(path=str(path)).init()
        assert path.exists()
        store.load()
        assert store.tokens == []
        assert store.preferred_domains == []

    def test_created_file_is_private(self, tmp_path):
        path = tmp_path / "config.yml"
        CredentialStore(path=str(path)).init()
        assert os.stat(path).st_mode & 0o777 == 0o600

    def test_load_recreates_file_removed_after_init(self, tmp_path):
        path = tmp_path / "config.yml"
        store = CredentialStore(path=str(path)).init()
        path.unlink()
        store.load()
        assert path.exists()
        assert store.tokens == []

    def test_env_var_overrides_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / "from-env.yml"
        monkeypatch.setenv("GL_BROWSE_CONFIG", str(path))
        store = CredentialStore().init()
        assert store.path == str(path)
        assert path.exists()

    def test_load_reads_tokens_in_order(self, store):
        assert store.tokens == [
            ("gitlab.ssl.domain1.jp", "token1"),
            ("gitlab.ssl.domain2.jp", "token2"),
        ]
        assert store.preferred_domains == ["gitlab.ssl.domain1.jp", "gitlab.ssl.domain2.jp"]


class TestMalformed:
    """Malformed content is reported, never repaired."""

    @pytest.mark.parametrize(
        "text",
        [
            "tokens: [unclosed\n",
            "- just\n- a list\n",
            "tokens: plain-string\n",
            "preferreddomains: {a: b}\n",
            "tokens:\n  domain: [nested]\n",
        ],
    )
    def test_malformed_content_raises(self, tmp_path, text):
        path = tmp_path / "bad.yml"
        path.write_text(text)
        store = CredentialStore(path=str(path)).init()
        with pytest.raises(MalformedConfigError):
            store.load()
        assert path.read_text() == text

    def test_invalid_utf8_is_malformed(self, tmp_path):
        path = tmp_path / "binary.yml"
        path.write_bytes(b"\xff\xfetokens: {}\n")
        store = CredentialStore(path=str(path)).init()
        with pytest.raises(MalformedConfigError, match="UTF-8"):
            store.load()

    def test_directory_path_is_read_error(self, tmp_path):
        store = CredentialStore(path=str(tmp_path)).init()
        with pytest.raises(ConfigReadError):
            store.load()

    def test_uncreatable_parent_is_write_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ConfigWriteError):
            CredentialStore(path=str(blocker / "sub" / "config.yml")).init()

    def test_empty_file_is_empty_store(self):
        assert parse_store("") == ([], [])

    def test_null_fields_are_empty(self):
        assert parse_store("tokens:\npreferreddomains:\n") == ([], [])

    def test_unknown_keys_ignored(self):
        tokens, domains = parse_store("editor: vim\npreferreddomains:\n- gitlab.com\n")
        assert tokens == []
        assert domains == ["gitlab.com"]


class TestTokens:
    """get_token / save_token / get_or_prompt."""

    def test_get_token(self, store):
        assert store.get_token("gitlab.ssl.domain1.jp") == "token1"
        assert store.get_token("gitlab.ssl.domain2.jp") == "token2"

    def test_get_token_missing(self, store):
        assert store.get_token("gitlab.example.com") == ""

    def test_last_duplicate_wins(self, tmp_path):
        path = tmp_path / "dup.yml"
        path.write_text("tokens:\n  gitlab.com: old\n  gitlab.com: new\n")
        store = CredentialStore(path=str(path)).init().load()
        assert store.get_token("gitlab.com") == "new"

    def test_save_token_survives_reload(self, config_path, store):
        store.save_token("gitlab.example.com", "secret")
        assert store.get_token("gitlab.example.com") == "secret"

        reloaded = CredentialStore(path=str(config_path)).init().load()
        assert reloaded.get_token("gitlab.example.com") == "secret"
        assert reloaded.tokens[-1] == ("gitlab.example.com", "secret")

    def test_save_token_appends_duplicate(self, config_path, store):
        store.save_token("gitlab.ssl.domain1.jp", "rotated")
        reloaded = CredentialStore(path=str(config_path)).init().load()
        assert len(reloaded.tokens) == 3
        assert reloaded.get_token("gitlab.ssl.domain1.jp") == "rotated"

    def test_numeric_looking_token_kept_as_string(self, config_path, store):
        store.save_token("gitlab.example.com", "0123")
        reloaded = CredentialStore(path=str(config_path)).init().load()
        assert reloaded.get_token("gitlab.example.com") == "0123"

    def test_get_or_prompt_returns_stored_token(self, config_path):
        def fail(message):
            raise AssertionError("should not prompt")

        store = CredentialStore(path=str(config_path), prompt=fail).init().load()
        assert store.get_or_prompt("gitlab.ssl.domain1.jp") == "token1"

    def test_get_or_prompt_asks_and_persists(self, config_path):
        prompts = []

        def prompt(message):
            prompts.append(message)
            return "entered-token\n"

        store = CredentialStore(path=str(config_path), prompt=prompt).init().load()
        assert store.get_or_prompt("gitlab.example.com") == "entered-token"
        assert len(prompts) == 1

        # Second lookup is served from the store
        assert store.get_or_prompt("gitlab.example.com") == "entered-token"
        assert len(prompts) == 1

        reloaded = CredentialStore(path=str(config_path)).init().load()
        assert reloaded.get_token("gitlab.example.com") == "entered-token"

    def test_get_or_prompt_empty_input(self, config_path):
        store = CredentialStore(path=str(config_path), prompt=lambda message: "  ").init().load()
        with pytest.raises(TokenInputError):
            store.get_or_prompt("gitlab.example.com")

    def test_get_or_prompt_eof(self, config_path):
        def prompt(message):
            raise EOFError

        store = CredentialStore(path=str(config_path), prompt=prompt).init().load()
        with pytest.raises(TokenInputError):
            store.get_or_prompt("gitlab.example.com")


class TestPreferredDomains:
    """top_priority_domain and preferred domain persistence."""

    def test_candidate_order_wins(self, store):
        """Candidate order decides, not the preferred list order."""
        result = store.top_priority_domain(["gitlab.ssl.domain2.jp", "gitlab.ssl.domain1.jp"])
        assert result == "gitlab.ssl.domain2.jp"

    def test_skips_unknown_candidates(self, store):
        result = store.top_priority_domain(["gitlab.example.com", "gitlab.ssl.domain1.jp"])
        assert result == "gitlab.ssl.domain1.jp"

    def test_no_match_is_empty(self, store):
        assert store.top_priority_domain(["gitlab.example.com"]) == ""
        assert store.top_priority_domain([]) == ""

    def test_top_domain(self, store, empty_store):
        assert store.top_domain() == "gitlab.ssl.domain1.jp"
        assert empty_store.top_domain() == ""

    def test_token_without_preference_and_vice_versa(self, store):
        store.save_preferred_domain("gitlab.only-preferred.com")
        assert store.get_token("gitlab.only-preferred.com") == ""
        assert store.top_priority_domain(["gitlab.only-preferred.com"]) == "gitlab.only-preferred.com"

    def test_save_preferred_domain_persists(self, config_path, store):
        store.save_preferred_domain("gitlab.example.com")
        reloaded = CredentialStore(path=str(config_path)).init().load()
        assert reloaded.preferred_domains[-1] == "gitlab.example.com"
        assert reloaded.has_preferred_domain("gitlab.example.com")


class TestRoundTrip:
    """Serialized form is stable."""

    def test_dump_matches_original_layout(self):
        tokens, domains = parse_store(CONFIG_DATA)
        assert dump_store(tokens, domains) == CONFIG_DATA

    def test_save_rewrites_identical_file(self, config_path, store):
        store.save()
        assert config_path.read_text() == CONFIG_DATA

    def test_empty_store_layout(self):
        assert dump_store([], []) == "tokens: {}\npreferreddomains: []\n"

    def test_duplicates_survive_dump(self):
        tokens = [("gitlab.com", "a"), ("gitlab.com", "b")]
        assert parse_store(dump_store(tokens, [])) == (tokens, [])
