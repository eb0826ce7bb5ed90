"""Tests for configuration and token storage."""

from unittest.mock import patch

import pytest

from quire.config import Config, Tokens, load_config


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.conf")
        assert config == Config()
        assert config.timezone == "Asia/Colombo"
        assert config.autosave_delay == 2.0

    def test_parses_values(self, tmp_path):
        config_file = tmp_path / "quire.conf"
        config_file.write_text(
            "# Quire settings\n"
            "API_BASE_URL=https://diary.example.com/api/\n"
            'TIMEZONE="Europe/London"  # home\n'
            "AUTOSAVE_DELAY=0.5\n"
            "REQUEST_TIMEOUT=3\n"
            "TELEGRAM_BOT_TOKEN='123:abc'\n"
            "TELEGRAM_ALLOWED_USERS=111, 222\n"
        )

        config = load_config(config_file)

        assert config.api_base_url == "https://diary.example.com/api"
        assert config.timezone == "Europe/London"
        assert config.autosave_delay == 0.5
        assert config.request_timeout == 3.0
        assert config.telegram_bot_token == "123:abc"
        assert config.telegram_allowed_users == [111, 222]

    def test_unquoted_inline_comment(self, tmp_path):
        config_file = tmp_path / "quire.conf"
        config_file.write_text("AUTOSAVE_DELAY=3 # seconds\n")
        assert load_config(config_file).autosave_delay == 3.0

    @pytest.mark.parametrize("value", ["soon", "-1", "inf", "nan"])
    def test_invalid_delay_falls_back(self, tmp_path, value):
        config_file = tmp_path / "quire.conf"
        config_file.write_text(f"AUTOSAVE_DELAY={value}\n")
        assert load_config(config_file).autosave_delay == 2.0

    def test_infinite_timeout_falls_back(self, tmp_path):
        config_file = tmp_path / "quire.conf"
        config_file.write_text("REQUEST_TIMEOUT=inf\n")
        assert load_config(config_file).request_timeout == 10.0

    def test_invalid_user_ids_ignored(self, tmp_path):
        config_file = tmp_path / "quire.conf"
        config_file.write_text("TELEGRAM_ALLOWED_USERS=abc\n")
        assert load_config(config_file).telegram_allowed_users == []

    def test_ignores_junk_lines(self, tmp_path):
        config_file = tmp_path / "quire.conf"
        config_file.write_text("not a setting\nUNKNOWN_KEY=1\n\n")
        assert load_config(config_file) == Config()


class TestTokens:
    def test_save_and_load(self, tmp_path):
        token_file = tmp_path / "config" / ".tokens.json"
        with patch("quire.config.TOKEN_FILE", token_file):
            Tokens(access_token="abc").save()
            loaded = Tokens.load()

        assert loaded.access_token == "abc"
        assert loaded.token_type == "Bearer"
        assert token_file.stat().st_mode & 0o777 == 0o600

    def test_load_missing(self, tmp_path):
        with patch("quire.config.TOKEN_FILE", tmp_path / "nope.json"):
            assert Tokens.load() == Tokens()

    def test_load_corrupt(self, tmp_path):
        token_file = tmp_path / ".tokens.json"
        token_file.write_text("{not json")
        with patch("quire.config.TOKEN_FILE", token_file):
            assert Tokens.load().access_token == ""

    def test_load_unreadable(self, tmp_path):
        token_file = tmp_path / ".tokens.json"
        token_file.mkdir()
        with patch("quire.config.TOKEN_FILE", token_file):
            assert Tokens.load() == Tokens()

    def test_clear_removes_file(self, tmp_path):
        token_file = tmp_path / ".tokens.json"
        with patch("quire.config.TOKEN_FILE", token_file):
            tokens = Tokens(access_token="abc")
            tokens.save()
            tokens.clear()

        assert tokens.access_token == ""
        assert not token_file.exists()
