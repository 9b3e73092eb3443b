"""Tests for configuration loading."""

import pytest

from runbot_core.config import DEFAULT_CONFIG, load_config, parse_repo
from runbot_core.errors import MalformedInputError


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["trigger_phrase"] == "@go-mode-bot run"
    assert config["bot_login"] == "go-mode-bot"
    assert config["marker_reaction"] == "eyes"
    assert config["ack_comment"] is True
    assert config["store"] == "noop"


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".runbot.yml"
    cfg.write_text("project_name: other-tests\nregion: eu-west-1\n")
    config = load_config(config_path=str(cfg))
    assert config["project_name"] == "other-tests"
    assert config["region"] == "eu-west-1"


def test_repos_and_users_loaded(tmp_path):
    cfg = tmp_path / ".runbot.yml"
    cfg.write_text("repos:\n  - acme/widgets\nauthorized_users:\n  - alice\n")
    config = load_config(config_path=str(cfg))
    assert config["repos"] == ["acme/widgets"]
    assert config["authorized_users"] == ["alice"]


def test_empty_config_file_keeps_defaults(tmp_path):
    cfg = tmp_path / ".runbot.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["project_name"] == DEFAULT_CONFIG["project_name"]


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".runbot.yml"
    cfg.write_text("project_name: other-tests\n")
    config = load_config(config_path=str(cfg), cli_overrides={"project_name": "cli-tests"})
    assert config["project_name"] == "cli-tests"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".runbot.yml"
    cfg.write_text("project_name: other-tests\n")
    config = load_config(config_path=str(cfg), cli_overrides={"project_name": None})
    assert config["project_name"] == "other-tests"


def test_github_token_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_list_defaults_are_not_shared_reference(tmp_path):
    """Mutating one config's lists must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["repos"].append("acme/widgets")
    config_a["authorized_users"].append("mallory")
    assert "acme/widgets" not in config_b["repos"]
    assert "mallory" not in config_b["authorized_users"]
    assert "mallory" not in DEFAULT_CONFIG["authorized_users"]


class TestParseRepo:
    def test_owner_and_name(self):
        assert parse_repo("dominikh/go-mode.el") == ("dominikh", "go-mode.el")

    @pytest.mark.parametrize("value", ["", "dominikh", "a/b/c", "/go-mode.el", "dominikh/"])
    def test_rejects_other_shapes(self, value):
        with pytest.raises(MalformedInputError):
            parse_repo(value)
