"""Tests for packaged configuration loading and user overrides."""

import logging

from group_tree.config import ConfigManager
from group_tree.config.manager import _get_user_config_dir


class TestConfigManager:

    def test_packaged_defaults(self, fresh_config):
        """Packaged YAML provides the editing policy and a dictConfig mapping."""
        config_manager = ConfigManager()

        assert config_manager.get_tree_policy() == {
            "allow_root_drag": False,
            "validate_after_edit": False,
            "sync_action": "GroupTree.SyncGroups",
        }
        logging_config = config_manager.get_logging_config()
        assert logging_config["version"] == 1
        assert "file" in logging_config["handlers"]

    def test_singleton(self, fresh_config):
        assert ConfigManager() is ConfigManager()

    def test_user_override_merges_over_defaults(self, fresh_config):
        (fresh_config / "tree_policy.yml").write_text(
            "validate_after_edit: true\nsync_action: Custom.Sync\n", encoding="utf-8"
        )

        policy = ConfigManager().get_tree_policy()

        assert policy["validate_after_edit"] is True
        assert policy["sync_action"] == "Custom.Sync"
        assert policy["allow_root_drag"] is False

    def test_invalid_user_override_is_ignored(self, fresh_config, caplog):
        (fresh_config / "tree_policy.yml").write_text("allow_root_drag: [unclosed\n", encoding="utf-8")

        with caplog.at_level(logging.ERROR, logger="group_tree.config.manager"):
            policy = ConfigManager().get_tree_policy()

        assert policy["allow_root_drag"] is False
        assert "Could not parse user config" in caplog.text

    def test_reload_picks_up_new_overrides(self, fresh_config):
        config_manager = ConfigManager()
        assert config_manager.get_tree_policy()["allow_root_drag"] is False

        (fresh_config / "tree_policy.yml").write_text("allow_root_drag: true\n", encoding="utf-8")
        config_manager.reload()

        assert config_manager.get_tree_policy()["allow_root_drag"] is True

    def test_startup_summary_is_logged(self, fresh_config, caplog):
        (fresh_config / "tree_policy.yml").write_text("allow_root_drag: true\n", encoding="utf-8")
        with caplog.at_level(logging.INFO, logger="group_tree.config.manager"):
            ConfigManager()
        assert "logging: loaded" in caplog.text
        assert "tree_policy: loaded+overrides" in caplog.text


def test_user_config_dir_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("GROUP_TREE_CONFIG_DIR", str(tmp_path))
    assert _get_user_config_dir() == tmp_path


def test_user_config_dir_default(monkeypatch):
    monkeypatch.delenv("GROUP_TREE_CONFIG_DIR", raising=False)
    path = _get_user_config_dir()
    assert path.name in {".group_tree", "config"}
