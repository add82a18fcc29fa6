"""配置类测试"""

import pytest

from ytree.config import (
    AppSettings,
    DatabaseSettings,
    LoggingSettings,
    TreeSettings,
)
from ytree.orm.tree import TreeConfig, configure_tree, get_tree_config


class TestSettingsDefaults:
    """默认值测试"""

    def test_database_defaults(self):
        config = DatabaseSettings()
        assert config.url == ""
        assert config.echo is False

    def test_logging_defaults(self):
        config = LoggingSettings()
        assert config.level == "INFO"
        assert config.parsed_file_max_bytes == 10 * 1024 * 1024

    def test_tree_defaults(self):
        config = TreeSettings()
        assert config.strict_build is True
        assert config.max_path_length == 255

    def test_app_settings_nested(self):
        settings = AppSettings(tree={"strict_build": False})
        assert settings.tree.strict_build is False
        assert settings.database.url == ""


class TestSettingsFromEnv:
    """环境变量覆盖测试"""

    def test_tree_env_prefix(self, monkeypatch):
        monkeypatch.setenv("YTREE_TREE_STRICT_BUILD", "false")
        monkeypatch.setenv("YTREE_TREE_MAX_PATH_LENGTH", "500")

        config = TreeSettings()
        assert config.strict_build is False
        assert config.max_path_length == 500

    def test_database_env_prefix(self, monkeypatch):
        monkeypatch.setenv("YTREE_DB_URL", "sqlite:///env.db")
        assert DatabaseSettings().url == "sqlite:///env.db"

    def test_logging_env_prefix(self, monkeypatch):
        monkeypatch.setenv("YTREE_LOG_FILE_MAX_BYTES", "1KB")
        assert LoggingSettings().parsed_file_max_bytes == 1024


class TestTreeConfig:
    """TreeConfig / configure_tree 测试"""

    def test_configure_explicit(self):
        configure_tree(strict_build=False, max_path_length=100)

        assert get_tree_config() == {"strict_build": False, "max_path_length": 100}

    def test_configure_partial_keeps_other_values(self):
        configure_tree(max_path_length=100)
        configure_tree(strict_build=False)

        assert TreeConfig.get_max_path_length() == 100
        assert TreeConfig.get_strict_build() is False

    def test_configure_from_settings(self):
        configure_tree(settings=TreeSettings(strict_build=False, max_path_length=64))

        assert TreeConfig.get_strict_build() is False
        assert TreeConfig.get_max_path_length() == 64

    def test_explicit_overrides_settings(self):
        configure_tree(max_path_length=32, settings=TreeSettings(max_path_length=64))
        assert TreeConfig.get_max_path_length() == 32

    def test_invalid_max_path_length(self):
        with pytest.raises(ValueError):
            configure_tree(max_path_length=0)

    def test_reset(self):
        configure_tree(strict_build=False, max_path_length=10)
        TreeConfig.reset()
        assert get_tree_config() == {"strict_build": True, "max_path_length": 255}
