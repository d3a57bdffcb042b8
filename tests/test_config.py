"""
测试配置与验证器
"""
import os

import pytest

from node_tree.config.settings import SystemSettings
from node_tree.config.validator import ConfigValidator
from node_tree.exceptions import ConfigError, ValidationError


class TestSystemSettings:

    def test_defaults(self):
        settings = SystemSettings()
        assert settings.storage_backend == "memory"
        assert settings.storage_path is None
        assert settings.name_min_length == 2

    def test_invalid_log_level(self):
        with pytest.raises(ConfigError) as exc_info:
            SystemSettings(log_level="VERBOSE")
        assert exc_info.value.details["config_key"] == "log_level"

    def test_log_level_normalized(self):
        assert SystemSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_backend(self):
        with pytest.raises(ConfigError):
            SystemSettings(storage_backend="mongo")

    def test_invalid_name_bounds(self):
        with pytest.raises(ConfigError):
            SystemSettings(name_min_length=5, name_max_length=3)

    def test_default_storage_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = SystemSettings(storage_backend="sqlite")
        assert settings.storage_path == os.path.join(str(tmp_path), "data", "node_tree.db")

    def test_from_dict_ignores_unknown_keys(self):
        settings = SystemSettings.from_dict({'log_level': 'WARNING', 'unknown': 1})
        assert settings.log_level == 'WARNING'

    def test_from_env(self):
        settings = SystemSettings.from_env(environ={
            'NODE_TREE_STORAGE_BACKEND': 'json',
            'NODE_TREE_STORAGE_PATH': '/tmp/tree.json',
            'NODE_TREE_NAME_MIN_LENGTH': '3',
            'OTHER_VAR': 'x',
        })
        assert settings.storage_backend == 'json'
        assert settings.storage_path == '/tmp/tree.json'
        assert settings.name_min_length == 3

    def test_from_env_bad_int(self):
        with pytest.raises(ConfigError):
            SystemSettings.from_env(environ={'NODE_TREE_NAME_MIN_LENGTH': 'two'})

    def test_to_dict(self):
        assert SystemSettings().to_dict()['storage_backend'] == 'memory'


class TestConfigValidator:

    @pytest.fixture
    def validator(self):
        return ConfigValidator()

    def test_valid_name_is_trimmed(self, validator):
        assert validator.validate_node_name("  上海  ") == "上海"

    @pytest.mark.parametrize("name, reason", [
        (None, "required_field_missing"),
        ("", "required_field_missing"),
        ("\t  \n", "blank"),
        ("x", "too_short"),
        ("x" * 101, "too_long"),
        (42, "invalid_type"),
    ])
    def test_invalid_names(self, validator, name, reason):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate_node_name(name)
        assert exc_info.value.details["reason"] == reason

    def test_system_config(self, validator):
        assert validator.validate_system_config({'storage_backend': 'sqlite', 'storage_path': 'x.db'})

    def test_system_config_bad_backend(self, validator):
        with pytest.raises(ValidationError):
            validator.validate_system_config({'storage_backend': 'redis'})

    def test_system_config_bad_level(self, validator):
        with pytest.raises(ValidationError):
            validator.validate_system_config({'log_level': 'LOUD'})
