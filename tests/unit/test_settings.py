"""
Unit tests for Settings
"""
import json
import logging
import os

from cockpit_uplink.core.settings import Settings


class TestSettings:
    """Tests for Settings class"""

    def test_settings_initialization(self, temp_config_file):
        """Test settings initializes with defaults"""
        settings = Settings(temp_config_file)
        assert settings.settings.query.timeout == 2.0
        assert settings.settings.builder.strict_actions is False
        assert settings.settings.builder.log_streams is False
        assert settings.settings.logging.level == "INFO"

    def test_load_nonexistent_creates_default(self, temp_config_file):
        """Test loading nonexistent config creates default"""
        os.remove(temp_config_file)

        Settings(temp_config_file)
        assert os.path.exists(temp_config_file)
        with open(temp_config_file) as f:
            data = json.load(f)
        assert data["query"]["timeout"] == 2.0

    def test_save_and_load(self, temp_config_file):
        """Test saving and loading settings"""
        settings = Settings(temp_config_file)
        settings.set('query', 'timeout', 5)
        settings.set('builder', 'strict_actions', True)
        assert settings.save() is True

        settings2 = Settings(temp_config_file)
        assert settings2.get('query', 'timeout') == 5.0
        assert isinstance(settings2.get('query', 'timeout'), float)
        assert settings2.get('builder', 'strict_actions') is True
        assert settings2.settings.first_run is False

    def test_load_malformed_file(self, temp_config_file):
        """Test a malformed config file is reported and defaults are kept"""
        with open(temp_config_file, 'w') as f:
            f.write('{"query": ')
        settings = Settings(temp_config_file)
        assert settings.get('query', 'timeout') == 2.0
        assert settings.load() is False

    def test_load_ignores_bad_values(self, temp_config_file):
        """Test unknown keys and unconvertible values are ignored"""
        with open(temp_config_file, 'w') as f:
            json.dump({"query": {"timeout": "soon", "retries": 3}, "builder": 1}, f)
        settings = Settings(temp_config_file)
        assert settings.get('query', 'timeout') == 2.0
        assert settings.get('query', 'retries') is None
        assert settings.get('builder', 'log_streams') is False

    def test_get_section(self, temp_config_file):
        """Test getting an entire section"""
        settings = Settings(temp_config_file)
        section = settings.get('logging')
        assert section.max_log_files == 5

    def test_set_invalid_section(self, temp_config_file):
        """Test setting invalid section returns False"""
        settings = Settings(temp_config_file)
        assert settings.set('invalid_section', 'key', 'value') is False

    def test_set_invalid_key(self, temp_config_file):
        """Test setting invalid key returns False"""
        settings = Settings(temp_config_file)
        assert settings.set('query', 'invalid_key', 'value') is False

    def test_set_unconvertible_value(self, temp_config_file):
        """Test a value of the wrong type is rejected"""
        settings = Settings(temp_config_file)
        assert settings.set('query', 'timeout', 'soon') is False
        assert settings.get('query', 'timeout') == 2.0

    def test_set_optional_value(self, temp_config_file):
        """Test optional settings accept values"""
        settings = Settings(temp_config_file)
        assert settings.set('logging', 'log_file_path', '/tmp/uplink.log') is True
        assert settings.get('logging', 'log_file_path') == '/tmp/uplink.log'

    def test_reset_to_defaults(self, temp_config_file):
        """Test resetting restores defaults"""
        settings = Settings(temp_config_file)
        settings.set('query', 'timeout', 9.0)
        settings.reset_to_defaults()
        assert settings.get('query', 'timeout') == 2.0

    def test_validate_valid_settings(self, temp_config_file):
        """Test validating valid settings"""
        settings = Settings(temp_config_file)
        assert settings.validate() == {}

    def test_validate_query_timeout(self, temp_config_file):
        """Test validation catches out of range timeouts"""
        settings = Settings(temp_config_file)
        settings.set('query', 'timeout', 0.0)
        assert 'query' in settings.validate()
        settings.set('query', 'timeout', 120.0)
        assert 'query' in settings.validate()

    def test_validate_logging(self, temp_config_file):
        """Test validation catches inconsistent logging settings"""
        settings = Settings(temp_config_file)
        settings.set('logging', 'log_to_file', True)
        settings.set('logging', 'level', 'CHATTY')
        errors = settings.validate()
        assert len(errors['logging']) == 2

    def test_apply_logging_settings(self, temp_config_file):
        """Test applying logging settings configures the root logger"""
        root_logger = logging.getLogger()
        saved_handlers = root_logger.handlers[:]
        saved_level = root_logger.level
        try:
            settings = Settings(temp_config_file)
            settings.set('logging', 'level', 'WARNING')
            settings.apply_logging_settings()
            assert root_logger.level == logging.WARNING
            assert any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers)
        finally:
            for handler in root_logger.handlers[:]:
                root_logger.removeHandler(handler)
            for handler in saved_handlers:
                root_logger.addHandler(handler)
            root_logger.setLevel(saved_level)
