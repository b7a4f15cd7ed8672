"""
Unit tests for user configuration.
"""

import json

from imghash.config import DEFAULT_DB_FILE, DEFAULT_MAX_DISTANCE, DEFAULT_HASHER
from imghash.user_config import UserConfig, get_user_config, resolve_database_file


def write_config(config, data):
    config.config_dir.mkdir(parents=True, exist_ok=True)
    config.config_file_path.write_text(json.dumps(data), encoding='utf-8')
    config.reload()


class TestUserConfig:
    """Test configuration priority."""

    def test_singleton(self):
        assert UserConfig() is get_user_config()

    def test_config_dir_from_env(self, isolated_config, temp_dir):
        assert isolated_config.config_dir == temp_dir / 'config'
        assert isolated_config.config_file_path == temp_dir / 'config' / 'config.json'

    def test_defaults(self, isolated_config):
        assert isolated_config.database_file == DEFAULT_DB_FILE
        assert isolated_config.max_distance == DEFAULT_MAX_DISTANCE
        assert isolated_config.hasher == DEFAULT_HASHER

    def test_config_file(self, isolated_config):
        write_config(isolated_config, {
            'database_file': '/data/photos.imghash',
            'max_distance': 9,
            'hasher': 'perceptual',
        })
        assert isolated_config.database_file == '/data/photos.imghash'
        assert isolated_config.max_distance == 9
        assert isolated_config.hasher == 'perceptual'

    def test_env_overrides_file(self, isolated_config, monkeypatch):
        write_config(isolated_config, {'database_file': '/from/file', 'max_distance': 9})
        monkeypatch.setenv('IMGHASH_DB', '/from/env')
        monkeypatch.setenv('IMGHASH_MAX_DISTANCE', '12')
        assert isolated_config.database_file == '/from/env'
        assert isolated_config.max_distance == 12

    def test_null_in_file_falls_back_to_default(self, isolated_config):
        write_config(isolated_config, {'database_file': None})
        assert isolated_config.database_file == DEFAULT_DB_FILE

    def test_invalid_distance_falls_back(self, isolated_config, monkeypatch):
        monkeypatch.setenv('IMGHASH_MAX_DISTANCE', 'lots')
        assert isolated_config.max_distance == DEFAULT_MAX_DISTANCE

    def test_malformed_file_ignored(self, isolated_config):
        isolated_config.config_dir.mkdir(parents=True, exist_ok=True)
        isolated_config.config_file_path.write_text("{not json", encoding='utf-8')
        isolated_config.reload()
        assert isolated_config.hasher == DEFAULT_HASHER

    def test_create_example_config(self, isolated_config):
        assert isolated_config.create_example_config() is True
        data = json.loads(isolated_config.config_file_path.read_text(encoding='utf-8'))
        assert data['max_distance'] == DEFAULT_MAX_DISTANCE
        assert data['hasher'] == DEFAULT_HASHER


class TestResolveDatabaseFile:
    """Test resolve_database_file function."""

    def test_explicit_wins(self, monkeypatch):
        monkeypatch.setenv('IMGHASH_DB', '/from/env')
        assert resolve_database_file('/explicit.imghash') == '/explicit.imghash'

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv('IMGHASH_DB', '/from/env')
        assert resolve_database_file(None) == '/from/env'
        assert resolve_database_file('') == '/from/env'

    def test_default(self):
        assert resolve_database_file() == DEFAULT_DB_FILE
