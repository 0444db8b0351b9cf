"""
Unit tests for repostream.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

import yaml

from repostream.config import (
    load_config,
    save_config,
    get_config_path,
    get_default_config,
    get_repos_dir,
    merge_configs,
    apply_env_overrides,
    configure_logging,
)
from repostream.exit_codes import ConfigError, CONFIG_ERROR


class TestConfigManagement(unittest.TestCase):
    """Test configuration loading and saving"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {'HOME': self.temp_dir}, clear=False)
        self.env.start()
        for key in [k for k in os.environ if k.startswith('REPOSTREAM_')]:
            del os.environ[key]
        self.config_dir = Path(self.temp_dir) / '.repostream'

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def write_config(self, filename, text):
        self.config_dir.mkdir(exist_ok=True)
        path = self.config_dir / filename
        path.write_text(text)
        return path

    def test_get_default_config(self):
        """Default configuration has every section"""
        config = get_default_config()

        self.assertEqual(config['general']['repos_dir'], '~/repos')
        self.assertEqual(config['general']['git_binary'], 'git')
        self.assertEqual(config['git']['clone_timeout'], 60)
        self.assertEqual(config['git']['kill_grace'], 5)
        self.assertIn('level', config['logging'])
        self.assertIn('format', config['logging'])

    def test_load_config_no_file(self):
        """Without a file the defaults are returned"""
        self.assertEqual(load_config(), get_default_config())

    def test_load_config_json_file(self):
        self.write_config('config.json', json.dumps({
            'general': {'repos_dir': '/srv/repos'},
            'git': {'clone_timeout': 120},
        }))

        config = load_config()

        self.assertEqual(config['general']['repos_dir'], '/srv/repos')
        self.assertEqual(config['general']['git_binary'], 'git')
        self.assertEqual(config['git']['clone_timeout'], 120)
        self.assertEqual(config['git']['kill_grace'], 5)

    def test_load_config_yaml_file(self):
        self.write_config('config.yaml', yaml.safe_dump({'git': {'kill_grace': 1}}))

        config = load_config()

        self.assertEqual(config['git']['kill_grace'], 1)

    def test_load_config_toml_file(self):
        self.write_config('config.toml', '[general]\nrepos_dir = "/data/git"\n')

        config = load_config()

        self.assertEqual(config['general']['repos_dir'], '/data/git')

    def test_load_config_invalid_json(self):
        self.write_config('config.json', '{"general": {"repos_dir": ')

        with self.assertRaises(ConfigError) as ctx:
            load_config()
        self.assertEqual(ctx.exception.exit_code, CONFIG_ERROR)
        self.assertTrue(ctx.exception.path.endswith('config.json'))

    def test_load_config_not_a_mapping(self):
        self.write_config('config.json', '["general", "git", "logging"]')

        with self.assertRaises(ConfigError):
            load_config()

    def test_config_env_path(self):
        """REPOSTREAM_CONFIG points at an explicit file"""
        custom = Path(self.temp_dir) / 'custom.yml'
        custom.write_text('general:\n  git_binary: /opt/git/bin/git\n')

        with patch.dict(os.environ, {'REPOSTREAM_CONFIG': str(custom)}):
            self.assertEqual(get_config_path(), custom)
            config = load_config()

        self.assertEqual(config['general']['git_binary'], '/opt/git/bin/git')

    def test_save_config_json(self):
        config = get_default_config()
        config['git']['clone_timeout'] = 30

        path = save_config(config)

        self.assertEqual(path, self.config_dir / 'config.json')
        with open(path) as f:
            self.assertEqual(json.load(f)['git']['clone_timeout'], 30)
        self.assertEqual(load_config()['git']['clone_timeout'], 30)

    def test_save_config_yaml(self):
        self.write_config('config.yaml', yaml.safe_dump({'git': {'clone_timeout': 10}}))

        config = load_config()
        config['git']['clone_timeout'] = 15
        path = save_config(config)

        self.assertEqual(path.suffix, '.yaml')
        with open(path) as f:
            self.assertEqual(yaml.safe_load(f)['git']['clone_timeout'], 15)

    def test_save_config_toml_refused(self):
        self.write_config('config.toml', '[git]\nclone_timeout = 10\n')

        with self.assertRaises(ConfigError):
            save_config(get_default_config())


class TestEnvOverrides(unittest.TestCase):
    """Test REPOSTREAM_* environment overrides"""

    def test_nested_key_with_underscores(self):
        config = get_default_config()
        with patch.dict(os.environ, {'REPOSTREAM_GIT_CLONE_TIMEOUT': '120'}):
            apply_env_overrides(config)
        self.assertEqual(config['git']['clone_timeout'], 120)

    def test_string_value(self):
        config = get_default_config()
        with patch.dict(os.environ, {'REPOSTREAM_GENERAL_REPOS_DIR': '/tmp/elsewhere'}):
            apply_env_overrides(config)
        self.assertEqual(config['general']['repos_dir'], '/tmp/elsewhere')

    def test_boolean_values(self):
        config = {'feature': {'enabled': False, 'debug': True}}
        with patch.dict(os.environ, {
            'REPOSTREAM_FEATURE_ENABLED': 'yes',
            'REPOSTREAM_FEATURE_DEBUG': 'off',
        }):
            apply_env_overrides(config)
        self.assertIs(config['feature']['enabled'], True)
        self.assertIs(config['feature']['debug'], False)

    def test_unknown_keys_ignored(self):
        config = get_default_config()
        with patch.dict(os.environ, {'REPOSTREAM_NOPE_NOTHING': '1'}):
            apply_env_overrides(config)
        self.assertEqual(config, get_default_config())


class TestConfigHelpers(unittest.TestCase):
    """Test merge_configs, get_repos_dir and configure_logging"""

    def test_merge_configs_recursive(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 1}
        merged = merge_configs(base, {'a': {'y': 3}, 'c': 4})

        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})
        self.assertEqual(base['a']['y'], 2)

    def test_get_repos_dir_expands_user(self):
        with patch.dict(os.environ, {'HOME': '/home/someone'}):
            repos_dir = get_repos_dir({'general': {'repos_dir': '~/code'}})
        self.assertEqual(repos_dir, '/home/someone/code')

    def test_configure_logging_levels(self):
        logger = logging.getLogger('repostream')
        original = logger.level
        try:
            configure_logging({'logging': {'level': 'warning'}})
            self.assertEqual(logger.level, logging.WARNING)

            configure_logging({'logging': {'level': 'warning'}}, verbose=True)
            self.assertEqual(logger.level, logging.DEBUG)
        finally:
            logger.setLevel(original)


if __name__ == '__main__':
    unittest.main()
