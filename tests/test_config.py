"""Tests for configuration management."""

import pytest
import tempfile
import os
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError

from travis_migrate.config.config import (
    Config,
    GitHubConfig,
    MigrationConfig,
    TravisEndpointConfig,
)


class TestTravisEndpointConfig:
    """Test Travis CI endpoint configuration."""

    def test_default_url(self):
        """Test the API URL follows the endpoint."""
        assert TravisEndpointConfig(endpoint='org').api_url == (
            'https://api.travis-ci.org'
        )
        assert TravisEndpointConfig(endpoint='com').api_url == (
            'https://api.travis-ci.com'
        )

    def test_url_override(self):
        """Test a custom URL is kept without trailing slash."""
        config = TravisEndpointConfig(endpoint='com', url='https://travis.local/api/')

        assert config.api_url == 'https://travis.local/api'

    def test_invalid_endpoint(self):
        """Test unknown endpoints are rejected."""
        with pytest.raises(ValidationError):
            TravisEndpointConfig(endpoint='net')

    def test_invalid_url(self):
        """Test URL validation."""
        with pytest.raises(ValidationError):
            TravisEndpointConfig(endpoint='org', url='api.travis-ci.org')

    def test_token_optional(self):
        """Test the token may be fetched later."""
        assert TravisEndpointConfig(endpoint='org').token is None


class TestMigrationConfig:
    """Test migration settings."""

    def test_defaults(self):
        """Test polling defaults."""
        config = MigrationConfig()

        assert config.poll_interval == 0.1
        assert config.max_poll_attempts == 6000
        assert config.exclude == []
        assert config.dry_run is False

    @pytest.mark.parametrize(
        'field, value', [('poll_interval', 0), ('max_poll_attempts', -1)]
    )
    def test_positive_values(self, field, value):
        """Test polling settings must be positive."""
        with pytest.raises(ValidationError):
            MigrationConfig(**{field: value})


class TestConfig:
    """Test main configuration class."""

    def test_config_defaults(self):
        """Test configuration creation with defaults."""
        config = Config()

        assert config.travis_org.endpoint == 'org'
        assert config.travis_com.endpoint == 'com'
        assert config.github.url == 'https://api.github.com'
        assert config.logging.level == 'INFO'

    def test_swapped_endpoints_rejected(self):
        """Test travis_org must point at travis-ci.org."""
        with pytest.raises(ValidationError):
            Config(travis_org={'endpoint': 'com'})

    def test_extra_fields_rejected(self):
        """Test unknown sections are rejected."""
        with pytest.raises(ValidationError):
            Config(unknown={'url': 'https://example.com'})

    def test_config_from_file(self):
        """Test configuration loading from YAML file."""
        config_content = """
travis_org:
  endpoint: org
  token: org-token

travis_com:
  endpoint: com
  token: com-token

github:
  token: gh-token

migration:
  poll_interval: 0.5
  exclude:
    - org/legacy
"""

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(config_content)
            f.flush()

        try:
            config = Config.from_file(f.name)
            assert config.travis_org.token == 'org-token'
            assert config.travis_com.token == 'com-token'
            assert config.github.token == 'gh-token'
            assert config.migration.poll_interval == 0.5
            assert config.migration.exclude == ['org/legacy']
        finally:
            os.unlink(f.name)

    def test_config_from_env(self):
        """Test configuration loading from environment variables."""
        env_vars = {
            'TRAVIS_TOKEN_ORG': 'org-token',
            'TRAVIS_TOKEN_COM': 'com-token',
            'GITHUB_TOKEN': 'gh-token',
            'MIGRATION_POLL_INTERVAL': '0.25',
            'MIGRATION_MAX_POLL_ATTEMPTS': '10',
            'LOG_LEVEL': 'debug',
        }

        with patch.dict(os.environ, env_vars, clear=True), patch(
            'travis_migrate.config.config.load_dotenv'
        ):
            config = Config.from_env()

        assert config.travis_org.token == 'org-token'
        assert config.travis_com.token == 'com-token'
        assert config.github.token == 'gh-token'
        assert config.github.url == 'https://api.github.com'
        assert config.migration.poll_interval == 0.25
        assert config.migration.max_poll_attempts == 10
        assert config.logging.level == 'DEBUG'

    def test_config_from_env_without_tokens(self):
        """Test missing tokens stay unset."""
        with patch.dict(os.environ, {}, clear=True), patch(
            'travis_migrate.config.config.load_dotenv'
        ):
            config = Config.from_env()

        assert config.travis_org.token is None
        assert config.github.token is None

    def test_invalid_config_file(self):
        """Test handling of invalid configuration file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write('invalid: yaml: content:')
            f.flush()

        try:
            with pytest.raises(Exception):  # Should raise YAML parsing error
                Config.from_file(f.name)
        finally:
            os.unlink(f.name)

    def test_missing_config_file(self):
        """Test handling of missing configuration file."""
        with pytest.raises(FileNotFoundError):
            Config.from_file('/nonexistent/config.yaml')

    def test_template_round_trip(self):
        """Test the generated template is a valid configuration."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / 'nested' / 'config.yaml'

            Config.create_template(str(path))
            config = Config.from_file(str(path))

        assert config.github.token == 'your-github-personal-access-token'
        assert config.migration.max_poll_attempts == 6000

    def test_github_config_defaults(self):
        """Test GitHub defaults."""
        config = GitHubConfig()

        assert config.token is None
        assert config.timeout == 30
