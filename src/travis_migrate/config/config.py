"""Configuration management for Travis CI Migration Tool."""

from typing import Optional, Dict, Any, List
from pathlib import Path
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator
import yaml
from dotenv import load_dotenv


def _validate_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.startswith(('http://', 'https://')):
        raise ValueError('URL must start with http:// or https://')
    return v.rstrip('/')


class TravisEndpointConfig(BaseModel):
    """Configuration for a Travis CI endpoint."""

    endpoint: str = Field(..., description='Travis CI endpoint (org or com)')
    url: Optional[str] = Field(
        default=None, description='API URL, defaults to https://api.travis-ci.<endpoint>'
    )
    token: Optional[str] = Field(
        default=None,
        description='API token; fetched with the travis CLI when not set',
    )
    timeout: int = Field(default=30, description='Request timeout in seconds')

    @field_validator('endpoint')
    @classmethod
    def validate_endpoint(cls, v):
        """Validate endpoint name."""
        if v not in ('org', 'com'):
            raise ValueError('Endpoint must be "org" or "com"')
        return v

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate API URL format."""
        return _validate_url(v)

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v

    @property
    def api_url(self) -> str:
        return self.url or f'https://api.travis-ci.{self.endpoint}'


class GitHubConfig(BaseModel):
    """Configuration for the GitHub API."""

    url: str = Field(default='https://api.github.com', description='GitHub API URL')
    token: Optional[str] = Field(default=None, description='Personal access token')
    timeout: int = Field(default=30, description='Request timeout in seconds')

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate API URL format."""
        return _validate_url(v)

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v


class MigrationConfig(BaseModel):
    """Migration-specific configuration."""

    poll_interval: float = Field(
        default=0.1, description='Seconds between migration status checks'
    )
    max_poll_attempts: int = Field(
        default=6000, description='Status checks before giving up on a migration'
    )
    exclude: List[str] = Field(
        default_factory=list, description='Repository slugs skipped in account mode'
    )
    dry_run: bool = Field(default=False, description='Perform dry run without changes')

    @field_validator('poll_interval')
    @classmethod
    def validate_poll_interval(cls, v):
        """Validate poll interval is positive."""
        if v <= 0:
            raise ValueError('Poll interval must be positive')
        return v

    @field_validator('max_poll_attempts')
    @classmethod
    def validate_max_poll_attempts(cls, v):
        """Validate max poll attempts is positive."""
        if v <= 0:
            raise ValueError('Max poll attempts must be positive')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Log format')

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


TEMPLATE: Dict[str, Any] = {
    'travis_org': {
        'endpoint': 'org',
        'token': 'your-travis-ci-org-token',
        'timeout': 30,
    },
    'travis_com': {
        'endpoint': 'com',
        'token': 'your-travis-ci-com-token',
        'timeout': 30,
    },
    'github': {
        'url': 'https://api.github.com',
        'token': 'your-github-personal-access-token',
        'timeout': 30,
    },
    'migration': {
        'poll_interval': 0.1,
        'max_poll_attempts': 6000,
        'exclude': [],
        'dry_run': False,
    },
    'logging': {
        'level': 'INFO',
        'file': 'migration.log',
    },
}


class Config(BaseModel):
    """Main configuration class for Travis CI Migration Tool."""

    model_config = ConfigDict(extra='forbid')

    travis_org: TravisEndpointConfig = Field(
        default_factory=lambda: TravisEndpointConfig(endpoint='org'),
        description='Source endpoint (travis-ci.org)',
    )
    travis_com: TravisEndpointConfig = Field(
        default_factory=lambda: TravisEndpointConfig(endpoint='com'),
        description='Destination endpoint (travis-ci.com)',
    )
    github: GitHubConfig = Field(
        default_factory=GitHubConfig, description='GitHub settings'
    )
    migration: MigrationConfig = Field(
        default_factory=MigrationConfig, description='Migration settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @field_validator('travis_org')
    @classmethod
    def validate_travis_org(cls, v):
        """Source endpoint must be travis-ci.org."""
        if v.endpoint != 'org':
            raise ValueError('travis_org must use the "org" endpoint')
        return v

    @field_validator('travis_com')
    @classmethod
    def validate_travis_com(cls, v):
        """Destination endpoint must be travis-ci.com."""
        if v.endpoint != 'com':
            raise ValueError('travis_com must use the "com" endpoint')
        return v

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        # Load .env file if it exists
        load_dotenv()

        config_data = {
            'travis_org': {
                'endpoint': 'org',
                'url': os.getenv('TRAVIS_URL_ORG'),
                'token': os.getenv('TRAVIS_TOKEN_ORG'),
            },
            'travis_com': {
                'endpoint': 'com',
                'url': os.getenv('TRAVIS_URL_COM'),
                'token': os.getenv('TRAVIS_TOKEN_COM'),
            },
            'github': {
                'url': os.getenv('GITHUB_API_URL'),
                'token': os.getenv('GITHUB_TOKEN'),
            },
            'migration': {
                'poll_interval': os.getenv('MIGRATION_POLL_INTERVAL'),
                'max_poll_attempts': os.getenv('MIGRATION_MAX_POLL_ATTEMPTS'),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', 'INFO'),
                'file': os.getenv('LOG_FILE'),
            },
        }

        # Remove None values
        config_data = cls._remove_none_values(config_data)

        return cls(**config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    def to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                self.model_dump(exclude_none=True),
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
            )

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(TEMPLATE, f, default_flow_style=False, indent=2, sort_keys=False)
