"""Configuration for Travis CI Migration Tool."""

from .config import Config, GitHubConfig, LoggingConfig, MigrationConfig, TravisEndpointConfig

__all__ = [
    'Config',
    'GitHubConfig',
    'LoggingConfig',
    'MigrationConfig',
    'TravisEndpointConfig',
]
