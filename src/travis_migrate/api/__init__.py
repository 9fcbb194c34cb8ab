"""Travis CI and GitHub API clients."""

from .client import (
    APIClient,
    APIResponse,
    EnvelopePagination,
    LinkHeaderPagination,
    Page,
    Pagination,
)
from .exceptions import (
    APIError,
    AuthenticationError,
    MigrationTimeoutError,
    NotFoundError,
    PaginationError,
    ResponseParseError,
    TokenAcquisitionError,
    TransportError,
    TravisMigrateError,
    error_chain,
)
from .github import GitHubClient
from .travis import TravisClient

__all__ = [
    'APIClient',
    'APIResponse',
    'EnvelopePagination',
    'LinkHeaderPagination',
    'Page',
    'Pagination',
    'APIError',
    'AuthenticationError',
    'MigrationTimeoutError',
    'NotFoundError',
    'PaginationError',
    'ResponseParseError',
    'TokenAcquisitionError',
    'TransportError',
    'TravisMigrateError',
    'error_chain',
    'GitHubClient',
    'TravisClient',
]
