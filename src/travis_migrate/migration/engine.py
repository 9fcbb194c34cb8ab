"""Migration engine - builds the clients and orchestrator from configuration."""

from typing import Callable, Iterable, List, Optional

from loguru import logger

from ..api.github import GitHubClient
from ..api.travis import TravisClient
from ..auth.tokens import StaticTokenProvider, TokenProvider, travis_token_provider
from ..config.config import Config, TravisEndpointConfig
from ..models.travis import Repository
from .orchestrator import (
    MigrationOrchestrator,
    MigrationSummary,
    RepositoryMigrationResult,
)

ProviderFactory = Callable[[str, Optional[str]], TokenProvider]


class MigrationEngine:
    """Main entry point for list and migrate operations."""

    def __init__(
        self,
        config: Config,
        token_provider: ProviderFactory = travis_token_provider,
    ):
        """Initialize migration engine.

        Args:
            config: Migration configuration
            token_provider: Builds the token provider of a Travis CI endpoint
                from its name and configured token
        """
        self.config = config
        self.token_provider = token_provider
        self.logger = logger.bind(component='MigrationEngine')
        self._clients: List = []

    def _travis_client(self, endpoint_config: TravisEndpointConfig) -> TravisClient:
        provider = self.token_provider(endpoint_config.endpoint, endpoint_config.token)
        client = TravisClient(
            endpoint_config.endpoint,
            provider.acquire_token(),
            url=endpoint_config.api_url,
            timeout=endpoint_config.timeout,
        )
        self._clients.append(client)
        return client

    def _github_client(self) -> GitHubClient:
        token = StaticTokenProvider(self.config.github.token, 'GitHub').acquire_token()
        client = GitHubClient(
            token, url=self.config.github.url, timeout=self.config.github.timeout
        )
        self._clients.append(client)
        return client

    def _orchestrator(self, dry_run: Optional[bool] = None) -> MigrationOrchestrator:
        migration = self.config.migration
        return MigrationOrchestrator(
            travis_org=self._travis_client(self.config.travis_org),
            travis_com=self._travis_client(self.config.travis_com),
            github=self._github_client(),
            poll_interval=migration.poll_interval,
            max_poll_attempts=migration.max_poll_attempts,
            dry_run=migration.dry_run if dry_run is None else dry_run,
        )

    def list_repositories(self, account: str) -> List[Repository]:
        """List the repositories of an account that can be migrated."""
        return self._travis_client(self.config.travis_com).list_migratable_repositories(
            account
        )

    def migrate_repository(
        self, slug: str, dry_run: Optional[bool] = None
    ) -> RepositoryMigrationResult:
        """Migrate one repository, raising on the first error."""
        return self._orchestrator(dry_run).migrate_repository(slug)

    def migrate_account(
        self,
        account: str,
        exclude: Iterable[str] = (),
        dry_run: Optional[bool] = None,
    ) -> MigrationSummary:
        """Migrate all repositories of an account except the excluded ones."""
        excluded = set(self.config.migration.exclude) | set(exclude)
        return self._orchestrator(dry_run).migrate_account(account, excluded)

    def close(self) -> None:
        """Close every client created by the engine."""
        while self._clients:
            self._clients.pop().close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
