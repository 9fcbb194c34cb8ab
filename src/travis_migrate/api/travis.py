"""Travis CI API v3 client."""

from typing import List, Optional
from urllib.parse import quote

from .client import APIClient, EnvelopePagination
from ..models.travis import Cron, Repository

ENDPOINTS = ('org', 'com')


def encode_segment(value: str) -> str:
    """Percent-encode a value for use as a single path segment.

    Travis CI addresses repositories by slug, so ``owner/name`` must become
    ``owner%2Fname``.
    """
    return quote(value, safe='')


class TravisClient(APIClient):
    """Client for one Travis CI endpoint (travis-ci.org or travis-ci.com)."""

    def __init__(
        self,
        endpoint: str,
        token: str,
        url: Optional[str] = None,
        timeout: Optional[float] = 30,
    ):
        """Initialize Travis CI client.

        Args:
            endpoint: ``org`` or ``com``
            token: Travis CI API token for that endpoint
            url: API base URL override
            timeout: Request timeout in seconds
        """
        if endpoint not in ENDPOINTS:
            raise ValueError(f'Unknown Travis CI endpoint: {endpoint}')

        self.endpoint = endpoint
        super().__init__(
            url or f'https://api.travis-ci.{endpoint}',
            token,
            EnvelopePagination(),
            timeout=timeout,
            headers={'Travis-API-Version': '3'},
        )
        self.logger = self.logger.bind(endpoint=endpoint)

    def list_crons(self, slug: str) -> List[Cron]:
        """List every cron job configured for a repository.

        Args:
            slug: Repository slug

        Returns:
            Cron jobs in the order the API returns them
        """
        items = self.get_all(f'repo/{encode_segment(slug)}/crons', key='crons')
        return [self.parse(Cron, item) for item in items]

    def list_migratable_repositories(self, account: str) -> List[Repository]:
        """List the repositories of an account that are still active on travis-ci.org.

        Args:
            account: Owner login

        Returns:
            Repositories eligible for migration
        """
        items = self.get_all(
            f'owner/{encode_segment(account)}/repos',
            key='repositories',
            params={'active_on_org': 'true'},
        )
        return [self.parse(Repository, item) for item in items]

    def get_repository(self, slug: str) -> Repository:
        """Fetch a single repository."""
        response = self.get(f'repo/{encode_segment(slug)}')
        return self.parse(Repository, response.data)

    def trigger_migration(self, slug: str) -> None:
        """Ask travis-ci.com to start migrating a repository."""
        self.post(f'repo/{encode_segment(slug)}/migrate')

    def migration_status(self, slug: str) -> Optional[str]:
        """Return the raw migration status of a repository, if it has one."""
        return self.get_repository(slug).migration_status

    def is_migration_complete(self, slug: str) -> bool:
        """Whether the repository's migration status is ``migrated``."""
        return self.get_repository(slug).is_migrated

    def create_cron_job(self, slug: str, cron: Cron) -> None:
        """Create a cron job on the branch the cron was read from.

        Args:
            slug: Repository slug
            cron: Cron job to recreate
        """
        self.post(
            f'repo/{encode_segment(slug)}/branch/'
            f'{encode_segment(cron.branch.name)}/cron',
            data=cron.to_payload(),
        )
