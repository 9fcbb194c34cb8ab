"""GitHub REST API client for branch protection."""

from typing import List, Optional
from urllib.parse import quote

from .client import APIClient, LinkHeaderPagination
from ..models.github import ProtectedBranch


class GitHubClient(APIClient):
    """Client for the GitHub branch protection endpoints."""

    def __init__(
        self,
        token: str,
        url: str = 'https://api.github.com',
        timeout: Optional[float] = 30,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token
            url: API base URL
            timeout: Request timeout in seconds
        """
        super().__init__(
            url,
            token,
            LinkHeaderPagination(),
            timeout=timeout,
            headers={'Accept': 'application/vnd.github+json'},
        )

    def list_protected_branches(self, repo: str) -> List[ProtectedBranch]:
        """List protected branches with their required status checks.

        Args:
            repo: Repository full name (owner/name)

        Returns:
            Protected branches
        """
        items = self.get_all(f'repos/{repo}/branches', params={'protected': 'true'})
        return [self.parse(ProtectedBranch, item) for item in items]

    def set_required_status_checks(
        self, repo: str, branch: str, contexts: List[str]
    ) -> None:
        """Replace the required status check contexts of a protected branch.

        Args:
            repo: Repository full name (owner/name)
            branch: Branch name
            contexts: New contexts, in order
        """
        # Branch names may hold '#' or '%'; '/' stays a path separator.
        branch = quote(branch, safe='/')
        self.patch(
            f'repos/{repo}/branches/{branch}/protection/required_status_checks',
            data={'contexts': list(contexts)},
        )
