"""API token acquisition."""

import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from loguru import logger

from ..api.exceptions import TokenAcquisitionError


class TokenProvider(ABC):
    """Supplies the API token for one backend."""

    @abstractmethod
    def acquire_token(self) -> str:
        """Return a usable token.

        Raises:
            TokenAcquisitionError: If no token can be obtained
        """


class StaticTokenProvider(TokenProvider):
    """Token that was supplied directly (config file or environment)."""

    def __init__(self, token: Optional[str], name: str = 'API'):
        self.token = token
        self.name = name

    def acquire_token(self) -> str:
        if not self.token or not self.token.strip():
            raise TokenAcquisitionError(f'No {self.name} token supplied')
        return self.token.strip()


class TravisCliTokenProvider(TokenProvider):
    """Token issued by the ``travis`` command line client."""

    def __init__(self, endpoint: str, executable: str = 'travis'):
        """Initialize provider.

        Args:
            endpoint: ``org`` or ``com``
            executable: Name or path of the travis CLI
        """
        self.endpoint = endpoint
        self.executable = executable

    @property
    def command(self) -> List[str]:
        return [self.executable, 'token', f'--{self.endpoint}', '--no-interactive']

    def acquire_token(self) -> str:
        logger.info(f'Fetching API token for travis-ci.{self.endpoint}')

        try:
            result = subprocess.run(
                self.command, capture_output=True, text=True, check=False
            )
        except OSError as e:
            raise TokenAcquisitionError(
                f'Failed to run {self.executable!r} to get the '
                f'travis-ci.{self.endpoint} token: {e}'
            ) from e

        if result.returncode != 0:
            raise TokenAcquisitionError(
                f'Failed to get the travis-ci.{self.endpoint} token: '
                f'{result.stderr.strip()}'
            )

        token = result.stdout.strip()
        if not token:
            raise TokenAcquisitionError(
                f'{self.executable!r} returned an empty travis-ci.{self.endpoint} token'
            )
        return token


def travis_token_provider(endpoint: str, token: Optional[str]) -> TokenProvider:
    """Use the supplied token when there is one, otherwise ask the travis CLI."""
    if token:
        return StaticTokenProvider(token)
    return TravisCliTokenProvider(endpoint)
