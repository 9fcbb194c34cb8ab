"""Token acquisition for the Travis CI and GitHub APIs."""

from .tokens import (
    StaticTokenProvider,
    TokenProvider,
    TravisCliTokenProvider,
    travis_token_provider,
)

__all__ = [
    'StaticTokenProvider',
    'TokenProvider',
    'TravisCliTokenProvider',
    'travis_token_provider',
]
