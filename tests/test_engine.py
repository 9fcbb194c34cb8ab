"""Tests for the migration engine."""

import pytest
from unittest.mock import Mock, patch

from travis_migrate.api.exceptions import TokenAcquisitionError
from travis_migrate.auth.tokens import StaticTokenProvider
from travis_migrate.config.config import Config
from travis_migrate.migration.engine import MigrationEngine
from travis_migrate.migration.orchestrator import MigrationOrchestrator


def make_config(**migration):
    return Config(
        travis_org={'endpoint': 'org', 'token': 'org-token'},
        travis_com={'endpoint': 'com', 'token': 'com-token', 'timeout': 5},
        github={'token': 'gh-token'},
        migration=migration,
    )


class TestMigrationEngine:
    """Test client construction and delegation."""

    def test_orchestrator_wiring(self):
        """Test clients get the configured URLs, tokens and settings."""
        config = make_config(poll_interval=0.5, max_poll_attempts=7)

        with MigrationEngine(config) as engine:
            orchestrator = engine._orchestrator()

            assert orchestrator.travis_org.base_url == 'https://api.travis-ci.org'
            assert orchestrator.travis_com.base_url == 'https://api.travis-ci.com'
            assert orchestrator.travis_com.timeout == 5
            assert (
                orchestrator.travis_com.session.headers['Authorization']
                == 'token com-token'
            )
            assert orchestrator.github.session.headers['Authorization'] == (
                'token gh-token'
            )
            assert orchestrator.poll_interval == 0.5
            assert orchestrator.max_poll_attempts == 7
            assert orchestrator.dry_run is False

    def test_token_provider_used_for_missing_tokens(self):
        """Test Travis CI tokens come from the provider factory."""
        config = Config(github={'token': 'gh-token'})
        factory = Mock(side_effect=lambda endpoint, token: StaticTokenProvider(
            f'{endpoint}-cli-token'
        ))

        with MigrationEngine(config, token_provider=factory) as engine:
            orchestrator = engine._orchestrator()

        factory.assert_any_call('org', None)
        factory.assert_any_call('com', None)
        assert orchestrator.travis_org.session.headers['Authorization'] == (
            'token org-cli-token'
        )

    def test_missing_github_token(self):
        """Test a migration cannot start without a GitHub token."""
        config = Config(
            travis_org={'endpoint': 'org', 'token': 'a'},
            travis_com={'endpoint': 'com', 'token': 'b'},
        )

        with MigrationEngine(config) as engine:
            with pytest.raises(TokenAcquisitionError):
                engine.migrate_repository('org/repo')

    @patch.object(MigrationOrchestrator, 'migrate_account')
    def test_exclusions_are_merged(self, mock_migrate_account):
        """Test configured and requested exclusions are combined."""
        config = make_config(exclude=['org/a'])

        with MigrationEngine(config) as engine:
            engine.migrate_account('org', exclude=('org/b',))

        mock_migrate_account.assert_called_once_with('org', {'org/a', 'org/b'})

    def test_dry_run_override(self):
        """Test the dry run flag overrides the configuration."""
        with MigrationEngine(make_config(dry_run=False)) as engine:
            assert engine._orchestrator(dry_run=True).dry_run is True
            assert engine._orchestrator().dry_run is False

        with MigrationEngine(make_config(dry_run=True)) as engine:
            assert engine._orchestrator().dry_run is True
            assert engine._orchestrator(dry_run=False).dry_run is False

    def test_close_closes_clients(self):
        """Test every created client is closed."""
        engine = MigrationEngine(make_config())
        orchestrator = engine._orchestrator()

        with patch.object(orchestrator.travis_org, 'close') as close_org, patch.object(
            orchestrator.github, 'close'
        ) as close_github:
            engine.close()

        close_org.assert_called_once()
        close_github.assert_called_once()
        assert engine._clients == []

    @patch('travis_migrate.api.travis.TravisClient.list_migratable_repositories')
    def test_list_repositories(self, mock_list):
        """Test listing only needs travis-ci.com."""
        mock_list.return_value = []
        config = Config(travis_com={'endpoint': 'com', 'token': 'b'})

        with MigrationEngine(config) as engine:
            engine.list_repositories('org')

        mock_list.assert_called_once_with('org')
