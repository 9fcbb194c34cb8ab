"""Tests for API token acquisition."""

import pytest
from unittest.mock import Mock, patch

from travis_migrate.api.exceptions import TokenAcquisitionError
from travis_migrate.auth.tokens import (
    StaticTokenProvider,
    TravisCliTokenProvider,
    travis_token_provider,
)


class TestStaticTokenProvider:
    """Test directly supplied tokens."""

    def test_returns_token(self):
        """Test the token is passed through, stripped."""
        assert StaticTokenProvider(' abc \n').acquire_token() == 'abc'

    @pytest.mark.parametrize('token', [None, '', '   '])
    def test_missing_token(self, token):
        """Test an empty token is rejected."""
        with pytest.raises(TokenAcquisitionError) as exc_info:
            StaticTokenProvider(token, 'GitHub').acquire_token()

        assert 'GitHub' in str(exc_info.value)


class TestTravisCliTokenProvider:
    """Test tokens issued by the travis CLI."""

    def test_command(self):
        """Test the travis CLI invocation."""
        assert TravisCliTokenProvider('com').command == [
            'travis',
            'token',
            '--com',
            '--no-interactive',
        ]

    @patch('subprocess.run')
    def test_success(self, mock_run):
        """Test the token is read from stdout."""
        mock_run.return_value = Mock(returncode=0, stdout='tok123\n', stderr='')

        assert TravisCliTokenProvider('org').acquire_token() == 'tok123'
        assert mock_run.call_args.args[0] == [
            'travis',
            'token',
            '--org',
            '--no-interactive',
        ]

    @patch('subprocess.run')
    def test_non_zero_exit(self, mock_run):
        """Test a failing CLI aborts with its stderr."""
        mock_run.return_value = Mock(returncode=1, stdout='', stderr='not logged in\n')

        with pytest.raises(TokenAcquisitionError) as exc_info:
            TravisCliTokenProvider('org').acquire_token()

        assert 'not logged in' in str(exc_info.value)
        assert 'travis-ci.org' in str(exc_info.value)

    @patch('subprocess.run')
    def test_empty_output(self, mock_run):
        """Test a CLI that prints nothing is a failure."""
        mock_run.return_value = Mock(returncode=0, stdout='\n', stderr='')

        with pytest.raises(TokenAcquisitionError):
            TravisCliTokenProvider('com').acquire_token()

    @patch('subprocess.run')
    def test_missing_executable(self, mock_run):
        """Test a missing travis CLI is reported."""
        mock_run.side_effect = FileNotFoundError('travis')

        with pytest.raises(TokenAcquisitionError) as exc_info:
            TravisCliTokenProvider('com').acquire_token()

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)


class TestTravisTokenProvider:
    """Test provider selection."""

    def test_supplied_token(self):
        """Test a configured token is used as is."""
        provider = travis_token_provider('org', 'abc')

        assert isinstance(provider, StaticTokenProvider)
        assert provider.acquire_token() == 'abc'

    def test_falls_back_to_cli(self):
        """Test a missing token asks the travis CLI."""
        provider = travis_token_provider('com', None)

        assert isinstance(provider, TravisCliTokenProvider)
        assert provider.endpoint == 'com'
