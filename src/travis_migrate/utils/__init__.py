"""Utilities for Travis CI Migration Tool."""

from .logging import setup_logging

__all__ = ['setup_logging']
