"""Data models for Travis CI and GitHub entities."""

from .travis import Branch, Cron, CronInterval, Repository
from .github import BranchProtection, ProtectedBranch, RequiredStatusChecks

__all__ = [
    'Branch',
    'Cron',
    'CronInterval',
    'Repository',
    'BranchProtection',
    'ProtectedBranch',
    'RequiredStatusChecks',
]
