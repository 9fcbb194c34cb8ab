"""Migration engine and orchestrator."""

from .contexts import CONTEXT_MAPPING, migrate_protection_contexts
from .orchestrator import (
    MigrationOrchestrator,
    MigrationStatus,
    MigrationStep,
    MigrationSummary,
    RepositoryMigrationResult,
)
from .engine import MigrationEngine

__all__ = [
    'CONTEXT_MAPPING',
    'migrate_protection_contexts',
    'MigrationOrchestrator',
    'MigrationStatus',
    'MigrationStep',
    'MigrationSummary',
    'RepositoryMigrationResult',
    'MigrationEngine',
]
