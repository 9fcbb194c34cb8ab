"""Migration orchestrator for moving repositories to travis-ci.com."""

import time
from datetime import datetime
from enum import Enum
from typing import Callable, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from ..api.exceptions import MigrationTimeoutError, error_chain
from ..api.github import GitHubClient
from ..api.travis import TravisClient
from ..models.travis import Cron, Repository
from .contexts import migrate_protection_contexts


class MigrationStep(str, Enum):
    """Steps of the per-repository protocol, in execution order."""

    NOT_STARTED = 'not_started'
    CRONS_READ = 'crons_read'
    MIGRATION_TRIGGERED = 'migration_triggered'
    POLLING = 'polling'
    MIGRATION_COMPLETE = 'migration_complete'
    CRONS_REPLAYED = 'crons_replayed'
    BRANCH_PROTECTION_RECONCILED = 'branch_protection_reconciled'
    DONE = 'done'


class MigrationStatus(str, Enum):
    """Migration status enumeration."""

    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class RepositoryMigrationResult(BaseModel):
    """Result of migrating one repository."""

    slug: str = Field(..., description='Repository slug')
    status: MigrationStatus = Field(
        default=MigrationStatus.IN_PROGRESS, description='Migration status'
    )
    step: MigrationStep = Field(
        default=MigrationStep.NOT_STARTED, description='Last step reached'
    )
    dry_run: bool = Field(default=False, description='No changes were made')

    started_at: datetime = Field(
        default_factory=datetime.now, description='Migration start time'
    )
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )

    crons_found: int = Field(default=0, description='Cron jobs read from travis-ci.org')
    crons_restored: int = Field(
        default=0, description='Cron jobs created on travis-ci.com'
    )
    poll_attempts: int = Field(default=0, description='Migration status checks')
    branches_updated: List[str] = Field(
        default_factory=list, description='Branches whose status checks changed'
    )

    error_message: Optional[str] = Field(
        default=None, description='Error message if failed'
    )

    @property
    def success(self) -> bool:
        return self.status == MigrationStatus.COMPLETED


class MigrationSummary(BaseModel):
    """Summary of an account migration."""

    account: str = Field(..., description='Migrated account')
    started_at: datetime = Field(
        default_factory=datetime.now, description='Migration start time'
    )
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )
    results: List[RepositoryMigrationResult] = Field(
        default_factory=list, description='Per-repository results'
    )

    def _count(self, status: MigrationStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return self._count(MigrationStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(MigrationStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(MigrationStatus.SKIPPED)


class MigrationOrchestrator:
    """Runs the migration protocol for single repositories and whole accounts.

    For each repository the steps are strictly sequential: read the crons from
    travis-ci.org, trigger the migration on travis-ci.com, wait until it is
    reported as migrated, recreate the crons and finally rewrite the GitHub
    required status checks that still name the travis-ci.org contexts.
    """

    def __init__(
        self,
        travis_org: TravisClient,
        travis_com: TravisClient,
        github: Optional[GitHubClient] = None,
        poll_interval: float = 0.1,
        max_poll_attempts: int = 6000,
        dry_run: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize migration orchestrator.

        Args:
            travis_org: Client for travis-ci.org
            travis_com: Client for travis-ci.com
            github: Client for GitHub, required for migrations
            poll_interval: Seconds between migration status checks
            max_poll_attempts: Status checks before giving up
            dry_run: Only read, log the changes that would be made
            sleep: Blocking sleep used between status checks
        """
        self.travis_org = travis_org
        self.travis_com = travis_com
        self.github = github
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.dry_run = dry_run
        self.sleep = sleep
        self.logger = logger.bind(component='MigrationOrchestrator')

    def list_repositories(self, account: str) -> List[Repository]:
        """List the repositories of an account that can be migrated."""
        return self.travis_com.list_migratable_repositories(account)

    def migrate_repository(self, slug: str) -> RepositoryMigrationResult:
        """Migrate one repository.

        Args:
            slug: Repository slug

        Returns:
            Migration result

        Raises:
            TravisMigrateError: On the first failing step
        """
        result = RepositoryMigrationResult(slug=slug, dry_run=self.dry_run)
        try:
            self._migrate(result)
        except Exception as e:
            self._fail(result, e)
            raise
        return result

    def migrate_account(
        self, account: str, exclude: Iterable[str] = ()
    ) -> MigrationSummary:
        """Migrate every migratable repository of an account.

        A failing repository is recorded and the batch moves on.

        Args:
            account: Owner login
            exclude: Repository slugs to skip

        Returns:
            Migration summary
        """
        excluded = set(exclude)
        summary = MigrationSummary(account=account)

        repositories = self.list_repositories(account)
        if not repositories:
            self.logger.info('no repos to migrate found')
        else:
            self.logger.info(f'{len(repositories)} repo(s) to migrate')

        for repository in repositories:
            result = RepositoryMigrationResult(
                slug=repository.slug, dry_run=self.dry_run
            )
            summary.results.append(result)

            if repository.slug in excluded:
                self.logger.info(f'skipping {repository.slug}')
                result.status = MigrationStatus.SKIPPED
                result.completed_at = datetime.now()
                continue

            try:
                self._migrate(result)
            except Exception as e:
                self._fail(result, e)

        summary.completed_at = datetime.now()
        self.logger.info(
            f'{account}: {summary.successful} migrated, {summary.failed} failed, '
            f'{summary.skipped} skipped'
        )
        return summary

    def wait_for_migration(self, slug: str) -> int:
        """Block until travis-ci.com reports the repository as migrated.

        Returns:
            Number of status checks performed

        Raises:
            MigrationTimeoutError: If ``max_poll_attempts`` checks all fail
        """
        for attempt in range(1, self.max_poll_attempts + 1):
            if self.travis_com.is_migration_complete(slug):
                return attempt
            if attempt < self.max_poll_attempts:
                self.sleep(self.poll_interval)

        raise MigrationTimeoutError(
            f'{slug}: migration not complete after {self.max_poll_attempts} '
            f'status checks',
            slug=slug,
            attempts=self.max_poll_attempts,
        )

    def replay_crons(self, slug: str, crons: List[Cron]) -> int:
        """Recreate cron jobs on travis-ci.com, in the order they were read.

        Returns:
            Number of cron jobs created, 0 in dry run
        """
        restored = 0
        for cron in crons:
            if self.dry_run:
                self.logger.info(
                    f'{slug}: would restore {cron.interval.value} cron '
                    f'on branch `{cron.branch.name}`'
                )
            else:
                self.travis_com.create_cron_job(slug, cron)
                restored += 1
        return restored

    def reconcile_branch_protection(self, slug: str) -> List[str]:
        """Rewrite legacy required status check contexts on protected branches.

        Returns:
            Names of the branches whose contexts changed
        """
        if self.github is None:
            raise ValueError('A GitHub client is required to update branch protection')

        updated = []
        for branch in self.github.list_protected_branches(slug):
            contexts = branch.contexts
            new_contexts = migrate_protection_contexts(contexts)
            if contexts == new_contexts:
                continue

            if self.dry_run:
                self.logger.info(
                    f'{slug}: would update required status checks for branch '
                    f'`{branch.name}`: {contexts} -> {new_contexts}'
                )
            else:
                self.github.set_required_status_checks(slug, branch.name, new_contexts)
                self.logger.info(
                    f'{slug}: updated required status checks for branch '
                    f'`{branch.name}`'
                )
            updated.append(branch.name)
        return updated

    def _migrate(self, result: RepositoryMigrationResult) -> None:
        slug = result.slug

        crons = self.travis_org.list_crons(slug)
        result.crons_found = len(crons)
        result.step = MigrationStep.CRONS_READ
        self.logger.info(f'{slug}: found {len(crons)} cron(s) to migrate')

        if self.dry_run:
            status = self.travis_com.migration_status(slug)
            self.logger.info(
                f'{slug}: would migrate (current status: {status or "none"})'
            )
        else:
            self.logger.info(f'{slug}: migrating...')
            self.travis_com.trigger_migration(slug)
            result.step = MigrationStep.MIGRATION_TRIGGERED

            result.step = MigrationStep.POLLING
            result.poll_attempts = self.wait_for_migration(slug)
            result.step = MigrationStep.MIGRATION_COMPLETE
            self.logger.info(f'{slug}: migration complete')

        result.crons_restored = self.replay_crons(slug, crons)
        result.step = MigrationStep.CRONS_REPLAYED
        if crons and not self.dry_run:
            self.logger.info(f'{slug}: restored {len(crons)} cron(s)')

        result.branches_updated = self.reconcile_branch_protection(slug)
        result.step = MigrationStep.BRANCH_PROTECTION_RECONCILED

        result.step = MigrationStep.DONE
        result.status = MigrationStatus.COMPLETED
        result.completed_at = datetime.now()

    def _fail(self, result: RepositoryMigrationResult, error: Exception) -> None:
        chain = error_chain(error)
        result.status = MigrationStatus.FAILED
        result.error_message = chain[0]
        result.completed_at = datetime.now()

        self.logger.error(
            f'{result.slug}: migration failed after step {result.step.value}: {chain[0]}'
        )
        for cause in chain[1:]:
            self.logger.error(f'caused by: {cause}')
