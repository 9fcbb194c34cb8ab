"""Travis CI entity models."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

MIGRATED = 'migrated'


class Repository(BaseModel):
    """Travis CI repository model."""

    slug: str = Field(..., description='Repository slug (owner/name)')
    migration_status: Optional[str] = Field(
        default=None, description='Server-side migration status'
    )

    @property
    def is_migrated(self) -> bool:
        """Whether travis-ci.com reports the migration as finished."""
        return self.migration_status == MIGRATED


class CronInterval(str, Enum):
    """How often a cron job runs."""

    DAILY = 'daily'
    WEEKLY = 'weekly'
    MONTHLY = 'monthly'


class Branch(BaseModel):
    """Branch a cron job is attached to."""

    name: str = Field(..., description='Branch name')


class Cron(BaseModel):
    """Travis CI cron job model."""

    branch: Branch = Field(..., description='Branch the cron job builds')
    interval: CronInterval = Field(..., description='Cron interval')
    dont_run_if_recent_build_exists: bool = Field(
        default=False, description='Skip the run if a recent build exists'
    )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the create endpoint, which takes the branch from the URL."""
        return self.model_dump(mode='json', exclude={'branch'})
