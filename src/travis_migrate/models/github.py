"""GitHub branch protection models."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RequiredStatusChecks(BaseModel):
    """Required status checks of a protected branch."""

    contexts: List[str] = Field(
        default_factory=list, description='Status check contexts'
    )


class BranchProtection(BaseModel):
    """Protection settings of a branch."""

    enabled: Optional[bool] = Field(default=None, description='Protection enabled')
    required_status_checks: Optional[RequiredStatusChecks] = Field(
        default=None, description='Required status checks'
    )


class ProtectedBranch(BaseModel):
    """GitHub protected branch model."""

    name: str = Field(..., description='Branch name')
    protection: Optional[BranchProtection] = Field(
        default=None, description='Branch protection'
    )

    @property
    def contexts(self) -> List[str]:
        """Required status check contexts, in the order GitHub returns them."""
        if self.protection is None or self.protection.required_status_checks is None:
            return []
        return list(self.protection.required_status_checks.contexts)
