"""
Check result models produced by specialist checkers and the supervisor.
"""
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field


class CheckKind(str, Enum):
    """Compliance dimensions evaluated by specialist checkers."""
    IDENTITY = "identity"
    SANCTIONS = "sanctions"
    JURISDICTION = "jurisdiction"


# Canonical dispatch order; report findings follow it.
CHECK_ORDER: tuple[CheckKind, ...] = (
    CheckKind.IDENTITY,
    CheckKind.SANCTIONS,
    CheckKind.JURISDICTION,
)


class FindingSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class DecisionStatus(str, Enum):
    """Final outcome of a compliance workflow run."""
    APPROVED = "approved"
    ESCALATED = "escalated"


class Finding(BaseModel):
    """A single classified observation reported by a check."""

    type: str = Field(..., min_length=1, description="Finding classification")
    severity: FindingSeverity = FindingSeverity.LOW
    message: str = Field(..., description="Free-text description")
    details: Any = None

    model_config = {"frozen": True}


class CheckResult(BaseModel):
    """Output of one specialist checker; never mutated after creation."""

    kind: CheckKind
    risk_score: float | None = Field(
        None, ge=0, le=1, description="Normalised risk score, None if the check could not score"
    )
    findings: List[Finding] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class SupervisorDecision(BaseModel):
    """Arbitration outcome for mid-band risk; its score overrides the aggregate."""

    risk_score: float = Field(..., ge=0, le=1)
    status: DecisionStatus
    findings: List[Finding] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    reasoning: str | None = None

    model_config = {"frozen": True}
