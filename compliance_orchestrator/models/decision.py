"""
Decision record model for compliance workflow outcomes.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from compliance_orchestrator.models.check_result import DecisionStatus, Finding


class DecisionRecord(BaseModel):
    """Terminal, auditable output of one workflow run."""

    transaction_id: str | None = Field(..., description="Transaction identifier, None if the payload had none")
    status: DecisionStatus
    risk_score: float = Field(..., ge=0, le=1, description="Aggregated or supervisor-overridden risk (0-1)")

    findings: List[Finding] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

    # Timing
    processing_time_ms: float = Field(default=0.0, ge=0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Audit
    checks_used: List[str] = Field(default_factory=list, description="Checks that contributed, plus 'supervisor'")
    errors: List[str] = Field(default_factory=list, description="Raw error messages (error path only)")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "transaction_id": "txn-20251101-0001",
                "status": "escalated",
                "risk_score": 0.45,
                "findings": [
                    {"type": "sanctions_match", "severity": "medium", "message": "Partial name match on watchlist"}
                ],
                "recommendations": ["Request source-of-funds documentation"],
                "processing_time_ms": 182.4,
                "checks_used": ["identity", "sanctions", "supervisor"]
            }
        }
    }

    @property
    def is_error(self) -> bool:
        return bool(self.errors)
