"""
Transaction model submitted to the compliance workflow.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Closed set of supported transaction types."""
    TRANSFER = "transfer"
    TRADE = "trade"
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    SECURITY = "security"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Transaction(BaseModel):
    """Immutable transaction routed through the compliance checks."""

    # Identifiers
    id: str = Field(..., min_length=1, description="Unique transaction identifier")
    type: TransactionType = Field(..., description="Transaction type")

    # Transaction details
    amount: float = Field(default=0.0, ge=0, description="Amount in the transaction's currency unit")
    user_id: str | None = Field(None, description="User initiating the transaction")
    asset_type: str | None = Field(None, description="Asset-type tag (e.g. 'security')")
    from_address: str | None = Field(None, description="Source account or wallet")
    to_address: str | None = Field(None, description="Destination account or wallet")
    symbol: str | None = Field(None, description="Instrument symbol for trades")
    quantity: float | None = Field(None, ge=0, description="Instrument quantity for trades")

    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "frozen": True,
        # Numeric ids are stored as strings
        "coerce_numbers_to_str": True,
        "json_schema_extra": {
            "example": {
                "id": "txn-20251101-0001",
                "type": "transfer",
                "amount": 60000.0,
                "user_id": "user-42",
                "from_address": "SG123456789",
                "to_address": "US987654321",
                "timestamp": "2025-11-01T10:30:00Z"
            }
        }
    }
