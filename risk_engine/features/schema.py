from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Geolocation(BaseModel):
    """Latitude/longitude pair"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class TransactionFeatures(BaseModel):
    """
    Feature record for a single transaction.

    Optional fields stay None when the caller does not supply them; a
    present value, including 0, is always taken at face value by the scorers.
    Values are not coerced: a string amount or flag is rejected.
    Instances are immutable, enrichment produces a copy.
    """
    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    # Identifiers
    transaction_id: str = Field(..., min_length=1, description="Unique transaction ID")
    user_id: Optional[str] = None

    # Numeric
    amount: float = Field(..., ge=0, description="Transaction amount")
    account_balance: Optional[float] = Field(None, ge=0)
    user_age: Optional[int] = Field(None, ge=0)
    velocity_1h: Optional[int] = Field(None, ge=0, description="Transactions in the last hour")
    velocity_24h: Optional[int] = Field(None, ge=0, description="Transactions in the last 24 hours")
    time_since_last_transaction: Optional[float] = Field(None, ge=0, description="Seconds since previous transaction")

    # Categorical
    merchant_name: str
    merchant_category: Optional[str] = None
    location: str
    device_id: Optional[str] = None
    customer_ip: Optional[str] = None
    transaction_time: Optional[str] = None

    # Flags
    card_present: bool

    geolocation: Optional[Geolocation] = None
    previous_transactions: Optional[List[Dict[str, Any]]] = None

    @field_validator("transaction_id")
    @classmethod
    def transaction_id_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("transaction_id must not be blank")
        return v

    @property
    def history_length(self) -> int:
        return len(self.previous_transactions) if self.previous_transactions else 0
