from pydantic import BaseModel, ConfigDict, Field

from ..core.money import MAX_MINOR_UNITS


class AccountResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    balance: int = Field(..., ge=0, description="Balance in minor units (e.g. cents)")


class MoneyMovementRequest(BaseModel):
    amount: int = Field(
        ...,
        ge=1,
        le=MAX_MINOR_UNITS,
        description="Amount in minor units (must be >= 1)",
    )
