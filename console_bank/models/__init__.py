from .db import Account as AccountModel
from .schemas import AccountResponse, MoneyMovementRequest

__all__ = [
    "AccountResponse",
    "MoneyMovementRequest",
    "AccountModel",
]
