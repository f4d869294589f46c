from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..core.errors import AccountNotFoundError, StorageError
from ..models import AccountModel


logger = logging.getLogger(__name__)


class LedgerRepository:
    """Thin data access layer around the SQLModel session.

    Every SQLAlchemy failure is re-raised as ``StorageError``; committing is
    left to the caller so a read-modify-write stays a single transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add_account(self, account_id: int, name: str, balance: int) -> AccountModel:
        account = AccountModel(id=account_id, name=name, balance=balance)
        try:
            self.session.add(account)
            self.session.flush()
            self.session.refresh(account)
        except (SQLAlchemyError, OverflowError) as exc:
            raise self._storage_error("add_account", account_id, exc) from exc
        return account

    def get_account(self, account_id: int) -> Optional[AccountModel]:
        try:
            return self.session.get(AccountModel, account_id)
        except SQLAlchemyError as exc:
            raise self._storage_error("get_account", account_id, exc) from exc

    def set_balance(self, account_id: int, balance: int) -> AccountModel:
        account = self.get_account(account_id)
        if account is None:
            raise AccountNotFoundError("User not found")
        try:
            account.balance = balance
            self.session.add(account)
            self.session.flush()
        except (SQLAlchemyError, OverflowError) as exc:
            raise self._storage_error("set_balance", account_id, exc) from exc
        return account

    def _storage_error(
        self, operation: str, account_id: int, exc: Exception
    ) -> StorageError:
        logger.error(
            "storage.error",
            extra={"operation": operation, "account_id": account_id, "error": str(exc)},
        )
        return StorageError(f"Storage failure during {operation}")
