from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from ..core.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidInputError,
    StorageError,
)
from ..core.money import MAX_MINOR_UNITS
from ..models import AccountModel, AccountResponse, MoneyMovementRequest
from .repository import LedgerRepository


logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(
        self,
        session: Session,
        repository: Optional[LedgerRepository] = None,
    ) -> None:
        self.session = session
        self.repository = repository or LedgerRepository(session)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Hold the writer lock for one fetch/validate/write/commit unit.

        Any failure rolls the session back before the error propagates, so
        a rejected or failed operation leaves nothing pending.
        """
        with self._lock:
            try:
                yield
                self.session.commit()
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error("storage.error", extra={"operation": "commit", "error": str(exc)})
                raise StorageError("Storage failure during commit") from exc
            except BaseException:
                self.session.rollback()
                raise

    def _get_account(self, account_id: int) -> AccountModel:
        account = self.repository.get_account(account_id)
        if account is None:
            raise AccountNotFoundError("User not found")
        return account

    def _check_amount(self, payload: MoneyMovementRequest) -> int:
        # model_construct() skips validation, so re-check here
        if payload.amount <= 0:
            raise InvalidInputError("Amount must be greater than zero")
        return payload.amount

    def _account_to_response(self, account: AccountModel) -> AccountResponse:
        return AccountResponse(
            id=account.id,
            name=account.name,
            balance=account.balance,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def seed_account(self, account_id: int, name: str, balance: int) -> AccountResponse:
        with self._transaction():
            account = self.repository.get_account(account_id)
            if account is None:
                account = self.repository.add_account(account_id, name, balance)
                logger.info(
                    "account.seeded",
                    extra={"account_id": account_id, "owner_name": name, "balance": balance},
                )
            response = self._account_to_response(account)
        return response

    def get_account(self, account_id: int) -> AccountResponse:
        account = self._get_account(account_id)
        return self._account_to_response(account)

    def top_up(self, account_id: int, payload: MoneyMovementRequest) -> AccountResponse:
        amount = self._check_amount(payload)
        with self._transaction():
            account = self._get_account(account_id)
            new_balance = account.balance + amount
            if new_balance > MAX_MINOR_UNITS:
                raise InvalidInputError("Top up would exceed the maximum balance")
            account = self.repository.set_balance(account_id, new_balance)
            response = self._account_to_response(account)

        logger.info(
            "account.top_up",
            extra={"account_id": account_id, "amount": amount, "balance": response.balance},
        )
        return response

    def withdraw(self, account_id: int, payload: MoneyMovementRequest) -> AccountResponse:
        amount = self._check_amount(payload)
        with self._transaction():
            account = self._get_account(account_id)
            if account.balance < amount:
                logger.warning(
                    "account.withdraw.rejected",
                    extra={"account_id": account_id, "amount": amount, "balance": account.balance},
                )
                raise InsufficientFundsError("Insufficient balance")

            new_balance = account.balance - amount
            account = self.repository.set_balance(account_id, new_balance)
            response = self._account_to_response(account)

        logger.info(
            "account.withdraw",
            extra={"account_id": account_id, "amount": amount, "balance": response.balance},
        )
        return response
