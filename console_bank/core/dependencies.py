from collections.abc import Iterator
from contextlib import contextmanager

from sqlmodel import Session

from ..services import LedgerRepository, LedgerService
from .db import get_engine


@contextmanager
def ledger_service() -> Iterator[LedgerService]:
    """Open the storage handle for one menu session and close it afterwards."""
    with Session(get_engine()) as session:
        repository = LedgerRepository(session)
        yield LedgerService(session, repository)
