import pytest
from pydantic import ValidationError
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, SQLModel

from ..core.db import create_engine_for_url
from ..core.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidInputError,
    StorageError,
)
from ..core.money import MAX_MINOR_UNITS
from ..models import MoneyMovementRequest
from ..services import LedgerRepository, LedgerService


@pytest.fixture
def session():
    engine = create_engine_for_url("sqlite://")
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def service(session: Session) -> LedgerService:
    service = LedgerService(session, LedgerRepository(session))
    service.seed_account(1, "John Doe", 10_000)
    return service


def movement(amount: int) -> MoneyMovementRequest:
    return MoneyMovementRequest(amount=amount)


def test_seeded_account_scenario(service: LedgerService) -> None:
    topped_up = service.top_up(1, movement(5_000))
    assert topped_up.name == "John Doe"
    assert topped_up.balance == 15_000

    with pytest.raises(InsufficientFundsError):
        service.withdraw(1, movement(20_000))
    assert service.get_account(1).balance == 15_000

    withdrawn = service.withdraw(1, movement(15_000))
    assert withdrawn.balance == 0

    with pytest.raises(AccountNotFoundError):
        service.get_account(99)


def test_top_up_leaves_other_accounts_untouched(service: LedgerService) -> None:
    service.seed_account(2, "Jane Roe", 700)

    service.top_up(1, movement(250))

    assert service.get_account(1).balance == 10_250
    assert service.get_account(2).balance == 700


def test_top_up_then_withdraw_restores_balance(service: LedgerService) -> None:
    before = service.get_account(1).balance

    service.top_up(1, movement(1_234))
    after = service.withdraw(1, movement(1_234))

    assert after.balance == before


def test_withdraw_entire_balance_is_allowed(service: LedgerService) -> None:
    assert service.withdraw(1, movement(10_000)).balance == 0

    with pytest.raises(InsufficientFundsError):
        service.withdraw(1, movement(1))
    assert service.get_account(1).balance == 0


def test_unknown_account_changes_nothing(service: LedgerService) -> None:
    with pytest.raises(AccountNotFoundError):
        service.top_up(42, movement(100))
    with pytest.raises(AccountNotFoundError):
        service.withdraw(42, movement(100))

    assert service.get_account(1).balance == 10_000
    assert service.repository.get_account(42) is None


def test_non_positive_amounts_are_rejected(service: LedgerService) -> None:
    with pytest.raises(ValidationError):
        MoneyMovementRequest(amount=0)

    with pytest.raises(InvalidInputError):
        service.top_up(1, MoneyMovementRequest.model_construct(amount=-500))
    with pytest.raises(InvalidInputError):
        service.withdraw(1, MoneyMovementRequest.model_construct(amount=-500))

    assert service.get_account(1).balance == 10_000


def test_failed_commit_raises_storage_error_and_rolls_back(
    service: LedgerService, session: Session, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken_commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", broken_commit)

    with pytest.raises(StorageError):
        service.top_up(1, movement(500))

    monkeypatch.undo()
    assert service.get_account(1).balance == 10_000


def test_seed_account_keeps_existing_record(service: LedgerService) -> None:
    service.top_up(1, movement(100))

    seeded = service.seed_account(1, "Someone Else", 0)

    assert seeded.name == "John Doe"
    assert seeded.balance == 10_100


def test_set_balance_on_missing_account(session: Session) -> None:
    repository = LedgerRepository(session)

    with pytest.raises(AccountNotFoundError):
        repository.set_balance(7, 100)


def test_balance_survives_new_session_with_file_database(tmp_path) -> None:
    engine = create_engine_for_url(f"sqlite:///{tmp_path / 'bank.db'}")
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        service = LedgerService(session)
        service.seed_account(1, "John Doe", 10_000)
        service.withdraw(1, movement(2_500))

    with Session(engine) as session:
        assert LedgerService(session).get_account(1).balance == 7_500

    engine.dispose()


def test_top_up_cannot_exceed_storable_balance(session: Session) -> None:
    service = LedgerService(session)
    service.seed_account(1, "John Doe", MAX_MINOR_UNITS - 10)

    with pytest.raises(InvalidInputError):
        service.top_up(1, movement(11))

    assert service.get_account(1).balance == MAX_MINOR_UNITS - 10
    assert service.top_up(1, movement(10)).balance == MAX_MINOR_UNITS


def test_set_balance_out_of_range_is_a_storage_error(service: LedgerService) -> None:
    with pytest.raises(StorageError, match="set_balance"):
        service.repository.set_balance(1, 2**64)
