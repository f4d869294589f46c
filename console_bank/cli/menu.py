"""Interactive menu loop bound to a single account.

The loop is an explicit state machine: each handler reads at most one line,
does its work and returns the next ``MenuState``. ``run`` drives it until
``TERMINATED``.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.prompt import Prompt

from ..core.errors import LedgerError
from ..core.money import format_amount, parse_amount
from ..models import AccountResponse, MoneyMovementRequest
from ..services import LedgerService
from .exceptions import report_service_error


logger = logging.getLogger(__name__)


class MenuState(str, Enum):
    MAIN_MENU = "main_menu"
    AWAITING_TOP_UP_AMOUNT = "awaiting_top_up_amount"
    AWAITING_WITHDRAW_AMOUNT = "awaiting_withdraw_amount"
    AWAITING_CONTINUE_CHOICE = "awaiting_continue_choice"
    TERMINATED = "terminated"


MENU_OPTIONS = ("Check Balance", "Top Up", "Withdraw")

_LEADING_INT = re.compile(r"[+-]?[0-9]{1,18}")


def parse_option(text: str) -> Optional[int]:
    """Read the leading integer of a menu answer, so "2abc" and "1.0" still select."""
    match = _LEADING_INT.match(text.strip())
    return int(match.group()) if match else None


class MenuLoop:
    def __init__(
        self,
        service: LedgerService,
        account_id: int,
        *,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        amount_places: int = 2,
    ) -> None:
        self.service = service
        self.account_id = account_id
        self.console = console or Console()
        self.stream = stream
        self.amount_places = amount_places
        self.state = MenuState.MAIN_MENU
        self._handlers: dict[MenuState, Callable[[], MenuState]] = {
            MenuState.MAIN_MENU: self._main_menu,
            MenuState.AWAITING_TOP_UP_AMOUNT: self._top_up,
            MenuState.AWAITING_WITHDRAW_AMOUNT: self._withdraw,
            MenuState.AWAITING_CONTINUE_CHOICE: self._continue_choice,
        }

    def run(self) -> None:
        try:
            while self.state is not MenuState.TERMINATED:
                self.state = self.step()
        except (KeyboardInterrupt, EOFError):
            # Ctrl-C / Ctrl-D at a prompt means "no"
            self.console.print()
            self.state = MenuState.TERMINATED

    def step(self) -> MenuState:
        return self._handlers[self.state]()

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------
    def _ask(self, prompt: str) -> str:
        return Prompt.ask(prompt, console=self.console, stream=self.stream)

    def _say(self, message: str, style: Optional[str] = None) -> None:
        self.console.print(message, style=style, markup=False, highlight=False)

    def _money(self, minor_units: int) -> str:
        return format_amount(minor_units, self.amount_places)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------
    def _main_menu(self) -> MenuState:
        for number, label in enumerate(MENU_OPTIONS, start=1):
            self._say(f"{number}. {label}")
        answer = self._ask("Choose an option")
        option = parse_option(answer)

        if option == 1:
            self._check_balance()
            return MenuState.AWAITING_CONTINUE_CHOICE
        if option == 2:
            return MenuState.AWAITING_TOP_UP_AMOUNT
        if option == 3:
            return MenuState.AWAITING_WITHDRAW_AMOUNT

        logger.info("menu.invalid_option", extra={"option": answer})
        self._say("Invalid option", style="yellow")
        return MenuState.AWAITING_CONTINUE_CHOICE

    def _check_balance(self) -> None:
        try:
            account = self.service.get_account(self.account_id)
        except LedgerError as exc:
            report_service_error(self.console, exc)
            return
        self._say(f"User {account.name} balance: {self._money(account.balance)}")

    def _top_up(self) -> MenuState:
        raw = self._ask("Enter top up amount")
        try:
            amount = parse_amount(raw, self.amount_places)
            account = self.service.top_up(self.account_id, MoneyMovementRequest(amount=amount))
        except LedgerError as exc:
            report_service_error(self.console, exc)
        else:
            self._report(
                f"Successfully topped up {self._money(amount)} for user {account.name}.",
                account,
            )
        return MenuState.AWAITING_CONTINUE_CHOICE

    def _withdraw(self) -> MenuState:
        raw = self._ask("Enter withdrawal amount")
        try:
            amount = parse_amount(raw, self.amount_places)
            account = self.service.withdraw(self.account_id, MoneyMovementRequest(amount=amount))
        except LedgerError as exc:
            report_service_error(self.console, exc)
        else:
            self._report(
                f"Successfully withdrew {self._money(amount)} from user {account.name}.",
                account,
            )
        return MenuState.AWAITING_CONTINUE_CHOICE

    def _report(self, message: str, account: AccountResponse) -> None:
        self._say(f"{message} New balance: {self._money(account.balance)}", style="green")

    def _continue_choice(self) -> MenuState:
        answer = self._ask("Do you want to choose another menu? (yes/no)")
        if answer.strip().lower() == "yes":
            return MenuState.MAIN_MENU
        return MenuState.TERMINATED
