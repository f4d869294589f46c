from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from rich.console import Console

from .cli import MenuLoop
from .cli.exceptions import report_service_error
from .core.config import Settings, get_settings
from .core.db import get_engine, init_db
from .core.dependencies import ledger_service
from .core.errors import LedgerError


logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        filename=settings.log_file,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def run(
    settings: Settings,
    *,
    console: Optional[Console] = None,
    stream: Optional[TextIO] = None,
) -> int:
    console = console or Console()
    init_db()
    try:
        with ledger_service() as service:
            try:
                service.seed_account(
                    settings.account_id, settings.account_name, settings.opening_balance
                )
            except LedgerError as exc:
                logger.error("account.seed_failed", extra={"error": str(exc)})
                report_service_error(console, exc)
                return 1

            console.rule(settings.app_name)
            console.print("Welcome to the banking app!")
            MenuLoop(
                service,
                settings.account_id,
                console=console,
                stream=stream,
                amount_places=settings.amount_places,
            ).run()
    finally:
        get_engine().dispose()

    console.print("Goodbye!")
    return 0


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    sys.exit(run(settings))


if __name__ == "__main__":
    main()
