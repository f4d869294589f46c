from __future__ import annotations

from rich.console import Console

from ..core.errors import LedgerError


def report_service_error(console: Console, exc: LedgerError) -> None:
    """Print a service failure the way every menu action reports one."""
    console.print(f"Error: {exc}", style="red", markup=False, highlight=False)
