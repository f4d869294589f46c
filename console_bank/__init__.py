"""Interactive console banking demo backed by an in-memory SQLModel ledger."""

__version__ = "0.1.0"
