from __future__ import annotations

from sqlmodel import Field, SQLModel


class Account(SQLModel, table=True):
    id: int = Field(primary_key=True)
    name: str
    balance: int = Field(default=0, ge=0)
