"""Action type reference model and the directional change rules it carries."""

import enum

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.db.base import Base, TimestampMixin


class Change(str, enum.Enum):
    """Direction in which an action moves one balance field."""

    INC = "INC"
    DEC = "DEC"
    NONE = "NONE"


def change_column() -> Mapped[Change]:
    """Balance rule column, NONE unless set."""
    return mapped_column(Enum(Change, name="balance_change"), default=Change.NONE)


class ActionType(Base, TimestampMixin):
    """Named business operation with a fixed effect on the four balance fields.

    Applying an action type with an amount adds ``+amount`` to every field
    whose rule is INC, ``-amount`` to every field whose rule is DEC and
    leaves NONE fields untouched.
    """

    __tablename__ = "action_type"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(255), default="")
    available_balance_change: Mapped[Change] = change_column()
    frozen_balance_change: Mapped[Change] = change_column()
    total_income_change: Mapped[Change] = change_column()
    total_expense_change: Mapped[Change] = change_column()
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
