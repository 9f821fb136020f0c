"""Audit trail of applied balance mutations."""

from decimal import Decimal

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger.db.base import Base, CreatedAtMixin
from ledger.models.account import balance_column


class AccountLog(Base, CreatedAtMixin):
    """Immutable record of one applied mutation.

    Stores the signed delta applied to each balance field and the balances
    right after the mutation, so an account's history can be rebuilt from
    its log rows alone. Rows are only ever inserted.
    """

    __tablename__ = "account_log"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    account_id: Mapped[int] = mapped_column(ForeignKey("account.id"), index=True)
    action_type_id: Mapped[int] = mapped_column(ForeignKey("action_type.id"))

    # Signed deltas
    amount_available_balance: Mapped[Decimal] = balance_column()
    amount_frozen_balance: Mapped[Decimal] = balance_column()
    amount_total_income: Mapped[Decimal] = balance_column()
    amount_total_expense: Mapped[Decimal] = balance_column()

    # Post-mutation balances
    available_balance_after: Mapped[Decimal] = balance_column()
    frozen_balance_after: Mapped[Decimal] = balance_column()
    total_income_after: Mapped[Decimal] = balance_column()
    total_expense_after: Mapped[Decimal] = balance_column()

    order_number: Mapped[str] = mapped_column(String(255), default="", index=True)
    description: Mapped[str] = mapped_column(String(255), default="")

    # Relationships
    account: Mapped["Account"] = relationship("Account", back_populates="logs")
