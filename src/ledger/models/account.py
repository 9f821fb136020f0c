"""Account model: one balance row per (user, asset type)."""

from decimal import Decimal

from sqlalchemy import Boolean, ForeignKey, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger.core.constants import BALANCE_PRECISION, BALANCE_SCALE
from ledger.db.base import Base, TimestampMixin


def balance_column() -> Mapped[Decimal]:
    """NUMERIC(18, 6) column starting at zero."""
    return mapped_column(
        Numeric(BALANCE_PRECISION, BALANCE_SCALE),
        default=Decimal("0"),
        server_default="0",
    )


class Account(Base, TimestampMixin):
    """Balances held by one user in one asset type.

    Accounts are never deleted, only deactivated, and their balances change
    exclusively through the balance service.
    """

    __tablename__ = "account"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(index=True)
    asset_type_id: Mapped[int] = mapped_column(ForeignKey("asset_type.id"), index=True)
    available_balance: Mapped[Decimal] = balance_column()
    frozen_balance: Mapped[Decimal] = balance_column()
    total_income: Mapped[Decimal] = balance_column()
    total_expense: Mapped[Decimal] = balance_column()
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Relationships
    asset_type: Mapped["AssetType"] = relationship("AssetType")
    logs: Mapped[list["AccountLog"]] = relationship(
        "AccountLog", back_populates="account", order_by="AccountLog.id"
    )

    __table_args__ = (
        UniqueConstraint("user_id", "asset_type_id", name="uq_account_user_asset_type"),
    )
