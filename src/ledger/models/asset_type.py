"""Asset type reference model (currencies, instruments)."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger.db.base import Base, TimestampMixin


class AssetType(Base, TimestampMixin):
    """Category of balance a user can hold.

    Reference data managed outside this service. Only the activation flag
    changes once accounts reference an asset type.
    """

    __tablename__ = "asset_type"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100))
    description: Mapped[str] = mapped_column(String(255), default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
