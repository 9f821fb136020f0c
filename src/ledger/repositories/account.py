"""Account repository for account-specific database operations."""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import exists, select, update

from ledger.models.account import Account
from ledger.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for Account model.

    Accounts are addressed by their natural key (user_id, asset_type_id),
    which the table enforces as unique.

    Example:
        >>> repo = AccountRepository(Account, db)
        >>> account = await repo.get_by_user_and_asset_type(user_id=1, asset_type_id=1)
    """

    async def exists(self, user_id: int, asset_type_id: int) -> bool:
        """Check whether the user already has an account in this asset type."""
        result = await self.db.execute(
            select(
                exists().where(
                    Account.user_id == user_id,
                    Account.asset_type_id == asset_type_id,
                )
            )
        )
        return bool(result.scalar())

    async def is_active(self, user_id: int, asset_type_id: int) -> bool:
        """Check that the account exists and is active.

        A missing account is reported as inactive.
        """
        result = await self.db.execute(
            select(
                exists().where(
                    Account.user_id == user_id,
                    Account.asset_type_id == asset_type_id,
                    Account.is_active.is_(True),
                )
            )
        )
        return bool(result.scalar())

    async def get_by_user_and_asset_type(
        self,
        user_id: int,
        asset_type_id: int,
    ) -> Account | None:
        """Get the user's account in one asset type.

        Args:
            user_id: Owner of the account
            asset_type_id: Asset type the account holds

        Returns:
            Account object if found, None otherwise
        """
        result = await self.db.execute(
            select(Account)
            .where(Account.user_id == user_id, Account.asset_type_id == asset_type_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_user_and_asset_types(
        self,
        user_id: int,
        asset_type_ids: Sequence[int],
    ) -> list[Account]:
        """Get the user's accounts across several asset types.

        Args:
            user_id: Owner of the accounts
            asset_type_ids: Asset types to include

        Returns:
            Matching accounts ordered by asset type id (possibly empty)
        """
        if not asset_type_ids:
            return []
        result = await self.db.execute(
            select(Account)
            .where(Account.user_id == user_id, Account.asset_type_id.in_(asset_type_ids))
            .order_by(Account.asset_type_id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def create_account(self, *, user_id: int, asset_type_id: int) -> Account:
        """Insert a new active account with all balances at zero.

        Returns:
            The created account (flushed, not yet committed)

        Raises:
            sqlalchemy.exc.IntegrityError: If the (user_id, asset_type_id)
                pair already exists
        """
        return await self.create(
            obj_in={
                "user_id": user_id,
                "asset_type_id": asset_type_id,
                "available_balance": Decimal("0"),
                "frozen_balance": Decimal("0"),
                "total_income": Decimal("0"),
                "total_expense": Decimal("0"),
                "is_active": True,
            }
        )

    async def apply_deltas(
        self,
        user_id: int,
        asset_type_id: int,
        *,
        available_balance: Decimal,
        frozen_balance: Decimal,
        total_income: Decimal,
        total_expense: Decimal,
    ) -> Account | None:
        """Add signed deltas to all four balances in one UPDATE.

        The arithmetic runs in the database (``col = col + delta``), so the
        row lock taken by the UPDATE serializes concurrent batches touching
        the same account.

        Returns:
            The account as it stands after the update, or None when no
            account matched

        Note:
            Caller must commit the transaction.
        """
        result = await self.db.execute(
            update(Account)
            .where(Account.user_id == user_id, Account.asset_type_id == asset_type_id)
            .values(
                available_balance=Account.available_balance + available_balance,
                frozen_balance=Account.frozen_balance + frozen_balance,
                total_income=Account.total_income + total_income,
                total_expense=Account.total_expense + total_expense,
            )
            .returning(Account.id)
            .execution_options(synchronize_session=False)
        )
        account_id = result.scalar_one_or_none()
        if account_id is None:
            return None
        return await self.get(account_id, refresh=True)
