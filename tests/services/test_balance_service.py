"""Tests for the balance mutation engine against a real (SQLite) database."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import FakeCache, persist
from ledger.core.exceptions import ForbiddenError, InsufficientBalanceError, ValidationError
from ledger.models import Account, AccountLog, ActionType, AssetType
from ledger.repositories.account import AccountRepository
from ledger.repositories.account_log import AccountLogRepository
from ledger.schemas.account import AccountAction
from ledger.services.balance_service import apply_action, apply_actions
from ledger.services.catalog_service import fetch_all_action_types


async def _balances(db: AsyncSession, user_id: int, asset_type_id: int) -> Account:
    account = await AccountRepository(Account, db).get_by_user_and_asset_type(
        user_id, asset_type_id
    )
    assert account is not None
    return account


async def _log_count(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(AccountLog))
    return result.scalar_one()


@pytest.mark.asyncio
class TestWithdrawScenario:
    """Account starts at 10.000000; "withdraw" decrements available balance."""

    async def test_overdraw_is_rejected_and_balance_unchanged(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        action = AccountAction(
            user_id=1,
            asset_type_id=account.asset_type_id,
            action_type_id=action_types["withdraw"].id,
            amount=Decimal("15"),
        )

        with pytest.raises(InsufficientBalanceError):
            await apply_actions(test_db, [action])

        after = await _balances(test_db, 1, account.asset_type_id)
        assert after.available_balance == Decimal("10.000000")
        assert after.total_expense == Decimal("0")
        assert await _log_count(test_db) == 0

    async def test_withdraw_within_balance_writes_one_log(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        withdraw_id = action_types["withdraw"].id
        action = AccountAction(
            user_id=1,
            asset_type_id=account.asset_type_id,
            action_type_id=withdraw_id,
            amount=Decimal("5"),
            order_number="W" * 32,
            description="ATM withdrawal",
        )

        logs = await apply_actions(test_db, [action])

        after = await _balances(test_db, 1, account.asset_type_id)
        assert after.available_balance == Decimal("5.000000")
        assert after.total_expense == Decimal("5.000000")
        assert after.total_income == Decimal("10.000000")

        history = await AccountLogRepository(AccountLog, test_db).get_by_account_id(account.id)
        assert len(history) == 1
        assert [log.id for log in logs] == [history[0].id]

        entry = history[0]
        assert entry.action_type_id == withdraw_id
        assert entry.amount_available_balance == Decimal("-5.000000")
        assert entry.amount_frozen_balance == Decimal("0")
        assert entry.amount_total_income == Decimal("0")
        assert entry.amount_total_expense == Decimal("5.000000")
        assert entry.available_balance_after == Decimal("5.000000")
        assert entry.total_expense_after == Decimal("5.000000")
        assert entry.order_number == "W" * 32
        assert entry.description == "ATM withdrawal"

    async def test_withdraw_entire_balance_reaches_zero(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        await apply_actions(
            test_db,
            [
                AccountAction(
                    user_id=1,
                    asset_type_id=account.asset_type_id,
                    action_type_id=action_types["withdraw"].id,
                    amount=Decimal("10"),
                )
            ],
        )

        after = await _balances(test_db, 1, account.asset_type_id)
        assert after.available_balance == Decimal("0")


@pytest.mark.asyncio
class TestIncrements:
    """INC rules never trip the guard."""

    async def test_deposit_from_negative_balance_succeeds(
        self, test_db: AsyncSession, asset_type: AssetType, action_types: dict[str, ActionType]
    ) -> None:
        corrected = Account(
            user_id=7,
            asset_type_id=asset_type.id,
            available_balance=Decimal("-50"),
        )
        await persist(test_db, corrected)

        await apply_actions(
            test_db,
            [
                AccountAction(
                    user_id=7,
                    asset_type_id=asset_type.id,
                    action_type_id=action_types["deposit"].id,
                    amount=Decimal("999999999999.999999"),
                )
            ],
        )

        after = await _balances(test_db, 7, asset_type.id)
        assert after.available_balance > 0
        assert after.total_income > 0

    async def test_amount_precision_is_exact(
        self, test_db: AsyncSession, asset_type: AssetType, action_types: dict[str, ActionType]
    ) -> None:
        await persist(test_db, Account(user_id=3, asset_type_id=asset_type.id))

        logs = await apply_actions(
            test_db,
            [
                AccountAction(
                    user_id=3,
                    asset_type_id=asset_type.id,
                    action_type_id=action_types["deposit"].id,
                    amount=Decimal("1.123456"),
                )
            ],
        )

        after = await _balances(test_db, 3, asset_type.id)
        assert after.available_balance == Decimal("1.123456")
        assert after.available_balance % 1 == Decimal("0.123456")
        assert logs[0].available_balance_after == Decimal("1.123456")


@pytest.mark.asyncio
class TestFrozenBalance:
    """Freeze/unfreeze move value between available and frozen balances."""

    async def test_freeze_then_unfreeze(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        asset_type_id = account.asset_type_id
        await apply_actions(
            test_db,
            [
                AccountAction(
                    user_id=1,
                    asset_type_id=asset_type_id,
                    action_type_id=action_types["freeze"].id,
                    amount=Decimal("4"),
                ),
                AccountAction(
                    user_id=1,
                    asset_type_id=asset_type_id,
                    action_type_id=action_types["unfreeze"].id,
                    amount=Decimal("1.5"),
                ),
            ],
        )

        after = await _balances(test_db, 1, asset_type_id)
        assert after.available_balance == Decimal("7.5")
        assert after.frozen_balance == Decimal("2.5")

    async def test_unfreeze_more_than_frozen_is_rejected(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        asset_type_id = account.asset_type_id
        freeze_id = action_types["freeze"].id
        unfreeze_id = action_types["unfreeze"].id

        with pytest.raises(InsufficientBalanceError):
            await apply_actions(
                test_db,
                [
                    AccountAction(
                        user_id=1,
                        asset_type_id=asset_type_id,
                        action_type_id=freeze_id,
                        amount=Decimal("4"),
                    ),
                    AccountAction(
                        user_id=1,
                        asset_type_id=asset_type_id,
                        action_type_id=unfreeze_id,
                        amount=Decimal("5"),
                    ),
                ],
            )

        # The successful freeze is rolled back with the failing unfreeze
        after = await _balances(test_db, 1, asset_type_id)
        assert after.available_balance == Decimal("10")
        assert after.frozen_balance == Decimal("0")
        assert await _log_count(test_db) == 0


@pytest.mark.asyncio
class TestBatchAtomicity:
    """The first failing request aborts the whole batch."""

    async def test_invalid_action_type_mid_batch_rolls_back_everything(
        self,
        test_db: AsyncSession,
        asset_type: AssetType,
        action_types: dict[str, ActionType],
    ) -> None:
        await persist(
            test_db,
            Account(user_id=1, asset_type_id=asset_type.id, available_balance=Decimal("10")),
            Account(user_id=2, asset_type_id=asset_type.id, available_balance=Decimal("20")),
        )
        deposit_id = action_types["deposit"].id

        batch = [
            AccountAction(
                user_id=1, asset_type_id=asset_type.id, action_type_id=deposit_id, amount="1"
            ),
            AccountAction(
                user_id=2, asset_type_id=asset_type.id, action_type_id=deposit_id, amount="2"
            ),
            AccountAction(user_id=1, asset_type_id=asset_type.id, action_type_id=999, amount="3"),
            AccountAction(
                user_id=2, asset_type_id=asset_type.id, action_type_id=deposit_id, amount="4"
            ),
        ]

        with pytest.raises(ValidationError) as exc_info:
            await apply_actions(test_db, batch)

        assert "action_type_id" in exc_info.value.detail
        assert (await _balances(test_db, 1, asset_type.id)).available_balance == Decimal("10")
        assert (await _balances(test_db, 2, asset_type.id)).available_balance == Decimal("20")
        assert await _log_count(test_db) == 0

    async def test_batch_applies_in_order(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        """A withdraw that only fits after an earlier deposit in the same batch succeeds."""
        asset_type_id = account.asset_type_id
        logs = await apply_actions(
            test_db,
            [
                AccountAction(
                    user_id=1,
                    asset_type_id=asset_type_id,
                    action_type_id=action_types["deposit"].id,
                    amount="10",
                ),
                AccountAction(
                    user_id=1,
                    asset_type_id=asset_type_id,
                    action_type_id=action_types["withdraw"].id,
                    amount="15",
                ),
            ],
        )

        assert [log.available_balance_after for log in logs] == [
            Decimal("20"),
            Decimal("5"),
        ]
        after = await _balances(test_db, 1, asset_type_id)
        assert after.available_balance == logs[-1].available_balance_after

    async def test_empty_batch_rejected(self, test_db: AsyncSession) -> None:
        with pytest.raises(ValidationError):
            await apply_actions(test_db, [])


@pytest.mark.asyncio
class TestPreconditions:
    """Catalog and account checks run before any balance changes."""

    async def test_inactive_account_forbidden(
        self,
        test_db: AsyncSession,
        inactive_account: Account,
        action_types: dict[str, ActionType],
    ) -> None:
        with pytest.raises(ForbiddenError):
            await apply_actions(
                test_db,
                [
                    AccountAction(
                        user_id=2,
                        asset_type_id=inactive_account.asset_type_id,
                        action_type_id=action_types["deposit"].id,
                        amount="1",
                    )
                ],
            )

    async def test_missing_account_forbidden(
        self, test_db: AsyncSession, asset_type: AssetType, action_types: dict[str, ActionType]
    ) -> None:
        with pytest.raises(ForbiddenError):
            await apply_actions(
                test_db,
                [
                    AccountAction(
                        user_id=42,
                        asset_type_id=asset_type.id,
                        action_type_id=action_types["deposit"].id,
                        amount="1",
                    )
                ],
            )

    async def test_inactive_asset_type_rejected(
        self,
        test_db: AsyncSession,
        inactive_asset_type: AssetType,
        action_types: dict[str, ActionType],
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await apply_action(
                test_db,
                AccountAction(
                    user_id=1,
                    asset_type_id=inactive_asset_type.id,
                    action_type_id=action_types["deposit"].id,
                    amount="1",
                ),
            )

        assert "asset_type_id" in exc_info.value.detail

    async def test_inactive_action_type_rejected(
        self, test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await apply_action(
                test_db,
                AccountAction(
                    user_id=1,
                    asset_type_id=account.asset_type_id,
                    action_type_id=action_types["retired"].id,
                    amount="1",
                ),
            )

        assert "action_type_id" in exc_info.value.detail

    async def test_deactivation_bypasses_catalog_cache(
        self,
        test_db: AsyncSession,
        account: Account,
        action_types: dict[str, ActionType],
        fake_cache: FakeCache,
    ) -> None:
        """A deactivated action type is refused even while the cached catalog still lists it."""
        withdraw_id = action_types["withdraw"].id
        cached = await fetch_all_action_types(test_db, fake_cache)
        assert withdraw_id in {item.id for item in cached}

        withdraw = await test_db.get(ActionType, withdraw_id)
        withdraw.is_active = False
        await test_db.commit()

        still_cached = await fetch_all_action_types(test_db, fake_cache)
        assert withdraw_id in {item.id for item in still_cached}

        with pytest.raises(ValidationError):
            await apply_actions(
                test_db,
                [
                    AccountAction(
                        user_id=1,
                        asset_type_id=account.asset_type_id,
                        action_type_id=withdraw_id,
                        amount="1",
                    )
                ],
            )

        after = await _balances(test_db, 1, account.asset_type_id)
        assert after.available_balance == Decimal("10")


@pytest.mark.asyncio
async def test_log_matches_account_after_each_mutation(
    test_db: AsyncSession, account: Account, action_types: dict[str, ActionType]
) -> None:
    """Every log row's post-balances equal the account right after that mutation."""
    asset_type_id = account.asset_type_id
    for name, amount in [("deposit", "2.5"), ("freeze", "3"), ("withdraw", "0.000001")]:
        logs = await apply_actions(
            test_db,
            [
                AccountAction(
                    user_id=1,
                    asset_type_id=asset_type_id,
                    action_type_id=action_types[name].id,
                    amount=amount,
                )
            ],
        )
        current = await _balances(test_db, 1, asset_type_id)
        log = logs[0]
        assert log.available_balance_after == current.available_balance
        assert log.frozen_balance_after == current.frozen_balance
        assert log.total_income_after == current.total_income
        assert log.total_expense_after == current.total_expense

    history = await AccountLogRepository(AccountLog, test_db).get_by_account_id(account.id)
    assert len(history) == 3
    assert sum(log.amount_available_balance for log in history) == Decimal("-0.500001")
