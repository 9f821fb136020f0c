"""Balance mutation engine.

Turns "action type + amount" into exact changes on an account's four
balance fields and records each change in the audit trail.

Per request, inside the batch transaction:

1. catalog validation (shape was validated when the ``AccountAction`` was built)
2. the account must be active, else ``ForbiddenError``
3. resolve the action type's four ``Change`` rules
4. compute the signed deltas
5. add them to the account in one UPDATE and read the row back
6. a DEC rule on available or frozen balance must not leave it negative,
   else ``InsufficientBalanceError``; INC rules may (administrative
   corrections rely on this)
7. append one ``AccountLog`` row with the deltas and resulting balances

A batch is all-or-nothing: the first failure rolls back every earlier
request in it.
"""

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from decimal import ROUND_DOWN, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.constants import BALANCE_QUANTUM, BalanceConstants
from ledger.core.exceptions import (
    ForbiddenError,
    InsufficientBalanceError,
    ValidationError,
)
from ledger.db.session import transactional
from ledger.models.account import Account
from ledger.models.account_log import AccountLog
from ledger.models.action_type import ActionType, Change
from ledger.repositories.account import AccountRepository
from ledger.repositories.account_log import AccountLogRepository
from ledger.repositories.action_type import ActionTypeRepository
from ledger.schemas.account import AccountAction
from ledger.services.validation import validate_action

logger = logging.getLogger(__name__)


def calculate_change(change: Change, amount: Decimal) -> Decimal:
    """Signed delta for one balance field.

    The magnitude is ``|amount|`` truncated to six fractional digits.

    Args:
        change: Direction rule of the field
        amount: Requested amount

    Returns:
        ``+magnitude`` for INC, ``-magnitude`` for DEC, zero for NONE

    Example:
        >>> calculate_change(Change.DEC, Decimal("5"))
        Decimal('-5.000000')
    """
    magnitude = abs(amount).quantize(BALANCE_QUANTUM, rounding=ROUND_DOWN)
    if change is Change.INC:
        return magnitude
    if change is Change.DEC:
        return -magnitude
    return BalanceConstants.ZERO


@dataclass(frozen=True)
class BalanceDeltas:
    """Signed deltas for the four balance fields of one mutation."""

    available_balance: Decimal
    frozen_balance: Decimal
    total_income: Decimal
    total_expense: Decimal

    @classmethod
    def from_action_type(cls, action_type: ActionType, amount: Decimal) -> "BalanceDeltas":
        """Apply each of the action type's rules to ``amount``."""
        return cls(
            available_balance=calculate_change(action_type.available_balance_change, amount),
            frozen_balance=calculate_change(action_type.frozen_balance_change, amount),
            total_income=calculate_change(action_type.total_income_change, amount),
            total_expense=calculate_change(action_type.total_expense_change, amount),
        )

    def as_dict(self) -> dict[str, Decimal]:
        return asdict(self)


def check_sufficient_balance(action_type: ActionType, account: Account) -> None:
    """Reject a mutation whose DEC rule left available or frozen balance negative.

    Raises:
        InsufficientBalanceError: If a decremented balance is now below zero
    """
    if (
        action_type.available_balance_change is Change.DEC
        and account.available_balance < 0
    ) or (
        action_type.frozen_balance_change is Change.DEC
        and account.frozen_balance < 0
    ):
        raise InsufficientBalanceError(
            f"Insufficient balance for user {account.user_id} "
            f"in asset type {account.asset_type_id}"
        )


async def apply_action(db: AsyncSession, action: AccountAction) -> AccountLog:
    """Apply one mutation inside the caller's transaction.

    Does not commit. Any exception leaves the caller responsible for the
    rollback, which ``apply_actions`` does for the whole batch.

    Args:
        db: Database session with an open transaction
        action: Shape-validated mutation request

    Returns:
        The audit entry written for this mutation (flushed, not committed)

    Raises:
        ValidationError: Unknown or inactive asset type / action type
        ForbiddenError: Account missing or deactivated
        InsufficientBalanceError: A DEC rule drove a balance negative
    """
    await validate_action(db, action)

    account_repo = AccountRepository(Account, db)
    if not await account_repo.is_active(action.user_id, action.asset_type_id):
        raise ForbiddenError(
            f"Account for user {action.user_id} in asset type {action.asset_type_id} "
            "is not active"
        )

    action_type = await ActionTypeRepository(ActionType, db).get_active(action.action_type_id)
    if action_type is None:
        raise ValidationError(f"Invalid action_type_id: {action.action_type_id}")

    deltas = BalanceDeltas.from_action_type(action_type, action.amount)
    account = await account_repo.apply_deltas(
        action.user_id, action.asset_type_id, **deltas.as_dict()
    )
    if account is None:
        raise ForbiddenError(
            f"Account for user {action.user_id} in asset type {action.asset_type_id} "
            "is not active"
        )

    check_sufficient_balance(action_type, account)

    log = await AccountLogRepository(AccountLog, db).create(
        obj_in={
            "account_id": account.id,
            "action_type_id": action_type.id,
            "amount_available_balance": deltas.available_balance,
            "amount_frozen_balance": deltas.frozen_balance,
            "amount_total_income": deltas.total_income,
            "amount_total_expense": deltas.total_expense,
            "available_balance_after": account.available_balance,
            "frozen_balance_after": account.frozen_balance,
            "total_income_after": account.total_income,
            "total_expense_after": account.total_expense,
            "order_number": action.order_number or "",
            "description": action.description or "",
        }
    )
    logger.debug(
        f"Applied action type {action_type.id} ({action_type.name}) amount {action.amount} "
        f"to account {account.id}"
    )
    return log


async def apply_actions(
    db: AsyncSession,
    actions: Sequence[AccountAction],
) -> list[AccountLog]:
    """Apply a batch of mutations atomically, in order.

    Args:
        db: Database session
        actions: Mutation requests, applied in the given order

    Returns:
        The audit entries written, one per action, in batch order

    Raises:
        ValidationError: Empty batch, or any request failing catalog checks
        ForbiddenError: Any request targeting an inactive account
        InsufficientBalanceError: Any request overdrawing a decremented balance

    Note:
        Nothing is retried. On any exception the whole batch is rolled back
        and the exception propagates.
    """
    if not actions:
        raise ValidationError("At least one account action is required")

    logs: list[AccountLog] = []
    async with transactional(db):
        for action in actions:
            logs.append(await apply_action(db, action))

    logger.info(f"Committed balance batch of {len(logs)} action(s)")
    return logs
