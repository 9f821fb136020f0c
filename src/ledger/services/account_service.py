"""Account service: opening accounts and reading balances."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.exceptions import ConflictError, NotFoundError
from ledger.db.session import transactional
from ledger.models.account import Account
from ledger.models.asset_type import AssetType
from ledger.repositories.account import AccountRepository
from ledger.repositories.asset_type import AssetTypeRepository
from ledger.schemas.account import AccountCreate, AccountQuery
from ledger.services.validation import validate_asset_type_id

logger = logging.getLogger(__name__)


async def create_account(db: AsyncSession, request: AccountCreate) -> Account:
    """Open an account with zero balances for a (user, asset type) pair.

    Args:
        db: Database session
        request: Validated creation request

    Returns:
        The committed account

    Raises:
        ValidationError: If the asset type is unknown or inactive
        ConflictError: If the user already has an account in this asset type

    Note:
        The existence check gives a clean 409 in the common case; the
        unique constraint still catches two concurrent creations.
    """
    await validate_asset_type_id(db, request.asset_type_id)

    repo = AccountRepository(Account, db)
    if await repo.exists(request.user_id, request.asset_type_id):
        raise ConflictError(
            f"Account already exists for user {request.user_id} "
            f"in asset type {request.asset_type_id}"
        )

    try:
        async with transactional(db):
            account = await repo.create_account(
                user_id=request.user_id,
                asset_type_id=request.asset_type_id,
            )
    except IntegrityError as e:
        raise ConflictError(
            f"Account already exists for user {request.user_id} "
            f"in asset type {request.asset_type_id}"
        ) from e

    logger.info(
        f"Opened account {account.id} for user {request.user_id} "
        f"in asset type {request.asset_type_id}"
    )
    return account


async def get_account_info(db: AsyncSession, request: AccountQuery) -> list[Account]:
    """Get a user's accounts.

    With ``asset_type_id`` the result is that single account (after checking
    the asset type); without it, one account per active asset type the user
    holds.

    Args:
        db: Database session
        request: Validated query

    Returns:
        Non-empty list of accounts ordered by asset type id

    Raises:
        ValidationError: If a given asset type is unknown or inactive
        NotFoundError: If no account matches
    """
    if request.asset_type_id is not None:
        asset_type_ids = [await validate_asset_type_id(db, request.asset_type_id)]
    else:
        asset_type_ids = await AssetTypeRepository(AssetType, db).get_active_ids()

    accounts = await AccountRepository(Account, db).get_by_user_and_asset_types(
        request.user_id, asset_type_ids
    )
    if not accounts:
        raise NotFoundError(f"No account found for user {request.user_id}")
    return accounts
