"""Catalog-backed request validation.

Shape rules live on the Pydantic schemas in ``ledger.schemas.account``.
The checks here need the database: a referenced asset type or action type
must exist and be active *right now*, so they read the tables directly and
never consult the catalog cache.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from ledger.core.exceptions import ValidationError
from ledger.models.action_type import ActionType
from ledger.models.asset_type import AssetType
from ledger.repositories.action_type import ActionTypeRepository
from ledger.repositories.asset_type import AssetTypeRepository
from ledger.schemas.account import AccountAction


async def validate_asset_type_id(db: AsyncSession, asset_type_id: int | None) -> int:
    """Require an existing, active asset type.

    Returns:
        The validated id

    Raises:
        ValidationError: If the id is missing, unknown or inactive
    """
    if asset_type_id is None or not await AssetTypeRepository(AssetType, db).is_active(
        asset_type_id
    ):
        raise ValidationError(f"Invalid asset_type_id: {asset_type_id}")
    return asset_type_id


async def validate_action_type_id(db: AsyncSession, action_type_id: int | None) -> int:
    """Require an existing, active action type.

    Returns:
        The validated id

    Raises:
        ValidationError: If the id is missing, unknown or inactive
    """
    if action_type_id is None or not await ActionTypeRepository(ActionType, db).is_active(
        action_type_id
    ):
        raise ValidationError(f"Invalid action_type_id: {action_type_id}")
    return action_type_id


async def validate_action(db: AsyncSession, action: AccountAction) -> None:
    """Run the catalog checks for one mutation request, asset type first."""
    await validate_asset_type_id(db, action.asset_type_id)
    await validate_action_type_id(db, action.action_type_id)
