"""Repository layer for database operations.

Repositories:
    - BaseRepository: Generic get/create for any model
    - AssetTypeRepository: Asset type catalog queries and activity checks
    - ActionTypeRepository: Action type catalog queries and activity checks
    - AccountRepository: Account lookups, creation and the balance UPDATE
    - AccountLogRepository: Append-only audit trail

Usage:
    >>> from ledger.models import Account
    >>> from ledger.repositories import AccountRepository
    >>>
    >>> repo = AccountRepository(Account, db)
    >>> account = await repo.get_by_user_and_asset_type(1, 1)
"""

from ledger.repositories.account import AccountRepository
from ledger.repositories.account_log import AccountLogRepository
from ledger.repositories.action_type import ActionTypeRepository
from ledger.repositories.asset_type import AssetTypeRepository
from ledger.repositories.base import BaseRepository

__all__ = [
    "BaseRepository",
    "AssetTypeRepository",
    "ActionTypeRepository",
    "AccountRepository",
    "AccountLogRepository",
]
