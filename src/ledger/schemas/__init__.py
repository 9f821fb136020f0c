"""Schemas package."""

from ledger.schemas.account import (
    AccountAction,
    AccountCreate,
    AccountQuery,
    AccountResponse,
)
from ledger.schemas.account_log import AccountLogResponse
from ledger.schemas.action_type import ActionTypeResponse
from ledger.schemas.asset_type import AssetTypeResponse

__all__ = [
    # Catalog schemas
    "AssetTypeResponse",
    "ActionTypeResponse",
    # Account schemas
    "AccountAction",
    "AccountCreate",
    "AccountQuery",
    "AccountResponse",
    # Audit schemas
    "AccountLogResponse",
]
