"""ORM models. Importing this package registers every table on ``Base.metadata``."""

from ledger.models.account import Account
from ledger.models.account_log import AccountLog
from ledger.models.action_type import ActionType, Change
from ledger.models.asset_type import AssetType

__all__ = ["Account", "AccountLog", "ActionType", "AssetType", "Change"]
