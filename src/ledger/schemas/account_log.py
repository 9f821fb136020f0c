"""Account log schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class AccountLogResponse(BaseModel):
    """Schema for one audit entry written by a balance mutation."""

    id: int
    account_id: int
    action_type_id: int
    amount_available_balance: Decimal
    amount_frozen_balance: Decimal
    amount_total_income: Decimal
    amount_total_expense: Decimal
    available_balance_after: Decimal
    frozen_balance_after: Decimal
    total_income_after: Decimal
    total_expense_after: Decimal
    order_number: str
    description: str
    created_at: datetime

    model_config = {"from_attributes": True}
