"""Action type schemas."""

from pydantic import BaseModel

from ledger.models.action_type import Change


class ActionTypeResponse(BaseModel):
    """Schema for an active action type and its four balance rules."""

    id: int
    name: str
    description: str
    available_balance_change: Change
    frozen_balance_change: Change
    total_income_change: Change
    total_expense_change: Change

    model_config = {"from_attributes": True}
