"""Account schemas.

These models are the shape layer of request validation: anything that can
be checked without the database (id ranges, amount sign and precision,
text lengths) is enforced here, so an ``AccountAction`` instance is always
well-formed by construction. Catalog checks happen in
``ledger.services.validation``.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, TypeAdapter

from ledger.core.constants import BALANCE_PRECISION, BALANCE_SCALE, RequestConstants


class AccountCreate(BaseModel):
    """Schema for opening an account."""

    user_id: int = Field(..., ge=1)
    asset_type_id: int = Field(..., ge=1)


class AccountQuery(BaseModel):
    """Schema for looking up a user's accounts.

    Without ``asset_type_id`` the lookup covers every active asset type.
    """

    user_id: int = Field(..., ge=1)
    asset_type_id: int | None = Field(None, ge=1)


class AccountAction(BaseModel):
    """Schema for one balance mutation request.

    ``amount`` must be positive and fit NUMERIC(18, 6) exactly; values with
    more than six fractional digits are rejected rather than truncated.
    """

    user_id: int = Field(..., ge=1)
    asset_type_id: int = Field(..., ge=1)
    action_type_id: int = Field(..., ge=1)
    amount: Decimal = Field(
        ...,
        gt=0,
        max_digits=BALANCE_PRECISION,
        decimal_places=BALANCE_SCALE,
    )
    order_number: str | None = Field(
        None, min_length=RequestConstants.ORDER_NUMBER_MIN_LENGTH, max_length=255
    )
    description: str | None = Field(
        None, min_length=RequestConstants.DESCRIPTION_MIN_LENGTH, max_length=255
    )


class AccountResponse(BaseModel):
    """Schema for account response."""

    id: int
    user_id: int
    asset_type_id: int
    available_balance: Decimal
    frozen_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    is_active: bool

    model_config = {"from_attributes": True}


# Body of /account-action: at least one action, applied in order
account_action_batch = TypeAdapter(Annotated[list[AccountAction], Field(min_length=1)])
