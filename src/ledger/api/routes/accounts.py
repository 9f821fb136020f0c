"""Account endpoints."""

from fastapi import APIRouter, Request, status

from ledger.core.deps import AccountActions, DbSession
from ledger.core.rate_limit import action_rate_limit, limiter
from ledger.models.account import Account
from ledger.models.account_log import AccountLog
from ledger.schemas.account import (
    AccountAction,
    AccountCreate,
    AccountQuery,
    AccountResponse,
)
from ledger.schemas.account_log import AccountLogResponse
from ledger.services import account_service, balance_service

router = APIRouter()


@router.post(
    "/add-account",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_account(account: AccountCreate, db: DbSession) -> Account:
    """
    Open an account for a user in one asset type.

    Args:
        account: User and asset type (validated Pydantic model)
        db: Database session

    Returns:
        The created account, all balances at zero

    Raises:
        ValidationError: 422 if the asset type is unknown or inactive
        ConflictError: 409 if the account already exists
    """
    return await account_service.create_account(db, account)


@router.post("/account-info", response_model=list[AccountResponse])
async def account_info(query: AccountQuery, db: DbSession) -> list[Account]:
    """
    Get a user's account in one asset type, or in every active asset type.

    Raises:
        ValidationError: 422 if a given asset type is unknown or inactive
        NotFoundError: 404 if no account matches
    """
    return await account_service.get_account_info(db, query)


@router.post(
    "/account-action",
    response_model=list[AccountLogResponse],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": {
                        "type": "array",
                        "minItems": 1,
                        "items": AccountAction.model_json_schema(),
                    }
                }
            },
        }
    },
)
@limiter.limit(action_rate_limit)
async def account_action(
    request: Request,
    actions: AccountActions,
    db: DbSession,
) -> list[AccountLog]:
    """
    Apply a batch of balance mutations atomically.

    Either every action is applied, or none is.

    Args:
        request: The incoming request (used by the rate limiter)
        actions: Mutation requests, applied in order (amounts parsed as exact decimals)
        db: Database session

    Returns:
        One audit entry per applied action, in batch order

    Raises:
        ValidationError: 422 for an unknown or inactive asset/action type
        ForbiddenError: 403 if an account is inactive
        InsufficientBalanceError: 500 if a decrement would overdraw a balance
    """
    return await balance_service.apply_actions(db, actions)
