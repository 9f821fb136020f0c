"""Dependencies for FastAPI routes."""

import json
from decimal import Decimal
from typing import Annotated

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from ledger.db.session import get_db
from ledger.schemas.account import AccountAction, account_action_batch


def get_cache(request: Request) -> Redis | None:
    """
    Get the process-wide catalog cache handle.

    The handle is created once in the application lifespan and stored on
    ``app.state.redis``. When Redis was unreachable at startup (or the
    lifespan did not run, as under test clients) this returns None and the
    catalogs are read from the database.

    Args:
        request: The incoming request

    Returns:
        The Redis client, or None when caching is disabled
    """
    return getattr(request.app.state, "redis", None)


async def get_account_actions(request: Request) -> list[AccountAction]:
    """
    Parse a balance mutation batch from the raw request body.

    JSON numbers are read straight into ``Decimal`` so an amount sent as
    ``99999999999.999999`` reaches validation digit for digit instead of
    being rounded through a float first.

    Args:
        request: The incoming request

    Returns:
        The shape-validated actions, in request order

    Raises:
        RequestValidationError: 422 for malformed JSON or an invalid batch
    """
    body = await request.body()
    try:
        payload = json.loads(body, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body", e.pos),
                    "msg": "JSON decode error",
                    "input": {},
                    "ctx": {"error": e.msg},
                }
            ]
        ) from e

    try:
        return account_action_batch.validate_python(payload)
    except PydanticValidationError as e:
        errors = [
            {**error, "loc": ("body", *error["loc"])}
            for error in e.errors(include_url=False, include_context=False)
        ]
        raise RequestValidationError(errors, body=payload) from e


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
CatalogCache = Annotated[Redis | None, Depends(get_cache)]
AccountActions = Annotated[list[AccountAction], Depends(get_account_actions)]
