"""Application-wide constants.

Balances and amounts share one fixed-point representation: NUMERIC(18, 6)
in the database and ``decimal.Decimal`` quantized to six fractional digits
in Python. Nothing on the mutation path ever goes through ``float``.
"""

from decimal import Decimal


class BalanceConstants:
    """Fixed-point layout of every balance and amount column."""

    PRECISION = 18  # Total significant digits stored
    SCALE = 6  # Fractional digits stored
    QUANTUM = Decimal("0.000001")  # Smallest representable step (10 ** -SCALE)
    ZERO = Decimal("0")


class CatalogCacheConstants:
    """Keys for the reference catalog snapshots held in Redis."""

    ASSET_TYPE_KEY = "ledger:catalog:asset_type"
    ACTION_TYPE_KEY = "ledger:catalog:action_type"


class RequestConstants:
    """Constraints on optional free-text request fields."""

    ORDER_NUMBER_MIN_LENGTH = 32
    DESCRIPTION_MIN_LENGTH = 1


BALANCE_PRECISION = BalanceConstants.PRECISION
BALANCE_SCALE = BalanceConstants.SCALE
BALANCE_QUANTUM = BalanceConstants.QUANTUM
