"""Exception types raised by the valuation engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:  # pragma: no cover - typing only
    from pyauction.models import PoolValuation


class AuctionError(Exception):
    """Base class for engine errors."""


class DataError(AuctionError):
    """Historical data needed for a curve or tier is missing."""

    def __init__(self, message: str, *, position: str | None = None, kind: Any = None):
        super().__init__(message)
        self.message = message
        self.position = position
        self.kind = kind


class PricingValidationError(AuctionError):
    """Raised in strict mode when any player fails validation.

    The full pool valuation is attached so callers still receive every price.
    """

    def __init__(self, message: str, valuation: "PoolValuation", player_ids: Sequence[str]):
        super().__init__(message)
        self.message = message
        self.valuation = valuation
        self.player_ids = list(player_ids)


class ConstraintInfeasible(AuctionError):
    """League cap space cannot cover the minimum roster spend."""

    def __init__(self, message: str, *, capacity: int, minimum_spend: int):
        super().__init__(message)
        self.message = message
        self.capacity = capacity
        self.minimum_spend = minimum_spend


class ComputationCanceled(AuctionError):
    """A scenario computation was superseded and stopped early."""


__all__ = [
    "AuctionError",
    "ComputationCanceled",
    "ConstraintInfeasible",
    "DataError",
    "PricingValidationError",
]
