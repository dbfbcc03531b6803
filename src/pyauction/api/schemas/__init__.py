"""Pydantic models for API I/O."""

from .scenario import ScenarioJobResponse, SessionRequest, SessionResponse
from .valuation import ValuationRequest, ValuationResponse

__all__ = [
    "ScenarioJobResponse",
    "SessionRequest",
    "SessionResponse",
    "ValuationRequest",
    "ValuationResponse",
]
