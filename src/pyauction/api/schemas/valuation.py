from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from pyauction.config import DEFAULT_LEAGUE
from pyauction.models import HistoricalSalaryRecord, PlayerValuation, PoolValuation, TeamCapSituation
from pyauction.scenario import ScenarioOverrides


class ValuationRequest(BaseModel):
    salaries: List[HistoricalSalaryRecord]
    players: List[PlayerValuation]
    teams: List[TeamCapSituation]
    league: str = Field(default=DEFAULT_LEAGUE)
    end_year: int | None = None
    window_years: int | None = Field(default=None, ge=1)
    overrides: ScenarioOverrides = Field(default_factory=ScenarioOverrides)
    strict: bool = False
    workers: int | None = Field(default=None, ge=1, le=32)
    reference_spend: int | None = Field(default=None, ge=0)


class ValuationResponse(BaseModel):
    valuation: PoolValuation
    requiring_review: List[str]
    years_available: int
    window_years: int
