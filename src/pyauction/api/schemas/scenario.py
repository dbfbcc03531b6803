from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from pyauction.config import DEFAULT_LEAGUE
from pyauction.models import HistoricalSalaryRecord, PlayerValuation, PoolValuation, TeamCapSituation


class SessionRequest(BaseModel):
    salaries: List[HistoricalSalaryRecord]
    players: List[PlayerValuation]
    teams: List[TeamCapSituation]
    league: str = Field(default=DEFAULT_LEAGUE)
    end_year: int | None = None
    window_years: int | None = Field(default=None, ge=1)
    workers: int | None = Field(default=1, ge=1, le=32)
    strict: bool | None = None


class SessionResponse(BaseModel):
    session_id: str
    league: str
    years: List[int]
    window_years: int
    is_partial: bool
    players: int
    teams: int


class ScenarioJobResponse(BaseModel):
    job_id: str
    session_id: str
    state: str
    message: str | None = None
    created_at: datetime
    updated_at: datetime
    cancel_requested_at: datetime | None = None
    completed_at: datetime | None = None
    valuation: PoolValuation | None = None
