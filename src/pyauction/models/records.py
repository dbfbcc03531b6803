"""Input records supplied by ranking, roster and salary-history collaborators."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from .enums import ChampionshipWindow, NeedLevel


def _upper(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class HistoricalSalaryRecord(BaseModel):
    """One player's salary in one league year."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    position: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    salary: int = Field(..., ge=0)
    year: int

    model_config = ConfigDict(frozen=True)

    @field_validator("position", mode="before")
    @classmethod
    def normalize_position(cls, value: Any) -> Any:
        return _upper(value)


class PlayerValuation(BaseModel):
    """Auction candidate as handed over by the ranking blend."""

    player_id: str = Field(..., min_length=1)
    name: str = ""
    position: str = Field(..., min_length=1)
    age: int = Field(..., ge=0)
    composite_rank: int = Field(..., ge=1)
    current_salary: int = Field(default=0, ge=0)
    contract_years_remaining: int = Field(default=0, ge=0)
    franchise_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("position", mode="before")
    @classmethod
    def normalize_position(cls, value: Any) -> Any:
        return _upper(value)

    @property
    def is_expiring(self) -> bool:
        return self.franchise_id is not None and self.contract_years_remaining <= 1


class TeamCapSituation(BaseModel):
    franchise_id: str = Field(..., min_length=1)
    team_name: str = ""
    available_cap_space: int = Field(..., ge=0)
    roster_spots_to_fill: int = Field(default=0, ge=0)
    positional_needs: Dict[str, NeedLevel] = Field(default_factory=dict)
    championship_window: ChampionshipWindow = ChampionshipWindow.NEUTRAL
    window_overridden: bool = False
    original_window: Optional[ChampionshipWindow] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("positional_needs", mode="before")
    @classmethod
    def normalize_needs(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(key).strip().upper(): level for key, level in value.items()}
        return value

    def need(self, position: str) -> NeedLevel:
        return self.positional_needs.get(position.upper(), NeedLevel.LOW)
