"""Persist and load CLI scenario profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pyauction.scenario import ScenarioOverrides


@dataclass
class ScenarioProfile:
    overrides: ScenarioOverrides = field(default_factory=ScenarioOverrides)
    league: Optional[str] = None
    reference_spend: Optional[int] = None

    @classmethod
    def load(cls, path: Path) -> "ScenarioProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            overrides=ScenarioOverrides.model_validate(data.get("overrides", {})),
            league=data.get("league"),
            reference_spend=data.get("reference_spend"),
        )

    def save(self, path: Path) -> None:
        payload = {
            "league": self.league,
            "reference_spend": self.reference_spend,
            "overrides": self.overrides.model_dump(mode="json", exclude_defaults=True),
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
