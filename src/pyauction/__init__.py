"""Fantasy auction valuation and anomaly detection."""

from pyauction.engine import AnalysisSession, ScenarioRunner, value_pool
from pyauction.history import build_snapshot

__version__ = "0.1.0"

__all__ = ["AnalysisSession", "ScenarioRunner", "build_snapshot", "value_pool"]
