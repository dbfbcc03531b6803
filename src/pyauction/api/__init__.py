"""REST API for the auction valuation engine."""

from __future__ import annotations

import asyncio
from typing import Dict

from fastapi import FastAPI, HTTPException, Query

from pyauction.api.schemas import (
    ScenarioJobResponse,
    SessionRequest,
    SessionResponse,
    ValuationRequest,
    ValuationResponse,
)
from pyauction.config import get_league_rules
from pyauction.config.league import LeagueRules
from pyauction.engine import AnalysisSession, ScenarioJob, ScenarioRunner
from pyauction.errors import ConstraintInfeasible, PricingValidationError
from pyauction.scenario import ScenarioOverrides


def _rules_or_400(league: str) -> LeagueRules:
    try:
        return get_league_rules(league)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=f"Unknown league {league!r}") from exc


def job_to_response(runner: ScenarioRunner, job: ScenarioJob) -> ScenarioJobResponse:
    return ScenarioJobResponse(
        job_id=job.job_id,
        session_id=runner.session.session_id,
        state=job.state,
        message=job.message,
        created_at=job.created_at,
        updated_at=job.updated_at,
        cancel_requested_at=job.cancel_requested_at,
        completed_at=job.completed_at,
        valuation=job.result,
    )


def create_app() -> FastAPI:
    app = FastAPI(title="pyauction valuation engine")
    sessions: Dict[str, ScenarioRunner] = {}
    app.state.sessions = sessions

    def _runner_or_404(session_id: str) -> ScenarioRunner:
        runner = sessions.get(session_id)
        if runner is None:
            raise HTTPException(status_code=404, detail="Session not found")
        return runner

    def _job_or_404(runner: ScenarioRunner, job_id: str) -> ScenarioJob:
        try:
            return runner.get(job_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Scenario not found") from exc

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/valuations", response_model=ValuationResponse)
    async def valuations(request: ValuationRequest) -> ValuationResponse:
        rules = _rules_or_400(request.league)
        try:
            session = AnalysisSession(
                request.salaries,
                request.players,
                request.teams,
                rules=rules,
                end_year=request.end_year,
                window_years=request.window_years,
            )
            valuation = session.value(
                request.overrides,
                strict=request.strict,
                workers=request.workers,
                reference_spend=request.reference_spend,
            )
        except PricingValidationError as exc:
            raise HTTPException(
                status_code=422,
                detail={"message": exc.message, "player_ids": exc.player_ids},
            ) from exc
        except ConstraintInfeasible as exc:
            raise HTTPException(status_code=422, detail=exc.message) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        return ValuationResponse(
            valuation=valuation,
            requiring_review=valuation.requiring_review(),
            years_available=session.snapshot.years_available,
            window_years=session.snapshot.window_years,
        )

    @app.post("/sessions", response_model=SessionResponse)
    async def create_session(request: SessionRequest) -> SessionResponse:
        rules = _rules_or_400(request.league)
        try:
            session = AnalysisSession(
                request.salaries,
                request.players,
                request.teams,
                rules=rules,
                end_year=request.end_year,
                window_years=request.window_years,
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        sessions[session.session_id] = ScenarioRunner(session, workers=request.workers, strict=request.strict)
        return SessionResponse(
            session_id=session.session_id,
            league=rules.key,
            years=list(session.snapshot.years),
            window_years=session.snapshot.window_years,
            is_partial=session.snapshot.is_partial,
            players=len(session.players),
            teams=len(session.teams),
        )

    @app.post("/sessions/{session_id}/scenarios", response_model=ScenarioJobResponse)
    async def submit_scenario(session_id: str, overrides: ScenarioOverrides) -> ScenarioJobResponse:
        runner = _runner_or_404(session_id)
        job = runner.submit(overrides)
        return job_to_response(runner, job)

    @app.get("/sessions/{session_id}/scenarios/latest", response_model=ScenarioJobResponse)
    async def latest_scenario(session_id: str, wait: float = Query(default=0.0, ge=0.0, le=60.0)) -> ScenarioJobResponse:
        runner = _runner_or_404(session_id)
        job = runner.latest()
        if job is None:
            raise HTTPException(status_code=404, detail="No scenarios submitted")
        if wait:
            job = await asyncio.to_thread(runner.wait, job.job_id, wait)
        return job_to_response(runner, job)

    @app.get("/sessions/{session_id}/scenarios/{job_id}", response_model=ScenarioJobResponse)
    async def get_scenario(session_id: str, job_id: str, wait: float = Query(default=0.0, ge=0.0, le=60.0)) -> ScenarioJobResponse:
        runner = _runner_or_404(session_id)
        job = _job_or_404(runner, job_id)
        if wait:
            job = await asyncio.to_thread(runner.wait, job_id, wait)
        return job_to_response(runner, job)

    @app.post("/sessions/{session_id}/scenarios/{job_id}/cancel", response_model=ScenarioJobResponse)
    async def cancel_scenario(session_id: str, job_id: str) -> ScenarioJobResponse:
        runner = _runner_or_404(session_id)
        job = _job_or_404(runner, job_id)
        if not job.finished:
            job = runner.cancel(job_id)
        return job_to_response(runner, job)

    return app


__all__ = ["create_app"]
