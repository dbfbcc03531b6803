import pytest
from httpx import ASGITransport, AsyncClient

from pyauction.api import create_app

from tests.samples import sample_history, sample_players, sample_teams


@pytest.fixture(scope="module")
async def client():
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    for name in ("PYAUCTION_WORKERS", "PYAUCTION_STRICT", "PYAUCTION_REFERENCE_SPEND", "PYAUCTION_HISTORY_YEARS"):
        monkeypatch.delenv(name, raising=False)


def _dataset() -> dict:
    return {
        "salaries": [record.model_dump(mode="json") for record in sample_history()],
        "players": [player.model_dump(mode="json") for player in sample_players()],
        "teams": [team.model_dump(mode="json") for team in sample_teams()],
        "end_year": 2024,
    }


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_valuations_endpoint(client: AsyncClient):
    payload = {**_dataset(), "workers": 1, "overrides": {"franchise_tags": {"F1": "p03"}}}
    resp = await client.post("/valuations", json=payload)
    assert resp.status_code == 200, resp.text

    body = resp.json()
    valuation = body["valuation"]
    assert body["years_available"] == 6
    assert "old-rb" in body["requiring_review"]
    assert valuation["tagged_player_ids"] == ["p03"]
    assert len(valuation["players"]) == len(sample_players()) - 1
    assert valuation["budget"]["total_after"] <= valuation["budget"]["capacity"]


@pytest.mark.anyio
async def test_valuations_strict_returns_422(client: AsyncClient):
    resp = await client.post("/valuations", json={**_dataset(), "workers": 1, "strict": True})
    assert resp.status_code == 422
    assert "old-rb" in resp.json()["detail"]["player_ids"]


@pytest.mark.anyio
async def test_valuations_unknown_league(client: AsyncClient):
    resp = await client.post("/valuations", json={**_dataset(), "league": "CURLING"})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_valuations_rank_weight_without_provider(client: AsyncClient):
    payload = {**_dataset(), "workers": 1, "overrides": {"dynasty_weight": 0.5}}
    resp = await client.post("/valuations", json=payload)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_session_scenarios(client: AsyncClient):
    resp = await client.post("/sessions", json={**_dataset(), "strict": False})
    assert resp.status_code == 200, resp.text
    session = resp.json()
    assert session["years"] == list(range(2019, 2025))
    assert session["players"] == len(sample_players())
    session_id = session["session_id"]
    assert session_id in client.app.state.sessions

    missing = await client.get(f"/sessions/{session_id}/scenarios/latest")
    assert missing.status_code == 404

    submitted = await client.post(
        f"/sessions/{session_id}/scenarios",
        json={"window_overrides": {"F3": "contending"}},
    )
    assert submitted.status_code == 200, submitted.text
    job_id = submitted.json()["job_id"]

    done = await client.get(f"/sessions/{session_id}/scenarios/{job_id}", params={"wait": 30})
    assert done.status_code == 200
    job = done.json()
    assert job["state"] == "completed"
    assert len(job["valuation"]["players"]) == len(sample_players())

    latest = await client.get(f"/sessions/{session_id}/scenarios/latest")
    assert latest.json()["job_id"] == job_id

    cancel = await client.post(f"/sessions/{session_id}/scenarios/{job_id}/cancel")
    assert cancel.status_code == 200
    assert cancel.json()["state"] == "completed"


@pytest.mark.anyio
async def test_unknown_session_and_job(client: AsyncClient):
    resp = await client.post("/sessions/nope/scenarios", json={})
    assert resp.status_code == 404

    created = await client.post("/sessions", json=_dataset())
    session_id = created.json()["session_id"]
    resp = await client.get(f"/sessions/{session_id}/scenarios/unknown")
    assert resp.status_code == 404
    resp = await client.post(f"/sessions/{session_id}/scenarios/unknown/cancel")
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_duplicate_player_ids_are_rejected(client: AsyncClient):
    dataset = _dataset()
    dataset["players"].append(dataset["players"][0])

    resp = await client.post("/valuations", json={**dataset, "workers": 1})
    assert resp.status_code == 400
    assert "duplicate player_id" in resp.json()["detail"]

    resp = await client.post("/sessions", json=dataset)
    assert resp.status_code == 400
