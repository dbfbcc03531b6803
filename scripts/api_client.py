"""Lightweight REST client for the pyauction API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx

from pyauction.ingest import load_players, load_salary_history, load_teams


def build_overrides(raw: str) -> dict:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid overrides JSON: {exc}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyauction REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("salaries", type=Path, help="Historical salaries CSV")
    parser.add_argument("players", type=Path, help="Available players CSV")
    parser.add_argument("teams", type=Path, help="Team cap situations CSV")
    parser.add_argument("--league", default="THELEAGUE", help="League rules key")
    parser.add_argument("--overrides", default="", help="JSON scenario overrides")
    parser.add_argument("--session", action="store_true", help="Create a session and submit the overrides as a scenario")
    parser.add_argument("--wait", type=float, default=30.0, help="Seconds to wait for a scenario result")
    args = parser.parse_args()

    payload = {
        "salaries": [record.model_dump(mode="json") for record in load_salary_history(args.salaries)],
        "players": [player.model_dump(mode="json") for player in load_players(args.players)],
        "teams": [team.model_dump(mode="json") for team in load_teams(args.teams)],
        "league": args.league,
    }
    overrides = build_overrides(args.overrides)

    with httpx.Client(base_url=args.base_url, timeout=args.wait + 30.0) as client:
        if not args.session:
            resp = client.post("/valuations", json={**payload, "overrides": overrides})
            resp.raise_for_status()
            body = resp.json()
            valuation = body["valuation"]
        else:
            resp = client.post("/sessions", json=payload)
            resp.raise_for_status()
            session = resp.json()
            print("Session:", json.dumps(session, indent=2))
            resp = client.post(f"/sessions/{session['session_id']}/scenarios", json=overrides)
            resp.raise_for_status()
            job = resp.json()
            resp = client.get(
                f"/sessions/{session['session_id']}/scenarios/{job['job_id']}",
                params={"wait": args.wait},
            )
            resp.raise_for_status()
            job = resp.json()
            if job["valuation"] is None:
                raise SystemExit(f"scenario {job['job_id']} ended {job['state']}: {job['message']}")
            valuation = job["valuation"]

    budget = valuation["budget"]
    print(f"Received {len(valuation['players'])} valuations")
    print(f"Spend {budget['total_after']:,} of capacity {budget['capacity']:,} (multiplier {budget['multiplier']:.3f})")
    for warning in valuation["league_warnings"]:
        print("League warning:", warning["message"])
    if valuation["players"]:
        print(json.dumps(valuation["players"][0], indent=2))


if __name__ == "__main__":
    main()
