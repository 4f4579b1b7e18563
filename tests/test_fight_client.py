import json
import logging
import random

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.v1.endpoints import get_judge
from app.client import cli
from app.client.fight_client import ClientRequestFailure, FightJudgeClient
from app.main import app
from app.services.fight_judge.manager import FightJudge
from app.services.fighters import FIGHTERS, pick_random_fighters

logger = logging.getLogger("test-fight-client")


def sse_body(*contents: str) -> bytes:
    lines = [
        "data: " + json.dumps({"choices": [{"delta": {"content": content}}]}) + "\n\n"
        for content in contents
    ]
    return ("".join(lines) + "data: [DONE]\n\n").encode("utf-8")


@pytest.fixture
def judge_client():
    client = FightJudgeClient("http://testserver", logger, http_client=TestClient(app))
    yield client
    app.dependency_overrides.clear()


def use_upstream(status_code: int, content: bytes = b""):
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code, content=content))
    app.dependency_overrides[get_judge] = lambda: FightJudge(logger, transport=transport)


def test_judge_accumulates_stream_and_resolves_winner(judge_client):
    use_upstream(200, sse_body("winner: ", "Opponent1", ". reason: ", "lightning fists"))
    seen = []

    judgment = judge_client.judge("Bruce Lee", "Yoda", on_text=seen.append)

    assert judgment.transcript == "winner: Opponent1. reason: lightning fists"
    assert judgment.winner == "opponent1"
    assert judgment.reason == "lightning fists"
    assert "".join(seen) == judgment.transcript


def test_each_judgment_starts_from_an_empty_transcript(judge_client):
    use_upstream(200, sse_body("A", "B", "C"))
    first = judge_client.judge("Shrek", "Yoda")
    second = judge_client.judge("Shrek", "Yoda")
    assert first.transcript == second.transcript == "ABC"
    assert first.winner == ""


def test_judge_with_empty_upstream_body(judge_client):
    use_upstream(204)
    judgment = judge_client.judge("Shrek", "Yoda")
    assert judgment.transcript == ""
    assert judgment.winner == ""


def test_judge_raises_on_failed_request(judge_client):
    use_upstream(503)
    with pytest.raises(ClientRequestFailure) as excinfo:
        judge_client.judge("Shrek", "Yoda")
    assert excinfo.value.status_code == 503


def test_judge_raises_on_validation_error(judge_client):
    with pytest.raises(ClientRequestFailure) as excinfo:
        judge_client.judge("", "Yoda")
    assert excinfo.value.status_code == 400
    assert "errors" in json.loads(excinfo.value.detail)


def test_request_image(judge_client, monkeypatch):
    monkeypatch.setattr("app.services.svc.illustrate", lambda judge, req: "https://img.test/yoda.png")
    assert judge_client.request_image("Shrek", "Yoda", "opponent2") == "https://img.test/yoda.png"


def test_pick_random_fighters_returns_two_distinct_names():
    rng = random.Random(7)
    for _ in range(50):
        fighter1, fighter2 = pick_random_fighters(rng)
        assert fighter1 != fighter2
        assert fighter1 in FIGHTERS and fighter2 in FIGHTERS


def test_cli_prints_transcript_and_celebrates(monkeypatch, capsys):
    use_upstream(200, sse_body("winner: opponent2. ", "reason: wise he is"))
    monkeypatch.setattr(
        cli,
        "FightJudgeClient",
        lambda base_url, logger: FightJudgeClient(base_url, logger, http_client=TestClient(app)),
    )
    try:
        exit_code = cli.main(["Shrek", "Yoda"])
    finally:
        app.dependency_overrides.clear()

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "winner: opponent2. reason: wise he is" in out
    assert "*** Yoda wins! ***" in out


def test_cli_does_not_celebrate_a_name_instead_of_a_label(monkeypatch, capsys):
    use_upstream(200, sse_body("winner: Shrek. ", "reason: ogres are tough"))
    monkeypatch.setattr(
        cli,
        "FightJudgeClient",
        lambda base_url, logger: FightJudgeClient(base_url, logger, http_client=TestClient(app)),
    )
    try:
        exit_code = cli.main(["Shrek", "Yoda"])
    finally:
        app.dependency_overrides.clear()

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "winner: Shrek. reason: ogres are tough" in out
    assert "wins!" not in out


def test_cli_reports_failed_request(monkeypatch, capsys):
    use_upstream(500)
    monkeypatch.setattr(
        cli,
        "FightJudgeClient",
        lambda base_url, logger: FightJudgeClient(base_url, logger, http_client=TestClient(app)),
    )
    try:
        exit_code = cli.main(["Shrek", "Yoda"])
    finally:
        app.dependency_overrides.clear()

    assert exit_code == 1
    assert "The request experienced an issue (500)." in capsys.readouterr().err
