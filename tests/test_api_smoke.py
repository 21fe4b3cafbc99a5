# tests/test_api_smoke.py
"""
Smoke tests for the HTTP surface: every router is mounted under /api/v1,
request bodies are validated, and domain errors come back in the
uniform {"status": "error", ...} envelope.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import app.main as main_module
from app.main import create_app, serve
from app.shared.config import settings
from tests.builders import clause, noun, pron, sentence


@pytest.fixture(scope="module")
def client():
    # Entering the client runs the lifespan (logging + eager lexicon load)
    with TestClient(create_app()) as c:
        yield c


def _payload(*sentences, **extra):
    return {"sentences": [s.model_dump(mode="json") for s in sentences], **extra}


def test_health_reports_the_lexicon(client: TestClient) -> None:
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["lexicon_loaded"] is True
    assert data["lexicon"]["lang"] == "en"


def test_render_workspace(client: TestClient) -> None:
    s = sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past"))
    response = client.post("/api/v1/render", json=_payload(s))

    assert response.status_code == 200
    data = response.json()
    assert data["sentences"] == ["He ate an apple."]
    assert any(entry["type"] == "tense" and entry["to"] == "ate" for entry in data["logs"])
    assert data["derivations"][0]["output"] == "He ate an apple."


def test_render_without_derivations(client: TestClient) -> None:
    s = sentence(clause("walk", agent=pron("she")))
    response = client.post("/api/v1/render", json=_payload(s, include_derivations=False))
    assert response.status_code == 200
    assert response.json()["derivations"] == []


def test_render_in_japanese_word_order(client: TestClient) -> None:
    s = sentence(clause("eat", agent=pron("you"), patient=noun("apple", det="the")), "yes_no_question")
    response = client.post("/api/v1/render", json=_payload(s, target="ja"))
    assert response.status_code == 200
    assert response.json()["sentences"] == ["youは the appleを eatか？"]

    unknown = client.post("/api/v1/render", json=_payload(s, target="xx"))
    assert unknown.status_code == 422


def test_render_rejects_an_invalid_ast(client: TestClient) -> None:
    response = client.post("/api/v1/render", json={"sentences": [{"sentence_type": "declarative"}]})
    assert response.status_code == 422
    assert response.json()["status"] == "error"


def test_render_notation(client: TestClient) -> None:
    response = client.post(
        "/api/v1/render/notation",
        json={"sentences": ["question(sentence(past+simple(eat(agent:'you, patient:?what))))"]},
    )
    assert response.status_code == 200
    assert response.json()["sentences"] == ["What did you eat?"]


def test_malformed_notation_is_a_422_with_position(client: TestClient) -> None:
    response = client.post("/api/v1/render/notation", json={"sentences": ["sentence(past+simple(eat(agent:'he))"]})
    assert response.status_code == 422
    data = response.json()
    assert data["status"] == "error"
    assert isinstance(data["position"], int)


def test_diff_endpoint(client: TestClient) -> None:
    walked = client.post("/api/v1/render", json=_payload(sentence(clause("walk", agent=pron("he"), tense="past"))))
    slept = client.post("/api/v1/render", json=_payload(sentence(clause("sleep", agent=pron("he"), tense="past"))))

    response = client.post(
        "/api/v1/render/diff",
        json={"current": slept.json()["derivations"][0], "previous": walked.json()["derivations"][0]},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["changed"] == 1
    changed = [s for s in data["steps"] if s["status"] == "changed"]
    assert changed[0]["previous"]["after"] == "walked"
    assert changed[0]["step"]["after"] == "slept"


def test_diff_rejects_a_malformed_derivation(client: TestClient) -> None:
    response = client.post(
        "/api/v1/render/diff",
        json={"current": {"input": "x", "output": "y", "steps": [{"category": "syntax"}]}, "previous": {}},
    )
    assert response.status_code == 422


def test_determiner_commit_resets_conflicts(client: TestClient) -> None:
    response = client.post(
        "/api/v1/determiners/commit",
        json={"slot": "central", "value": "every", "selections": {"post": "plural"}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["accepted"] is True
    assert data["selections"] == {"pre": None, "central": "every", "post": None}
    assert [r["slot"] for r in data["resets"]] == ["post"]
    assert data["reason_ttl_sec"] > 0


def test_determiner_commit_applies_the_noun_type(client: TestClient) -> None:
    response = client.post(
        "/api/v1/determiners/commit",
        json={"slot": "central", "value": "the", "selections": {"post": "plural"}, "noun_type": "uncountable"},
    )
    data = response.json()
    assert data["accepted"] is True
    assert data["selections"] == {"pre": None, "central": None, "post": "uncountable"}
    assert [r["slot"] for r in data["resets"]] == ["post"]


def test_determiner_commit_rejects_what_the_noun_type_forbids(client: TestClient) -> None:
    response = client.post(
        "/api/v1/determiners/commit",
        json={"slot": "central", "value": "these", "selections": {}, "noun_type": "uncountable"},
    )
    data = response.json()
    assert data["accepted"] is False
    assert data["selections"] == {"pre": None, "central": None, "post": None}

    options = client.post(
        "/api/v1/determiners/options",
        json={"slot": "central", "selections": {}, "noun_type": "uncountable"},
    ).json()
    these = next(o for o in options if o["value"] == "these")
    assert these["enabled"] is False
    assert "uncountable" in these["reason"]


def test_determiner_options(client: TestClient) -> None:
    response = client.post("/api/v1/determiners/options", json={"slot": "post", "selections": {"central": "every"}})
    assert response.status_code == 200
    options = {o["value"]: o for o in response.json()}
    assert options["plural"]["enabled"] is False
    assert "every" in options["plural"]["reason"]
    assert options[None]["enabled"] is True


def test_serve_hands_the_app_to_uvicorn(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    serve()

    assert calls == [(main_module.app, {"host": settings.API_HOST, "port": settings.API_PORT})]
