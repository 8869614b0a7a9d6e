"""Tests for the HTTP service."""

import inspect

import pytest
from fastapi.testclient import TestClient

from unmark.server import (
    app,
    choose,
    get_config,
    get_store,
    list_patterns,
    phrase,
    preview,
    put_config,
    remove,
)
from unmark.store import ConfigStore


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "unmark.json")


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_patterns(client):
    body = client.get("/api/patterns").json()
    assert len(body["patterns"]) == 10
    assert body["patterns"][0] == {
        "key": "asterisk",
        "label": "Asterisk (*, **)",
        "example": "*italic* or **bold**",
        "enabled": True,
    }
    assert body["items"][-1] == "Task List (- [ ])"


def test_remove(client):
    resp = client.post(
        "/api/remove", json={"text": "# Title\n## Sub", "pattern": "header"}
    )
    assert resp.status_code == 200
    assert resp.json() == {"text": "Title\nSub"}


def test_remove_without_normalize(client):
    resp = client.post(
        "/api/remove", json={"text": "  > q", "pattern": "quote", "normalize": False}
    )
    assert resp.json()["text"] == "  q"


def test_remove_unknown_pattern(client):
    resp = client.post("/api/remove", json={"text": "x", "pattern": "bogus"})
    assert resp.status_code == 404


def test_preview(client):
    resp = client.post("/api/preview", json={"text": "*a* b", "pattern": "asterisk"})
    assert resp.json() == {"text": "a b", "highlighted": "<del>*</del>a<del>*</del> b"}


def test_phrase_literal(client):
    resp = client.post("/api/phrase", json={"text": "foo bar foo", "phrase": "foo"})
    assert resp.json() == {"text": " bar "}


def test_phrase_by_index(client):
    client.put("/api/config", json={"customPhrases": ["", "bar", ""]})
    resp = client.post("/api/phrase", json={"text": "foo bar", "index": 2})
    assert resp.json() == {"text": "foo "}


def test_phrase_blank_slot(client):
    resp = client.post("/api/phrase", json={"text": "keep", "index": 1})
    assert resp.json() == {"text": "keep"}


def test_phrase_validation(client):
    assert client.post("/api/phrase", json={"text": "x"}).status_code == 422
    assert client.post("/api/phrase", json={"text": "x", "index": 5}).status_code == 422


def test_phrase_blank_ad_hoc(client):
    resp = client.post(
        "/api/phrase", json={"text": "keep these words", "phrase": " "}
    )
    assert resp.status_code == 200
    assert resp.json() == {"text": "keep these words"}


def test_choose(client):
    resp = client.post(
        "/api/choose", json={"text": "1. a\n2. b", "item": "Numbered List (1.)"}
    )
    assert resp.json() == {"text": "a\nb"}


def test_choose_unknown_item(client):
    resp = client.post("/api/choose", json={"text": "x", "item": "Nope"})
    assert resp.status_code == 404


def test_config_round_trip(client, store):
    record = client.get("/api/config").json()
    assert record["looseList"] is False

    record["enabledPatterns"]["task"] = False
    record["looseList"] = True
    resp = client.put("/api/config", json=record)
    assert resp.status_code == 200

    saved = store.load()
    assert not saved.is_enabled("task")
    assert saved.loose_list is True
    assert "Task List (- [ ])" not in client.get("/api/patterns").json()["items"]


def test_broken_config(client, store):
    store.path.write_text("{oops", encoding="utf-8")
    resp = client.get("/api/config")
    assert resp.status_code == 500
    assert "Cannot read configuration" in resp.json()["detail"]


@pytest.mark.parametrize(
    "handler",
    [list_patterns, remove, preview, phrase, choose, get_config, put_config],
)
def test_store_handlers_run_in_threadpool(handler):
    # handlers touching the config file are sync so FastAPI offloads them
    assert not inspect.iscoroutinefunction(handler)
