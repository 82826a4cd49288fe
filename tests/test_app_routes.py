import importlib

import pytest

pytest.importorskip("flask")


@pytest.fixture
def client():
    app_module = importlib.reload(importlib.import_module("app"))
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as test_client:
        yield test_client


def test_randomize_returns_boards(client):
    resp = client.post("/randomize", json={"rows": ["aaa", "a.a", "bbb"], "seed": 3, "count": 2})
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["ok"] is True
    assert payload["boards"] == [["aaa", "a.a", "bbb"], ["aaa", "a.a", "bbb"]]
    assert payload["width"] == 3 and payload["height"] == 3

    latest = client.get("/result/latest").get_json()
    assert latest["boards"] == payload["boards"]


def test_randomize_rejects_missing_rows(client):
    resp = client.post("/randomize", json={})
    assert resp.status_code == 400
    assert resp.get_json()["ok"] is False


def test_randomize_rejects_small_boards(client):
    resp = client.post("/randomize", json={"rows": ["ab", "cd"]})
    assert resp.status_code == 400
    assert "3 x 3" in resp.get_json()["reason"]


def test_progress_is_never_cached(client):
    client.post("/randomize", json={"rows": ["...", ".f.", "..."], "seed": 1})
    resp = client.get("/progress3")
    assert resp.headers["Cache-Control"] == "no-store, max-age=0"
    snap = resp.get_json()
    assert snap["status"] == "Done"
    assert snap["boards_done"] == 1
