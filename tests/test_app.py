import pytest

import craftshelf.launch as L
from craftshelf import create_app
from craftshelf.accounts import AccountStore
from craftshelf.models import Account, AccountKind
from craftshelf.settings import load_settings, save_settings

from tests.helpers import mock_popen_calls, write_json


@pytest.fixture
def app(tmp_path):
    settings_file = tmp_path / "craftshelf.json"
    save_settings(settings_file, {"root_dir": str(tmp_path / "mc")})
    return create_app(str(settings_file))


def test_settings_defaults_and_sanitizing(tmp_path):
    f = tmp_path / "s.json"
    assert load_settings(f) == {"root_dir": "~/.minecraft", "allocated_ram": 2048, "java_path": ""}
    f.write_text('{"allocated_ram": "lots", "theme": "dark", "java_path": "/opt/java"}')
    s = load_settings(f)
    assert s["allocated_ram"] == 2048
    assert s["java_path"] == "/opt/java"
    assert "theme" not in s
    f.write_text("{broken")
    assert load_settings(f)["root_dir"] == "~/.minecraft"

def test_account_store_active_cleared_on_remove():
    store = AccountStore()
    a = Account(username="Steve")
    b = Account(username="Alex", kind=AccountKind.MICROSOFT, uuid="u", access_token="t")
    store.add(a)
    store.add(b)
    store.set_active(b)
    store.remove(a)
    assert store.get_active() is b
    store.remove(b)
    assert store.get_active() is None
    assert store.all() == []

def test_versions_route_lists_local_installs(app, tmp_path):
    write_json(tmp_path / "mc" / "versions" / "fabric-1.20" / "fabric-1.20.json", {})
    resp = app.test_client().get("/versions")
    assert resp.status_code == 200
    assert resp.get_json() == [
        {"id": "fabric-1.20", "type": "modded", "url": None, "available": True},
    ]

def test_settings_route_roundtrip(app):
    c = app.test_client()
    resp = c.post("/settings", json={"allocated_ram": 4096, "unknown": 1})
    assert resp.status_code == 200
    assert resp.get_json()["allocated_ram"] == 4096
    assert c.get("/settings").get_json()["allocated_ram"] == 4096

def test_accounts_routes(app):
    c = app.test_client()
    assert c.post("/accounts", json={"username": "Steve"}).status_code == 201
    assert c.post("/accounts", json={"username": "Alex", "kind": "microsoft"}).status_code == 201
    assert c.post("/accounts", json={"username": "X", "kind": "mojang"}).status_code == 400
    data = c.get("/accounts").get_json()
    assert data["active"] == "Steve"
    assert {"username": "Alex", "kind": "microsoft"} in data["accounts"]

    assert c.post("/accounts/active", json={"username": "Alex"}).get_json() == {"active": "Alex"}
    assert c.post("/accounts/active", json={"username": "nobody"}).status_code == 404
    assert c.delete("/accounts/Alex").status_code == 204
    assert c.get("/accounts").get_json()["active"] is None

def test_launch_route_without_account(app, tmp_path, monkeypatch):
    FakePopen, popen_calls = mock_popen_calls()
    monkeypatch.setattr(L.subprocess, "Popen", FakePopen)
    resp = app.test_client().post("/launch", json={"id": "1.20", "url": "https://meta.test/x.json"})
    assert resp.status_code == 200
    assert resp.get_json()["ok"] is False
    assert popen_calls == []
    assert not (tmp_path / "mc").exists()

def test_launch_route_requires_id(app):
    resp = app.test_client().post("/launch", json={})
    assert resp.status_code == 400
