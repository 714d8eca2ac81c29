from __future__ import annotations
import asyncio
from pathlib import Path
from flask import Blueprint, current_app, request, jsonify, abort

from .accounts import AccountStore
from .catalog import fetch_catalog
from .errors import LauncherError
from .launch import launch
from .models import Account, AccountKind, VersionEntry
from .scanning import list_local_versions
from .settings import load_settings, save_settings

bp = Blueprint("craftshelf", __name__)

def _cfg():
    c = current_app.config
    return Path(c["SETTINGS_FILE"]), c["ACCOUNTS"]

def _version_json(v: VersionEntry) -> dict:
    return {"id": v.id, "type": v.type, "url": v.url, "available": v.available}

def _account_json(a: Account) -> dict:
    return {"username": a.username, "kind": a.kind.value}

def _find_account(accounts: AccountStore, username: str) -> Account:
    for a in accounts.all():
        if a.username == username:
            return a
    abort(404)

@bp.get("/versions")
def local_versions():
    SETTINGS_FILE, _ = _cfg()
    settings = load_settings(SETTINGS_FILE)
    try:
        versions = list_local_versions(settings["root_dir"])
    except LauncherError as e:
        return jsonify({"error": str(e)}), 500
    return jsonify([_version_json(v) for v in versions])

@bp.get("/versions/remote")
def remote_versions():
    try:
        versions = asyncio.run(fetch_catalog())
    except LauncherError as e:
        return jsonify({"error": str(e)}), 502
    return jsonify([_version_json(v) for v in versions])

@bp.post("/launch")
def launch_version():
    SETTINGS_FILE, accounts = _cfg()
    data = request.get_json(silent=True) or {}
    vid = data.get("id")
    if not isinstance(vid, str) or not vid:
        return jsonify({"ok": False, "message": "Missing version id."}), 400
    version = VersionEntry(
        id=vid,
        type=data.get("type") or "release",
        url=data.get("url") or None,
        available=bool(data.get("available")),
    )
    settings = load_settings(SETTINGS_FILE)
    ok, msg = asyncio.run(launch(
        version,
        accounts.get_active(),
        settings["root_dir"],
        allocated_ram=settings["allocated_ram"],
        java_path=settings["java_path"] or None,
    ))
    return jsonify({"ok": ok, "message": msg})

@bp.get("/accounts")
def list_accounts():
    _, accounts = _cfg()
    active = accounts.get_active()
    return jsonify({
        "accounts": [_account_json(a) for a in accounts.all()],
        "active": active.username if active else None,
    })

@bp.post("/accounts")
def add_account():
    _, accounts = _cfg()
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    if not username:
        return jsonify({"error": "Missing username."}), 400
    try:
        kind = AccountKind(data.get("kind", "offline"))
    except ValueError:
        return jsonify({"error": f"Unknown account kind: {data.get('kind')}"}), 400
    account = Account(username=username, kind=kind)
    if data.get("uuid"):
        account.uuid = data["uuid"]
    if data.get("access_token"):
        account.access_token = data["access_token"]
    accounts.add(account)
    if accounts.get_active() is None:
        accounts.set_active(account)
    return jsonify(_account_json(account)), 201

@bp.post("/accounts/active")
def set_active_account():
    _, accounts = _cfg()
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    accounts.set_active(_find_account(accounts, username) if username else None)
    return jsonify({"active": username or None})

@bp.delete("/accounts/<username>")
def remove_account(username):
    _, accounts = _cfg()
    accounts.remove(_find_account(accounts, username))
    return "", 204

@bp.get("/settings")
def settings():
    SETTINGS_FILE, _ = _cfg()
    return jsonify(load_settings(SETTINGS_FILE))

@bp.post("/settings")
def settings_post():
    SETTINGS_FILE, _ = _cfg()
    settings = load_settings(SETTINGS_FILE)
    data = request.get_json(silent=True) or {}
    settings.update({k: data[k] for k in settings if k in data})
    try:
        save_settings(SETTINGS_FILE, settings)
    except OSError as e:
        return jsonify({"error": f"Failed to save settings: {e}"}), 500
    return jsonify(load_settings(SETTINGS_FILE))
