import json
import logging
from typing import Dict
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULTS = {
    "root_dir": "~/.minecraft",
    "allocated_ram": 2048,
    "java_path": "",
}

def load_settings(settings_file: Path) -> Dict:
    settings = dict(DEFAULTS)
    try:
        if settings_file.exists():
            data = json.loads(settings_file.read_text("utf-8"))
            if isinstance(data, dict):
                settings.update({k: data[k] for k in DEFAULTS if k in data})
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", settings_file, e)
    return _sanitize(settings)

def _sanitize(settings: Dict) -> Dict:
    out = dict(settings)
    if not isinstance(out["root_dir"], str) or not out["root_dir"].strip():
        out["root_dir"] = DEFAULTS["root_dir"]
    try:
        out["allocated_ram"] = int(out["allocated_ram"])
    except (TypeError, ValueError):
        out["allocated_ram"] = DEFAULTS["allocated_ram"]
    if out["allocated_ram"] <= 0:
        out["allocated_ram"] = DEFAULTS["allocated_ram"]
    if not isinstance(out["java_path"], str):
        out["java_path"] = DEFAULTS["java_path"]
    return out

def save_settings(settings_file: Path, settings: dict) -> None:
    data = _sanitize({k: settings.get(k, DEFAULTS[k]) for k in DEFAULTS})
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
