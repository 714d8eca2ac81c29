from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import List, Optional

import httpx

from .errors import FilesystemError, ParseError, ResolutionError
from .models import (
    Artifact,
    AssetIndex,
    DownloadInfo,
    LaunchPaths,
    Library,
    Rule,
    VersionDescriptor,
)
from .paths import plan
from .repository import download

logger = logging.getLogger(__name__)

def _obj(value) -> dict:
    return value if isinstance(value, dict) else {}

def _str(raw: dict, key: str, where: str, default=None):
    value = raw.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ParseError(f"{where}: {key!r} must be a string, got {value!r}")
    return value

def _safe_relative(path: str, where: str) -> str:
    posix, win = PurePosixPath(path), PureWindowsPath(path)
    if posix.is_absolute() or win.is_absolute() or win.drive or ".." in posix.parts or ".." in win.parts:
        raise ParseError(f"{where}: artifact path {path!r} escapes the libraries directory")
    return path

def _parse_rules(raw, where: str) -> List[Rule]:
    rules: List[Rule] = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        os_info = item.get("os")
        os_name = _str(os_info, "name", where) if isinstance(os_info, dict) else None
        rules.append(Rule(action=_str(item, "action", where, "allow"), os=os_name))
    return rules

def _parse_library(item) -> Library:
    if not isinstance(item, dict) or not isinstance(item.get("name"), str):
        raise ParseError(f"Library entry without a name: {item!r}")
    where = f"library {item['name']}"
    artifact = None
    raw = _obj(item.get("downloads")).get("artifact")
    if isinstance(raw, dict):
        path, url = _str(raw, "path", where), _str(raw, "url", where)
        if path and url:
            artifact = Artifact(path=_safe_relative(path, where), url=url)
    return Library(name=item["name"], artifact=artifact,
                   rules=_parse_rules(item.get("rules"), where))

def parse_descriptor(data, version_id: str) -> VersionDescriptor:
    """Build a VersionDescriptor from the upstream version JSON layout.

    Fields of the wrong type raise ParseError rather than leaking into paths or argv.
    """
    if not isinstance(data, dict):
        raise ParseError(f"Metadata for {version_id} is not a JSON object.")
    where = f"Metadata for {version_id}"
    main_class = data.get("mainClass")
    if not isinstance(main_class, str) or not main_class:
        raise ParseError(f"{where} has no mainClass.")

    client = None
    raw_client = _obj(data.get("downloads")).get("client")
    if isinstance(raw_client, dict) and _str(raw_client, "url", where):
        size = raw_client.get("size") or 0
        if not isinstance(size, int) or isinstance(size, bool):
            raise ParseError(f"{where}: client size must be an integer, got {size!r}")
        client = DownloadInfo(url=raw_client["url"], size=size)

    asset_index = None
    raw_assets = data.get("assetIndex")
    if isinstance(raw_assets, dict) and _str(raw_assets, "id", where):
        asset_index = AssetIndex(id=raw_assets["id"], url=_str(raw_assets, "url", where, ""))

    libraries = data.get("libraries") or []
    if not isinstance(libraries, list):
        raise ParseError(f"{where} has a malformed libraries list.")

    return VersionDescriptor(
        id=_str(data, "id", where) or version_id,
        main_class=main_class,
        inherits_from=_str(data, "inheritsFrom", where),
        client=client,
        asset_index=asset_index,
        libraries=[_parse_library(item) for item in libraries],
    )

def load_descriptor(path: Path, version_id: str) -> VersionDescriptor:
    try:
        text = Path(path).read_text("utf-8")
    except OSError as e:
        raise FilesystemError(f"Cannot read metadata {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Malformed metadata {path}: {e}") from e
    return parse_descriptor(data, version_id)

def merge_parent(child: VersionDescriptor, parent: VersionDescriptor) -> VersionDescriptor:
    """Fold the parent into the child; child libraries come first, duplicates are kept."""
    child.libraries = child.libraries + parent.libraries
    if child.client is None:
        child.client = parent.client
    if child.asset_index is None:
        child.asset_index = parent.asset_index
    return child

async def resolve(
    version_id: str,
    available: bool,
    url: Optional[str],
    paths: LaunchPaths,
    *,
    client: httpx.AsyncClient,
) -> VersionDescriptor:
    """Load the effective descriptor for `version_id`, fetching metadata when needed."""
    if not available and not paths.version_json.exists():
        if not url:
            raise ResolutionError(f"No metadata source for version {version_id}.")
        await download(url, paths.version_json, client=client)

    descriptor = load_descriptor(paths.version_json, version_id)

    parent_id = descriptor.inherits_from
    if parent_id:
        parent_json = plan(parent_id, paths.root_dir).version_json
        if parent_json.exists():
            descriptor = merge_parent(descriptor, load_descriptor(parent_json, parent_id))
        else:
            logger.warning("%s inherits from %s but %s is missing; continuing without it",
                           version_id, parent_id, parent_json)
    return descriptor
