from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from .errors import MalformedResponse, NetworkError
from .models import VersionEntry

logger = logging.getLogger(__name__)

MANIFEST_URL = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"

def parse_catalog(data) -> List[VersionEntry]:
    if not isinstance(data, dict) or not isinstance(data.get("versions"), list):
        raise MalformedResponse("Version manifest has no 'versions' list.")
    entries: List[VersionEntry] = []
    for item in data["versions"]:
        if not isinstance(item, dict):
            raise MalformedResponse(f"Unexpected version record: {item!r}")
        try:
            vid, vtype, url = item["id"], item["type"], item["url"]
        except KeyError as e:
            raise MalformedResponse(f"Version record missing {e.args[0]!r}.") from None
        if not all(isinstance(v, str) for v in (vid, vtype, url)):
            raise MalformedResponse(f"Unexpected version record: {item!r}")
        entries.append(VersionEntry(id=vid, type=vtype, url=url, available=False))
    return entries

async def fetch_catalog(
    client: Optional[httpx.AsyncClient] = None,
    url: str = MANIFEST_URL,
) -> List[VersionEntry]:
    """Fetch the remote list of installable versions."""
    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(timeout=30.0, follow_redirects=True)
    try:
        response = await client.get(url)
        response.raise_for_status()
        data = response.json()
    except httpx.HTTPError as e:
        raise NetworkError(f"Failed to fetch version manifest: {e}") from e
    except ValueError as e:
        raise MalformedResponse(f"Version manifest is not JSON: {e}") from e
    finally:
        if own_client:
            await client.aclose()

    entries = parse_catalog(data)
    logger.info("Fetched %d versions from %s", len(entries), url)
    return entries
