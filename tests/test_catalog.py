import pytest

from craftshelf.catalog import MANIFEST_URL, fetch_catalog
from craftshelf.errors import MalformedResponse, NetworkError
from craftshelf.scanning import list_local_versions

from tests.helpers import fake_http, write_json


@pytest.mark.asyncio
async def test_fetch_catalog():
    manifest = {
        "latest": {"release": "1.20"},
        "versions": [
            {"id": "1.20", "type": "release", "url": "https://meta.test/1.20.json"},
            {"id": "23w31a", "type": "snapshot", "url": "https://meta.test/23w31a.json"},
        ],
    }
    client, calls = fake_http({MANIFEST_URL: manifest})
    async with client:
        versions = await fetch_catalog(client)
    assert calls == [MANIFEST_URL]
    assert [(v.id, v.type) for v in versions] == [("1.20", "release"), ("23w31a", "snapshot")]
    assert all(not v.available and v.url for v in versions)

@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"nope": []},
    {"versions": [{"id": "1.20", "type": "release"}]},
    {"versions": ["1.20"]},
])
async def test_fetch_catalog_schema_mismatch(body):
    client, _ = fake_http({MANIFEST_URL: body})
    async with client:
        with pytest.raises(MalformedResponse):
            await fetch_catalog(client)

@pytest.mark.asyncio
async def test_fetch_catalog_not_json():
    client, _ = fake_http({MANIFEST_URL: b"<html>"})
    async with client:
        with pytest.raises(MalformedResponse):
            await fetch_catalog(client)

@pytest.mark.asyncio
async def test_fetch_catalog_http_error():
    client, _ = fake_http({})
    async with client:
        with pytest.raises(NetworkError):
            await fetch_catalog(client)


def test_list_local_versions(tmp_path):
    assert list_local_versions(tmp_path) == []
    write_json(tmp_path / "versions" / "fabric-1.20" / "fabric-1.20.json", {})
    (tmp_path / "versions" / "1.20").mkdir()
    (tmp_path / "versions" / "stray.txt").write_text("x")
    versions = list_local_versions(tmp_path)
    assert [v.id for v in versions] == ["1.20", "fabric-1.20"]
    assert all(v.type == "modded" and v.available and v.url is None for v in versions)
