import io
import json
import tarfile
from pathlib import Path

import httpx


def touch(p: Path, data: bytes = b""):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(data or b"stub")


def write_json(p: Path, data: dict):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data), encoding="utf-8")


def fake_http(routes: dict):
    """AsyncClient answering from `routes` (url -> bytes|dict); counts calls per url."""
    routes = {str(httpx.URL(k)): v for k, v in routes.items()}
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        calls.append(url)
        if url not in routes:
            return httpx.Response(404, content=b"not found")
        body = routes[url]
        if isinstance(body, dict):
            return httpx.Response(200, json=body)
        return httpx.Response(200, content=body)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client, calls


def jdk_tarball(member: str, data: bytes = b"#!/bin/sh\n") -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        info = tarfile.TarInfo(member)
        info.size = len(data)
        info.mode = 0o644
        tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def mock_popen_calls():
    calls = []
    class _P:
        def __init__(self, *a, **kw):
            calls.append((a, kw))
    return _P, calls
