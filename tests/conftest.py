from __future__ import annotations
from typing import Dict, List, Optional, Union

import pytest
import requests

from ps3upd.core import AppConfig


class FakeResponse:
    def __init__(self, content: bytes = b"", status_code: int = 200,
                 headers: Optional[Dict[str, str]] = None,
                 fail_after: Optional[int] = None,
                 fail_with: Optional[BaseException] = None):
        self.content = content
        self.status_code = status_code
        self.headers = headers or {}
        self.fail_after = fail_after  # raise mid-stream after N bytes
        self.fail_with = fail_with or requests.exceptions.ChunkedEncodingError("connection reset")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def iter_content(self, chunk_size: int = 1):
        sent = 0
        for i in range(0, len(self.content), chunk_size):
            if self.fail_after is not None and sent >= self.fail_after:
                raise self.fail_with
            chunk = self.content[i:i + chunk_size]
            sent += len(chunk)
            yield chunk

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, routes: Optional[Dict[str, Union[FakeResponse, Exception]]] = None):
        self.routes = routes or {}
        self.calls: List[Dict] = []

    def get(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        r = self.routes.get(url)
        if r is None:
            raise requests.exceptions.ConnectionError(f"no route for {url}")
        if isinstance(r, Exception):
            raise r
        return r


MANIFEST_URL = "https://cdn.test/tpl/np/{title_id}/{title_id}-ver.xml"


def make_manifest(title_id: str, packages: List[Dict[str, str]]) -> str:
    parts = [f'<?xml version="1.0" encoding="UTF-8"?>',
             f'<titlepatch status="alive" titleid="{title_id}">',
             f'<tag name="{title_id}_T1" popup="true" signoff="true">']
    for p in packages:
        p = dict(p)
        title = p.pop("title", None)
        attrs = " ".join(f'{k}="{v}"' for k, v in p.items())
        if title is None:
            parts.append(f"<package {attrs}/>")
        else:
            parts.append(f"<package {attrs}><paramsfo><TITLE>{title}</TITLE></paramsfo></package>")
    parts.append("</tag></titlepatch>")
    return "\n".join(parts)


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(manifest_url_template=MANIFEST_URL, target_dir=tmp_path / "out", timeout=5)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("PS3UPD_DIR", str(tmp_path / "cfg"))
    for name in ("PS3UPD_CONFIG", "PS3UPD_OUT_DIR", "PS3UPD_VERIFY_TLS",
                 "PS3UPD_TIMEOUT", "PS3UPD_MANIFEST_URL"):
        monkeypatch.delenv(name, raising=False)
