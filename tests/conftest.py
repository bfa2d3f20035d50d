from pathlib import Path

import httpx
import pytest

import coversnap
import coversnap.http
from coversnap.extractors import RuleContext

CORSPROXY = "https://corsproxy.io/"
CODETABS = "https://api.codetabs.com/"
ALLORIGINS_GET = "https://api.allorigins.win/get"
ALLORIGINS_RAW = "https://api.allorigins.win/raw"
WSRV = "https://wsrv.nl/"


@pytest.fixture
def fixture_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixture_dir):
    def _loader(name: str) -> str:
        with open(fixture_dir / name, "r", encoding="utf-8") as f:
            return f.read()
    return _loader


@pytest.fixture
def wechat_html(load_fixture):
    return load_fixture("wechat_article.html")


@pytest.fixture
def bilibili_html(load_fixture):
    return load_fixture("bilibili_video.html")


@pytest.fixture
def zhihu_html(load_fixture):
    return load_fixture("zhihu_article.html")


@pytest.fixture
def xhs_html(load_fixture):
    return load_fixture("xhs_note.html")


@pytest.fixture
def generic_html(load_fixture):
    return load_fixture("generic_article.html")


@pytest.fixture
def make_ctx():
    def _make(platform=coversnap.Platform.UNKNOWN, url: str = "https://example.com/post/1") -> RuleContext:
        return RuleContext(platform=platform, source_url=url)
    return _make


def text_response(text: str, status: int = 200) -> httpx.Response:
    return httpx.Response(status, text=text, request=httpx.Request("GET", "https://relay.test/"))


def json_response(data, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=data, request=httpx.Request("GET", "https://relay.test/"))


def image_response(content: bytes, content_type: str = "image/jpeg", status: int = 200) -> httpx.Response:
    return httpx.Response(
        status,
        content=content,
        headers={"content-type": content_type},
        request=httpx.Request("GET", "https://relay.test/"),
    )


class MockHTTPXClient:
    """Stands in for httpx.Client; routes are matched by URL prefix.

    A route value may be an httpx.Response, an exception instance (raised),
    or a callable taking the requested URL.
    """

    def __init__(self, routes: dict | None = None):
        self.routes = routes or {}
        self.closed = False
        self.calls: list[tuple[str, dict]] = []

    def request(self, method: str, url: str, **kwargs):
        self.calls.append((url, kwargs))
        for prefix, value in self.routes.items():
            if not url.startswith(prefix):
                continue
            if isinstance(value, Exception):
                raise value
            if callable(value):
                return value(url)
            return value
        return httpx.Response(404, request=httpx.Request(method, url), text="not found")

    def get(self, url: str, **kwargs):
        return self.request("GET", url, **kwargs)

    def close(self):
        self.closed = True


@pytest.fixture
def mock_httpx_client(monkeypatch):
    holder = {"instance": None}

    def _factory(routes=None):
        inst = MockHTTPXClient(routes=routes)
        holder["instance"] = inst
        monkeypatch.setattr(coversnap.http.httpx, "Client", lambda *a, **k: inst)
        return inst

    return _factory


@pytest.fixture
def history_home(monkeypatch, tmp_path):
    monkeypatch.setenv("COVERSNAP_HOME", str(tmp_path / ".coversnap"))
    return tmp_path / ".coversnap"
