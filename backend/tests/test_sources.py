"""Outbound catalog fetches against mocked transports."""

import asyncio

import httpx
import pytest

from app.celestrak import CelesTrakClient
from app.http_client import get_with_retry
from app.n2yo import N2YOClient
from app.sources import build_fetcher, read_tle_file
from satcore.catalog import ActiveCatalog
from satcore.errors import CatalogFetchError

from conftest import ISS_L1, ISS_L2, ISS_NAME

TLE_TEXT = f"{ISS_NAME}\r\n{ISS_L1}\r\n{ISS_L2}\r\n"


def test_retries_after_timeouts():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, text="ok")

    resp = asyncio.run(get_with_retry(
        "https://example.test/x", retries=3, backoff=0, transport=httpx.MockTransport(handler),
    ))
    assert resp.text == "ok"
    assert len(calls) == 3


def test_gives_up_after_last_attempt():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    with pytest.raises(CatalogFetchError, match="after 2 attempts"):
        asyncio.run(get_with_retry("https://example.test/x", retries=2, backoff=0, transport=transport))


def test_client_errors_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    with pytest.raises(CatalogFetchError, match="404"):
        asyncio.run(get_with_retry(
            "https://example.test/x", retries=5, backoff=0, transport=httpx.MockTransport(handler),
        ))
    assert len(calls) == 1


def test_celestrak_group():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(200, text=TLE_TEXT)

    client = CelesTrakClient(base_url="https://celestrak.test/gp.php", transport=httpx.MockTransport(handler), backoff=0)
    entries = asyncio.run(client.fetch_group("STATIONS"))

    assert seen == {"GROUP": "stations", "FORMAT": "TLE"}
    assert [e.name for e in entries] == [ISS_NAME]
    assert entries[0].line2 == ISS_L2


def test_n2yo_requires_api_key(monkeypatch):
    monkeypatch.setattr("app.config.N2YO_API_KEY", None)
    client = N2YOClient(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    with pytest.raises(CatalogFetchError, match="API key"):
        asyncio.run(client.fetch_tle(25544))


def test_n2yo_catalog_above_skips_failures():
    def handler(request):
        assert request.url.params["apiKey"] == "secret"
        path = request.url.path
        if "/above/" in path:
            return httpx.Response(200, json={"above": [{"satid": 25544}, {"satid": 99999}, {"satid": 25545}]})
        if path.endswith("/tle/25544"):
            return httpx.Response(200, json={"info": {"satname": "SPACE STATION"}, "tle": f"{ISS_L1}\r\n{ISS_L2}"})
        if path.endswith("/tle/99999"):
            return httpx.Response(200, json={"info": {"satname": "GONE"}, "tle": ""})
        return httpx.Response(404)

    client = N2YOClient(
        api_key="secret",
        base_url="https://n2yo.test/rest/v1/satellite/",
        transport=httpx.MockTransport(handler),
        backoff=0,
    )
    entries = asyncio.run(client.fetch_catalog_above(41.7, -76.0, limit=2))

    assert [e.name for e in entries] == ["SPACE STATION"]


def test_read_tle_file(tmp_path):
    path = tmp_path / "stations.txt"
    path.write_text(TLE_TEXT * 2, encoding="utf-8")
    entries = asyncio.run(read_tle_file(path))
    assert len(entries) == 2

    with pytest.raises(CatalogFetchError):
        asyncio.run(read_tle_file(tmp_path / "missing.txt"))


def test_build_fetcher(monkeypatch, tmp_path):
    path = tmp_path / "tle.txt"
    path.write_text(TLE_TEXT, encoding="utf-8")
    monkeypatch.setattr("app.config.CATALOG_FILE", str(path))

    fetch, label = build_fetcher("FILE")
    assert label == f"file:{path}"
    assert [e.name for e in asyncio.run(fetch())] == [ISS_NAME]

    _, label = build_fetcher("celestrak")
    assert label.startswith("celestrak:")

    with pytest.raises(ValueError):
        build_fetcher("space-track")


def test_redirect_loop_is_not_retried():
    def requests_made(retries):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(302, headers={"Location": str(request.url)})

        with pytest.raises(CatalogFetchError, match="failed:"):
            asyncio.run(get_with_retry(
                "https://example.test/x", retries=retries, backoff=0, transport=httpx.MockTransport(handler),
            ))
        return len(calls)

    # Same number of requests whatever the retry budget: one attempt only
    assert requests_made(3) == requests_made(1) > 1


def test_redirect_loop_reported_as_failed_load():
    """A redirect loop during reload leaves the catalog empty and records the error."""
    def handler(request):
        return httpx.Response(302, headers={"Location": str(request.url)})

    client = CelesTrakClient(base_url="https://celestrak.test/gp.php", transport=httpx.MockTransport(handler), backoff=0)
    catalog = ActiveCatalog()
    result = asyncio.run(catalog.reload(client.fetch_group, "celestrak"))

    assert not result.ok
    assert not result.superseded
    assert catalog.last_error == result.error
    assert len(catalog) == 0


@pytest.mark.parametrize("body", [[1, 2, 3], "text", {"error": "Invalid API key"}])
def test_n2yo_rejects_unexpected_json(body):
    client = N2YOClient(
        api_key="secret",
        base_url="https://n2yo.test/rest/v1/satellite",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body)),
        backoff=0,
    )
    with pytest.raises(CatalogFetchError):
        asyncio.run(client.fetch_tle(25544))


def test_n2yo_malformed_above_list_is_a_failed_load():
    client = N2YOClient(
        api_key="secret",
        base_url="https://n2yo.test/rest/v1/satellite",
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"above": "none"})),
        backoff=0,
    )
    result = asyncio.run(ActiveCatalog().reload(client.fetch_catalog_above, "n2yo"))
    assert not result.ok
