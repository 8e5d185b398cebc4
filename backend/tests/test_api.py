"""HTTP API. The lifespan (and so the catalog autoload) does not run here."""

import pytest
from fastapi.testclient import TestClient

from app.main import app

from conftest import ISS_L1, ISS_L2, ISS_NAME

client = TestClient(app)

AT = "2019-12-10T00:00:00Z"


@pytest.fixture(autouse=True)
def loaded(active_catalog, iss, decayed):
    active_catalog.replace([iss, decayed], source="test")
    return active_catalog


def test_health():
    """Health check reports the catalog size."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "catalog_size": 2}


def test_catalog_status():
    data = client.get("/api/catalog").json()
    assert data["size"] == 2
    assert data["source"] == "test"
    assert data["last_error"] is None


def test_positions_skip_unavailable_objects():
    """Only the ISS has a state; the decayed record is left out."""
    response = client.get("/api/satellites", params={"at": AT, "globe_radius": 2})
    assert response.status_code == 200
    data = response.json()
    assert data["globe_radius"] == 2
    assert [s["name"] for s in data["satellites"]] == [ISS_NAME]
    sat = data["satellites"][0]
    assert sat["index"] == 0
    assert sat["norad_id"] == 25544
    assert -90 <= sat["geodetic"]["lat"] <= 90


def test_positions_unavailable_when_load_failed(loaded):
    loaded.replace([])
    loaded.last_error = "upstream down"
    response = client.get("/api/satellites")
    assert response.status_code == 503


def test_satellite_detail():
    data = client.get("/api/satellites/0", params={"at": AT}).json()
    assert data["line1"] == ISS_L1
    assert data["line2"] == ISS_L2
    assert data["country"] == "ISS"
    assert 92 < data["period_min"] < 93
    assert 7.4 < data["speed_km_s"] < 7.9


def test_unknown_index_is_404():
    assert client.get("/api/satellites/7").status_code == 404


def test_unavailable_record_is_422():
    assert client.get("/api/satellites/1", params={"at": AT}).status_code == 422
    assert client.get("/api/satellites/1/coverage", params={"at": AT}).status_code == 422


def test_look_angles():
    response = client.get("/api/satellites/0/look", params={"lat": 35, "lon": -100, "at": AT})
    assert response.status_code == 200
    data = response.json()
    assert 0 <= data["azimuth"] < 360
    assert data["visible"] == (data["elevation"] > 0)


def test_look_angles_validates_observer():
    assert client.get("/api/satellites/0/look", params={"lat": 95, "lon": 0}).status_code == 422


def test_passes():
    response = client.get(
        "/api/satellites/0/passes",
        params={"lat": 35, "lon": -100, "start": AT, "hours": 24, "min_elevation": 10},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["observer"] == {"lat": 35, "lon": -100, "alt_km": 0}
    assert 2 <= len(data["passes"]) <= 6
    for p in data["passes"]:
        assert p["duration_minutes"] < 15


def test_passes_window_is_capped():
    response = client.get("/api/satellites/0/passes", params={"lat": 35, "lon": -100, "hours": 1000})
    assert response.status_code == 400


def test_coverage():
    data = client.get("/api/satellites/0/coverage", params={"at": AT}).json()
    assert len(data["points"]) == 65
    assert data["points"][0] == data["points"][-1]
    assert data["latlon"][0] == data["latlon"][-1]
    assert 15 < data["angle_deg"] < 25


def test_sun():
    data = client.get("/api/sun", params={"at": "2024-06-20T20:51:00Z", "radius": 3}).json()
    assert data["lat"] == pytest.approx(23.44, abs=0.05)
    assert data["lat"] == data["declination"]
    d = data["direction"]
    assert (d["x"] ** 2 + d["y"] ** 2 + d["z"] ** 2) ** 0.5 == pytest.approx(3.0)


def test_reload_rejects_unknown_source():
    response = client.post("/api/catalog/reload", params={"source": "space-track"})
    assert response.status_code == 400


def test_reload_from_file(monkeypatch, tmp_path):
    path = tmp_path / "tle.txt"
    path.write_text(f"{ISS_NAME}\n{ISS_L1}\n{ISS_L2}\n", encoding="utf-8")
    monkeypatch.setattr("app.config.CATALOG_FILE", str(path))

    response = client.post("/api/catalog/reload", params={"source": "file"})
    assert response.status_code == 200
    assert response.json() == {"source": f"file:{path}", "loaded": 1, "error": None}
    assert client.get("/api/health").json()["catalog_size"] == 1


def test_failed_reload_keeps_catalog(monkeypatch, tmp_path):
    monkeypatch.setattr("app.config.CATALOG_FILE", str(tmp_path / "missing.txt"))

    response = client.post("/api/catalog/reload", params={"source": "file"})
    assert response.status_code == 502
    assert response.json()["error"]
    assert client.get("/api/health").json()["catalog_size"] == 2


def test_coverage_center_is_geocentric():
    """The footprint centre is the geocentric sub-satellite point over the mean sphere."""
    data = client.get("/api/satellites/0/coverage", params={"at": AT, "min_elevation": 10}).json()
    center = data["center"]
    assert set(center) == {"lat", "lon", "alt_km"}
    assert 350 < center["alt_km"] < 450
    assert abs(center["lat"]) <= 52

    schema = app.openapi()["components"]["schemas"]
    assert schema["CoverageResponse"]["properties"]["center"]["$ref"].endswith("/SubSatellitePoint")
    assert "mean Earth sphere" in schema["SubSatellitePoint"]["properties"]["alt_km"]["description"]


def test_coverage_shrinks_with_elevation_mask():
    wide = client.get("/api/satellites/0/coverage", params={"at": AT}).json()
    narrow = client.get("/api/satellites/0/coverage", params={"at": AT, "min_elevation": 10}).json()
    assert narrow["angle_deg"] < wide["angle_deg"]
