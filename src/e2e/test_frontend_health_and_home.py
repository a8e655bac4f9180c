import json
from pathlib import Path
import pytest
from company_search import BucketStore, Engine
from company_web import create_app

def _seed(tmp: Path) -> Engine:
    out = tmp / "index.json"
    out.write_text(json.dumps({"acm": ["Acme Corp"], "app": ["Apple"]}), encoding="utf-8")
    return Engine(BucketStore(out))

@pytest.mark.e2e
def test_health_reports_index_state(tmp_path: Path):
    eng = _seed(tmp_path)
    client = create_app(eng).test_client()
    assert client.get("/health").get_json()["index"] == "unloaded"

    eng.load()
    data = client.get("/health").get_json()
    assert data == {"ok": True, "index": "ready", "buckets": 2, "companies": 2}

@pytest.mark.e2e
def test_health_degraded(tmp_path: Path):
    eng = Engine(BucketStore(tmp_path / "missing.json"))
    client = create_app(eng).test_client()
    client.get("/api/companies?q=acme")
    data = client.get("/health").get_json()
    assert data["ok"] is False
    assert data["index"] == "degraded"

@pytest.mark.e2e
def test_home_page_renders(tmp_path: Path):
    client = create_app(_seed(tmp_path)).test_client()
    r = client.get("/")
    assert r.status_code == 200
    assert r.mimetype == "text/html"
    html = r.get_data(as_text=True)
    assert "Company autocomplete" in html
    assert "/api/recommendations" in html
