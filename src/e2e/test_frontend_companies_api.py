import json
from pathlib import Path
import pytest
from company_search import BucketStore, Engine
from company_web import create_app

def _seed(tmp: Path) -> Engine:
    out = tmp / "index.json"
    out.write_text(json.dumps({"acm": ["Acme Corp", "Acme Inc", "Acme Labs"]}), encoding="utf-8")
    return Engine(BucketStore(out))

@pytest.mark.e2e
def test_companies_endpoint(tmp_path: Path):
    client = create_app(_seed(tmp_path)).test_client()
    rv = client.get("/api/companies?q=acm&limit=2")
    assert rv.status_code == 200
    data = rv.get_json()
    assert set(data) == {"companies", "query", "total"}
    assert data["query"] == "acm"
    assert data["total"] == len(data["companies"]) == 2

@pytest.mark.e2e
def test_companies_limit_is_clamped(tmp_path: Path):
    client = create_app(_seed(tmp_path)).test_client()
    assert client.get("/api/companies?q=acm&limit=0").get_json()["total"] == 1
    assert client.get("/api/companies?q=acm&limit=999").get_json()["total"] == 3
    assert client.get("/api/companies?q=acm&limit=abc").get_json()["total"] == 3

@pytest.mark.e2e
def test_companies_empty_query(tmp_path: Path):
    client = create_app(_seed(tmp_path)).test_client()
    rv = client.get("/api/companies?q=")
    assert rv.status_code == 200
    assert rv.get_json() == {"companies": [], "query": "", "total": 0}

@pytest.mark.e2e
def test_recommendations_get_kinds(tmp_path: Path):
    client = create_app(_seed(tmp_path)).test_client()
    assert client.get("/api/recommendations?kind=companies&q=").get_json() == []

    rv = client.get("/api/recommendations?kind=companies&q=acme")
    assert rv.status_code == 200
    assert rv.get_json()["total"] == 3

    rv = client.get("/api/recommendations?kind=people&q=acme")
    assert rv.status_code == 400
    assert rv.get_json()["error"] == "unsupported_kind"
