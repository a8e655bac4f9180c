import logging
from pathlib import Path
import pytest
import company_search.store as store_mod
from company_search import BucketStore, IndexLoadError

@pytest.mark.e2e
def test_missing_artifact_degrades(tmp_path: Path, monkeypatch):
    store = BucketStore(tmp_path / "missing.json")
    assert store.lookup("acm") == ()
    assert store.lookup_prefix("ac") == []
    assert store.status == "degraded"
    assert isinstance(store.error, IndexLoadError)

    # the failure is sticky: no second read
    def boom(_p):
        raise AssertionError("read twice")
    monkeypatch.setattr(store_mod, "read_artifact", boom)
    assert store.lookup("acm") == ()

@pytest.mark.e2e
@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"acm": "Acme"}', '{"acm": [1]}'])
def test_malformed_artifact_degrades(tmp_path: Path, payload: str):
    path = tmp_path / "index.json"
    path.write_text(payload, encoding="utf-8")
    store = BucketStore(path)
    assert store.load() == {}
    assert store.status == "degraded"
    assert store.bucket_count == 0

@pytest.mark.e2e
def test_csv_fallback_when_artifact_missing(tmp_path: Path):
    csv_path = tmp_path / "companies.csv"
    csv_path.write_text("name\nAcme Corp\nApple\n", encoding="utf-8")
    store = BucketStore(tmp_path / "missing.json", csv_fallback=csv_path)
    assert store.lookup("acm") == ("Acme Corp",)
    assert store.status == "ready"

@pytest.mark.e2e
def test_csv_fallback_that_also_fails(tmp_path: Path):
    store = BucketStore(tmp_path / "missing.json", csv_fallback=tmp_path / "missing.csv")
    assert store.load() == {}
    assert store.status == "degraded"

@pytest.mark.e2e
def test_degraded_load_is_logged_once_at_error(tmp_path: Path, caplog):
    caplog.set_level(logging.INFO, logger="company_search.store")
    store = BucketStore(tmp_path / "missing.json")
    store.lookup("acm")
    store.lookup_prefix("ac")
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "missing.json" in errors[0].getMessage()
