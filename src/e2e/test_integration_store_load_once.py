import json
import threading
import time
from pathlib import Path
import pytest
import company_search.store as store_mod
from company_search import BucketStore

def _seed(tmp: Path) -> Path:
    out = tmp / "index.json"
    out.write_text(json.dumps({"acm": ["Acme Corp", "Acme Inc"], "app": ["Apple"]}), encoding="utf-8")
    return out

@pytest.mark.e2e
def test_concurrent_first_calls_read_once(tmp_path: Path, monkeypatch):
    path = _seed(tmp_path)
    calls = []
    real = store_mod.read_artifact

    def slow_read(p):
        calls.append(p)
        time.sleep(0.05)
        return real(p)

    monkeypatch.setattr(store_mod, "read_artifact", slow_read)
    store = BucketStore(path)
    assert store.status == "unloaded"

    results = []
    threads = [threading.Thread(target=lambda: results.append(store.load())) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)
    assert store.status == "ready"
    assert store.lookup("acm") == ("Acme Corp", "Acme Inc")

    store.lookup("app")
    assert len(calls) == 1

@pytest.mark.e2e
def test_loaded_map_is_read_only(tmp_path: Path):
    store = BucketStore(_seed(tmp_path))
    buckets = store.load()
    with pytest.raises(TypeError):
        buckets["zzz"] = ("Zed",)
    assert store.bucket_count == 2
    assert store.name_count == 3
