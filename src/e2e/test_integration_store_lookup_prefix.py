import json
from pathlib import Path
import pytest
from company_search import BucketStore

def _seed(tmp: Path) -> BucketStore:
    out = tmp / "index.json"
    out.write_text(json.dumps({
        "app": ["Apple", "Appian"],
        "acm": ["Acme Corp"],
        "abc": ["ABC Bakery"],
        "bet": ["Betamax"],
    }), encoding="utf-8")
    return BucketStore(out)

@pytest.mark.e2e
def test_three_chars_or_more_hit_one_bucket(tmp_path: Path):
    store = _seed(tmp_path)
    assert store.lookup_prefix("app") == ["Apple", "Appian"]
    assert store.lookup_prefix("apple pie") == ["Apple", "Appian"]
    assert store.lookup_prefix("zzz") == []

@pytest.mark.e2e
def test_short_prefix_unions_buckets_in_key_order(tmp_path: Path):
    store = _seed(tmp_path)
    assert store.lookup_prefix("a") == ["ABC Bakery", "Acme Corp", "Apple", "Appian"]
    assert store.lookup_prefix("ap") == ["Apple", "Appian"]
    assert store.lookup_prefix("a", limit=2) == ["ABC Bakery", "Acme Corp"]

@pytest.mark.e2e
def test_empty_prefix_or_limit(tmp_path: Path):
    store = _seed(tmp_path)
    assert store.lookup_prefix("") == []
    assert store.lookup_prefix("app", limit=0) == []
    assert store.lookup_prefix("app", limit=1) == ["Apple"]
