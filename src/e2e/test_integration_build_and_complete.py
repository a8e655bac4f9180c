import json
from pathlib import Path
import pytest
from company_search import BucketStore, Engine, build_index

def _seed(tmp: Path) -> Path:
    csv_path = tmp / "companies.csv"
    csv_path.write_text(
        "name\n"
        "Acme Corp\n"
        "Acme Inc\n"
        "Acme Corp\n"
        "\" \"\n"
        "Ab\n"
        "Apple\n",
        encoding="utf-8",
    )
    return csv_path

@pytest.mark.e2e
def test_build_then_complete(tmp_path: Path):
    out = tmp_path / "index.json"
    stats = build_index(_seed(tmp_path), out)

    assert json.loads(out.read_text(encoding="utf-8")) == {
        "acm": ["Acme Corp", "Acme Inc"],
        "app": ["Apple"],
    }
    assert stats.rows == 6
    assert stats.indexed == 3
    assert stats.duplicates == 1
    assert stats.blank == 1
    assert stats.too_short == 1
    assert stats.buckets == 2

    eng = Engine(BucketStore(out))
    res = eng.complete("acm")
    assert sorted(res.companies) == ["Acme Corp", "Acme Inc"]
    assert res.to_dict() == {"companies": res.companies, "query": "acm", "total": 2}
    assert eng.complete("app").companies == ["Apple"]
