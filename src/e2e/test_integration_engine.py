import json
from pathlib import Path
import pytest
from company_search import BucketStore, Engine
from company_search.models import ContextItem

def _seed(tmp: Path) -> Engine:
    out = tmp / "index.json"
    out.write_text(json.dumps({
        "acm": ["Acme Corp", "Acme Inc"],
        "glo": ["Globex Corp"],
    }), encoding="utf-8")
    return Engine(BucketStore(out))

@pytest.mark.e2e
def test_complete_gates_and_limits(tmp_path: Path):
    eng = _seed(tmp_path)
    assert eng.complete("").companies == []
    assert eng.complete("a").companies == []
    assert eng.complete("acm", limit=0).companies == []
    assert eng.complete("acm", limit=1).total == 1
    assert eng.complete("ACME").companies[0] in ("Acme Corp", "Acme Inc")
    assert eng.load() == "ready"

@pytest.mark.e2e
def test_recommend_merges_context_companies(tmp_path: Path):
    eng = _seed(tmp_path)
    rec = eng.recommend(
        "acme",
        [{"currentJob": "Engineer at Globex Corp"}, ContextItem(name="Ada")],
        use_case="not-a-use-case",
    )
    assert rec.companies[0] == "Globex Corp"
    assert set(rec.companies[1:]) == {"Acme Corp", "Acme Inc"}
    assert 0 < len(rec.suggestions) <= 12
    assert "acme CEO" in rec.suggestions
    assert len(set(rec.suggestions)) == len(rec.suggestions)
    assert set(rec.to_dict()) == {"query", "companies", "suggestions"}

@pytest.mark.e2e
def test_recommend_short_query_and_limit(tmp_path: Path):
    eng = _seed(tmp_path)
    empty = eng.recommend("a")
    assert empty.companies == [] and empty.suggestions == []
    assert len(eng.recommend("acme", limit=3).suggestions) == 3

@pytest.mark.e2e
def test_degraded_engine_answers_empty(tmp_path: Path):
    eng = Engine(BucketStore(tmp_path / "missing.json"))
    assert eng.complete("acme").companies == []
    assert eng.load() == "degraded"
    # templates still work without the index
    assert eng.recommend("acme").suggestions
