import pytest
from company_search import bounded_edit_distance, rank_fuzzy, score

@pytest.mark.e2e
@pytest.mark.parametrize("a,b,expected", [
    ("abc", "abc", 0),
    ("cat", "bat", 1),
    ("abcd", "abdc", 1),     # adjacent swap
    ("acme", "acne", 1),
    ("kitten", "sitting", 3),
    ("a", "abcd", 3),        # length gap alone is past the cap
    ("", "ab", 2),
])
def test_bounded_edit_distance(a, b, expected):
    assert bounded_edit_distance(a, b) == expected
    assert bounded_edit_distance(b, a) == expected

@pytest.mark.e2e
def test_edit_distance_respects_cap_argument():
    assert bounded_edit_distance("kitten", "sitting", cap=3) == 3
    assert bounded_edit_distance("kitten", "sitting", cap=1) == 2

@pytest.mark.e2e
def test_prefix_matches_outrank_the_rest():
    out = rank_fuzzy("goo", ["Foogle", "Google", "Goodyear Tire"], 3)
    assert set(out[:2]) == {"Google", "Goodyear Tire"}
    assert out[-1] == "Foogle"

@pytest.mark.e2e
def test_ties_keep_input_order():
    names = ["Alpha", "Bravo", "Delta"]
    assert rank_fuzzy("zz", names, 3) == names
    assert rank_fuzzy("zz", list(reversed(names)), 3) == list(reversed(names))

@pytest.mark.e2e
def test_deterministic():
    pool = ["Acme Corp", "Acme Inc", "ACME Holdings", "Acne Studios", "Acorn"]
    first = rank_fuzzy("acme", pool, 5)
    for _ in range(5):
        assert rank_fuzzy("acme", pool, 5) == first

@pytest.mark.e2e
def test_normalized_duplicates_collapse_to_first():
    out = rank_fuzzy("acme", ["ACME  Corp", "acme corp", "Acme Corp ", "Acme Inc"], 5)
    assert out.count("ACME  Corp") == 1
    assert "acme corp" not in out and "Acme Corp " not in out
    assert len(out) == 2

@pytest.mark.e2e
def test_limit():
    pool = [f"Acme {i}" for i in range(20)]
    assert len(rank_fuzzy("acme", pool, 5)) == 5
    assert rank_fuzzy("acme", pool, 0) == []
    assert rank_fuzzy("acme", [], 5) == []

@pytest.mark.e2e
def test_score_terms():
    assert score("Acme", "acme") > score("Acme Corporation", "acme")
    assert score("Acme Corp", "acm") > score("The Acme Corp", "acm")
    # "a w" shares its acronym with Amazon Web Services only
    assert score("Amazon Web Services", "a w") > score("Amazon Retail Group", "a w")

@pytest.mark.e2e
def test_prefix_dominance_over_substring():
    out = rank_fuzzy("app", ["Bapple Co", "Apple Inc", "Appleton Labs"], 3)
    assert set(out[:2]) == {"Apple Inc", "Appleton Labs"}
    assert out[2] == "Bapple Co"
