"""
Fuzzy ranking of candidate strings against a partial query.

Scoring runs on normalized forms (see normalize.normalize); the strings
returned are the original display strings. A pass is a pure function of
(query, candidates, limit): no I/O and no hidden state.

Score terms, strongest first:
    +6      candidate starts with the query
    +3      candidate contains the query
    +1.2    per query token contained in the candidate
    +2.5    candidate acronym starts with the query acronym
    -1.0 x  min(bounded edit distance, 3)
    -0.01 x extra characters beyond the query length
"""
from __future__ import annotations
from typing import Iterable, List, Tuple

from .config import EDIT_DISTANCE_CAP
from .normalize import acronym, normalize, tokens

PREFIX_BONUS = 6.0
SUBSTRING_BONUS = 3.0
TOKEN_BONUS = 1.2
ACRONYM_BONUS = 2.5
EDIT_PENALTY = 1.0
EDIT_PENALTY_MAX = 3
LENGTH_PENALTY = 0.01


def bounded_edit_distance(a: str, b: str, cap: int = EDIT_DISTANCE_CAP) -> int:
    """
    Optimal string alignment distance (insert, delete, substitute, swap of
    adjacent characters), saturated at cap + 1.

    Only the diagonal band |i - j| <= cap is evaluated, so the cost is
    O(len(a) * cap). Returns cap + 1 straight away when the lengths alone
    differ by more than cap, and as soon as two consecutive rows are past it.

    >>> bounded_edit_distance("cat", "bat")
    1
    >>> bounded_edit_distance("kitten", "sitting")
    3
    """
    la, lb = len(a), len(b)
    over = cap + 1
    if abs(la - lb) > cap:
        return over
    if a == b:
        return 0

    prev2: List[int] = []
    prev = [j if j <= cap else over for j in range(lb + 1)]
    prev_min = 0
    for i in range(1, la + 1):
        cur = [over] * (lb + 1)
        if i <= cap:
            cur[0] = i
        lo, hi = max(1, i - cap), min(lb, i + cap)
        row_min = cur[0]
        for j in range(lo, hi + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            v = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                v = min(v, prev2[j - 2] + 1)
            if v > over:
                v = over
            cur[j] = v
            if v < row_min:
                row_min = v
        # no later cell can drop below the cap once two rows are past it
        if row_min >= over and prev_min >= over:
            return over
        prev2, prev, prev_min = prev, cur, row_min
    return min(prev[lb], over)


def _parts(text: str) -> Tuple[str, str]:
    n = normalize(text)
    return n, acronym(n)


def _score(cn: str, ca: str, qn: str, qa: str, q_tokens: List[str]) -> float:
    s = 0.0
    if cn.startswith(qn):
        s += PREFIX_BONUS
    if qn in cn:
        s += SUBSTRING_BONUS
    for t in q_tokens:
        if t in cn:
            s += TOKEN_BONUS
    if qa and ca.startswith(qa):
        s += ACRONYM_BONUS
    s -= min(bounded_edit_distance(cn, qn, EDIT_DISTANCE_CAP), EDIT_PENALTY_MAX) * EDIT_PENALTY
    s -= max(0, len(cn) - len(qn)) * LENGTH_PENALTY
    return s


def score(candidate: str, query: str) -> float:
    """Score a single candidate against a query."""
    cn, ca = _parts(candidate)
    qn, qa = _parts(query)
    return _score(cn, ca, qn, qa, tokens(qn))


def rank_fuzzy(query: str, candidates: Iterable[str], limit: int) -> List[str]:
    """
    Order `candidates` by score, drop normalized duplicates (first one wins,
    casing included) and keep the best `limit`. Equal scores keep their
    input order.
    """
    if limit <= 0:
        return []
    qn, qa = _parts(query)
    q_tokens = tokens(qn)

    scored = []
    for c in candidates:
        cn, ca = _parts(c)
        scored.append((_score(cn, ca, qn, qa, q_tokens), cn, c))
    scored.sort(key=lambda r: r[0], reverse=True)

    out: List[str] = []
    seen = set()
    for _, cn, c in scored:
        if cn in seen:
            continue
        seen.add(cn)
        out.append(c)
        if len(out) >= limit:
            break
    return out
