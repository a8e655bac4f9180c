# company_search/engine.py
from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional, Sequence, Union

from . import config as CFG
from .candidates import assemble_pool, derive_companies
from .models import CompanyMatches, ContextItem, Recommendations
from .normalize import normalize
from .ranking import rank_fuzzy
from .store import BucketStore

log = logging.getLogger(__name__)

ContextLike = Union[ContextItem, Mapping]


def _as_items(items: Iterable[ContextLike]) -> list[ContextItem]:
    out = []
    for it in items:
        if isinstance(it, ContextItem):
            out.append(it)
        elif isinstance(it, Mapping):
            out.append(ContextItem.from_dict(it))
    return out


class Engine:
    """
    Thin orchestration layer that glues together:
      - the bucket store (lazy, load-once artifact access),
      - candidate sources (bucket members, context extraction, templates),
      - the fuzzy ranking pass.

    Public API (used by the CLI, Flask and the desktop client):
      * load():                     force the artifact load, return the status
      * complete(query, limit):     ranked company names for a partial name
      * recommend(query, items, …): company hints plus ranked query rewrites
    """

    def __init__(self, store: Optional[BucketStore] = None) -> None:
        self.store = store if store is not None else BucketStore(CFG.INDEX_PATH)

    # ------------- lifecycle -------------

    def load(self) -> str:
        self.store.load()
        return self.store.status

    # ------------- query -------------

    # /* ~~~ company names for a partial name, ranked ~~~ */
    def complete(self, query: str, *, limit: int = CFG.DEFAULT_LIMIT) -> CompanyMatches:
        if len(query.strip()) < CFG.MIN_QUERY_LEN or limit <= 0:
            return CompanyMatches(companies=[], query=query)
        pool = self.store.lookup_prefix(normalize(query), CFG.MAX_POOL)
        return CompanyMatches(companies=rank_fuzzy(query, pool, limit), query=query)

    # /* ~~~ suggestion dropdown: employer hints + ranked query rewrites ~~~ */
    def recommend(
        self,
        query: str,
        items: Iterable[ContextLike] = (),
        *,
        use_case: str = CFG.DEFAULT_USE_CASE,
        roles: Sequence[str] = CFG.DEFAULT_ROLES,
        web_filters: bool = False,
        limit: int = CFG.UI_LIMIT,
    ) -> Recommendations:
        if len(query.strip()) < CFG.MIN_QUERY_LEN:
            return Recommendations(query=query)
        if use_case not in CFG.USE_CASES:
            use_case = CFG.DEFAULT_USE_CASE

        ctx = _as_items(items)
        members = self.store.lookup_prefix(normalize(query), CFG.MAX_POOL)
        local = rank_fuzzy(query, members, CFG.MAX_COMPANIES)
        companies = list(dict.fromkeys(derive_companies(ctx) + local))[:CFG.MAX_COMPANIES]

        pool = assemble_pool(query, members, ctx, roles, use_case, web_filters)
        suggestions = rank_fuzzy(query, pool, limit)
        log.debug("recommend %r: pool=%d companies=%d", query, len(pool), len(companies))
        return Recommendations(query=query, companies=companies, suggestions=suggestions)
