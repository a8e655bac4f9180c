"""
Company Name Autocomplete

Offline, a large CSV of company names is compressed into a JSON map of
three-letter lowercase prefixes to capped, first-seen-ordered name lists.
Online, the map is loaded once per process and each keystroke ranks the
matching bucket (plus context-derived candidates) with a fuzzy scorer.

Main entry points:
    build_index(csv_path, out_path): offline build of the prefix artifact
    BucketStore(index_path):        lazy, load-once artifact access
    rank_fuzzy(query, pool, limit): the ranking pass
    Engine(store):                  company completion and recommendations

Example:
    from company_search import BucketStore, Engine

    engine = Engine(BucketStore("data/company_index_prefix3.json"))
    print(engine.complete("acm", limit=5).companies)
"""

# src/company_search/__init__.py
from .builder import IndexBuilder, build_index  # re-export
from .engine import Engine
from .errors import CompanySearchError, IndexBuildError, IndexLoadError
from .models import BuildStats, CompanyMatches, ContextItem, Recommendations
from .ranking import bounded_edit_distance, rank_fuzzy, score
from .store import BucketStore, get_store, init_store

__version__ = "1.0.0"
__all__ = [
    "IndexBuilder", "build_index",
    "BucketStore", "get_store", "init_store",
    "Engine",
    "rank_fuzzy", "score", "bounded_edit_distance",
    "BuildStats", "CompanyMatches", "ContextItem", "Recommendations",
    "CompanySearchError", "IndexBuildError", "IndexLoadError",
]
