from __future__ import annotations
from pathlib import Path

# project root: the folder holding pyproject.toml
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# where the corpus and the built artifact live
DATA_ROOT = PROJECT_ROOT / "data"
CSV_PATH = DATA_ROOT / "companies.csv"
INDEX_PATH = DATA_ROOT / "company_index_prefix3.json"
NAME_COLUMN: str = "name"
ENCODING: str = "utf-8-sig"

# index shape
PREFIX_LEN: int = 3
MAX_PER_BUCKET: int = 500      # cap per prefix bucket to keep the artifact small

# builder progress logging
PROGRESS_EVERY_ROWS: int = 500_000

# query gates and result sizes
MIN_QUERY_LEN: int = 2
DEFAULT_LIMIT: int = 10        # company search
UI_LIMIT: int = 12             # recommendations dropdown
DEBOUNCE_MS: int = 120         # typeahead clients wait this long after a keystroke
MAX_LIMIT: int = 50
MAX_COMPANIES: int = 8

# /* ~~~ ranking ~~~ */
EDIT_DISTANCE_CAP: int = 2

# /* ~~~ cap how many names a 1-2 char prefix may pull into one ranking pass ~~~ */
MAX_POOL: int = 600

# context extraction windows
CONTEXT_ITEMS_MAX: int = 30
DERIVED_ITEMS_MAX: int = 20
DERIVED_COMPANIES_MAX: int = 10

# caller-side response cache and rate limiting (HTTP layer)
CACHE_TTL_SECONDS: float = 120.0
CACHE_MAX_ENTRIES: int = 500
RATE_LIMIT_WINDOW_SECONDS: float = 60.0
RATE_LIMIT_MAX: int = 60

# candidate vocabularies
DEFAULT_ROLES = [
    "CEO", "CTO", "Founder", "VP", "Director", "Manager",
    "Engineer", "Developer", "Designer", "Marketing", "Sales", "Product",
]

HANDWRITTEN_PROMPTS = [
    "business case study",
    "funding",
    "business model",
]

USE_CASES = ("people", "recruiting", "sales", "investor", "company")
DEFAULT_USE_CASE: str = "people"

# set COMPANY_SEARCH_VERBOSE=1 to turn on INFO logging in the CLIs
VERBOSE_ENV: str = "COMPANY_SEARCH_VERBOSE"
