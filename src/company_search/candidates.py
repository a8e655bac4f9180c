"""
Candidate sources for the ranking pass.

Everything here is a pure function over strings and ContextItem records:
employer names pulled out of free-form job lines, use-case query templates
and the merged candidate pool. None of it knows about scoring.
"""
from __future__ import annotations
import re
from typing import Dict, Iterable, List, Optional, Sequence

from .config import (
    CONTEXT_ITEMS_MAX, DEFAULT_ROLES, DEFAULT_USE_CASE, DERIVED_COMPANIES_MAX,
    DERIVED_ITEMS_MAX, HANDWRITTEN_PROMPTS,
)
from .models import ContextItem

_WS = re.compile(r"\s+")

# "Engineer at Acme Corp, ..."
_AT_COMPANY = re.compile(r"\bat\s+([A-Z][A-Za-z0-9&'\- ]{2,})(?:,|\b)")
_AT_ANY = re.compile(r"\bat\s+([^,|]+)", re.IGNORECASE)
# "Senior PM - Globex"
_DASH_SPLIT = re.compile(r"[-–—]\s*")
_TAIL_ORG = re.compile(r"([A-Z][A-Za-z0-9&'\- ]{2,})$")
# "MIT · Stanford University | Initech LLC"
_SEGMENT_SPLIT = re.compile(r",|·|\|")
_ORG_NAME = re.compile(r"[A-Z][A-Za-z0-9&'\- ]{2,}")
_ORG_SUFFIX = re.compile(
    r"(University|College|Institute|Inc\.?|LLC|Ltd\.?|Labs|Systems|Technologies"
    r"|Software|Group|Holdings|Solutions)$",
    re.IGNORECASE,
)

WEB_FILTERS = [
    "site:linkedin.com/in {seed}",
    "site:linkedin.com/company {seed}",
    "site:linkedin.com/company {seed} posts",
    "site:news.ycombinator.com {seed}",
]

_COMPANY_TEMPLATES = [
    "employees", "leadership", "leadership team", "board of directors", "org chart",
    "hiring", "careers", "jobs", "benefits", "culture", "news", "press",
    "press release", "newsroom", "blog", "investor relations", "annual report",
    "ESG", "CSR", "sustainability", "product launch", "partnership",
    "acquisition", "pricing", "competitors",
]

_PEOPLE_TEMPLATES = [
    "CEO", "CTO", "Founder", "VP", "Director", "Manager",
    "leadership", "hiring", "press", "partnership",
]


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _tail_company(text: str) -> Optional[str]:
    parts = _DASH_SPLIT.split(text)
    if len(parts) < 2:
        return None
    m = _TAIL_ORG.search(parts[-1])
    return m.group(1).strip() if m else None


def extract_companies_from_text(text: str) -> List[str]:
    """
    Organization names mentioned in a profile line: "at Company", a
    capitalized tail after a dash, and separated segments that end with an
    organization suffix (Inc, LLC, University, ...).
    """
    if not text:
        return []
    cleaned = _WS.sub(" ", text)
    out: List[str] = []

    m = _AT_COMPANY.search(cleaned)
    if m:
        out.append(m.group(1).strip())

    tail = _tail_company(cleaned)
    if tail:
        out.append(tail)

    for seg in _SEGMENT_SPLIT.split(cleaned):
        seg = seg.strip()
        if _ORG_NAME.fullmatch(seg) and _ORG_SUFFIX.search(seg):
            out.append(seg)

    return _unique(c for c in out if c)


def extract_local_companies(items: Sequence[ContextItem],
                            max_items: int = CONTEXT_ITEMS_MAX) -> List[str]:
    """Employers named in the job line of the first `max_items` items."""
    out: List[str] = []
    for it in items[:max_items]:
        text = it.job_text()
        m = _AT_ANY.search(text)
        if m and m.group(1).strip():
            out.append(m.group(1).strip())
        tail = _tail_company(text)
        if tail:
            out.append(tail)
    return _unique(out)


def derive_companies(items: Sequence[ContextItem],
                     max_items: int = DERIVED_ITEMS_MAX,
                     limit: int = DERIVED_COMPANIES_MAX) -> List[str]:
    """Organization hints from every text field of the leading items."""
    out: List[str] = []
    for it in items[:max_items]:
        for text in it.texts():
            out.extend(extract_companies_from_text(text))
    return _unique(out)[:limit]


def extract_local_names(items: Sequence[ContextItem],
                        max_items: int = CONTEXT_ITEMS_MAX) -> List[str]:
    return _unique(it.name for it in items if it.name)[:max_items]


def build_use_case_templates(use_case: str, seed: str, companies: Sequence[str],
                             roles: Sequence[str], web_filters: bool = False) -> List[str]:
    """Query rewrites for one use case, optionally led by site: filters."""
    role = roles[0] if roles else "Engineer"
    first_company = companies[0] if companies else None
    web = [f.format(seed=seed) for f in WEB_FILTERS] if web_filters else []

    if use_case == "recruiting":
        out = [
            f"{seed} {role} resume",
            f"{seed} {role} currently hiring",
            f"{seed} {role} open to work",
            f"{seed} {role} remote",
            f"{seed} careers",
            f"{seed} jobs",
        ]
        if first_company:
            out.append(f"{seed} {role} at {first_company}")
    elif use_case == "sales":
        out = [
            f"{seed} Head of Procurement",
            f"{seed} VP Sales",
            f"{seed} Director of Operations",
            f"{seed} Decision maker",
            f"{seed} purchasing",
            f"{seed} vendor onboarding",
        ]
        if first_company:
            out.append(f"{seed} buyer at {first_company}")
    elif use_case == "investor":
        out = [f"{seed} {t}" for t in (
            "Partner", "Principal", "Associate", "Angel", "Family Office",
            "investor relations", "annual report", "10-K", "funding",
        )]
        if first_company:
            out.append(f"{seed} investor at {first_company}")
    elif use_case == "company":
        out = [f"{seed} {t}" for t in _COMPANY_TEMPLATES]
    else:
        out = [f"{seed} {t}" for t in _PEOPLE_TEMPLATES]

    return _unique(web + out)


def build_fuzzy_candidates(query: str, items: Sequence[ContextItem],
                           roles: Sequence[str] = DEFAULT_ROLES,
                           use_case: str = DEFAULT_USE_CASE,
                           web_filters: bool = False) -> List[str]:
    """Context- and template-derived candidates for one query."""
    companies = extract_local_companies(items)
    pool = build_use_case_templates(use_case, query, companies, roles, web_filters)
    pool += [f"{query} {r}" for r in roles]
    pool += [f"{query} {c}" for c in companies]
    pool += extract_local_names(items)
    pool += [f"{query} {p}" for p in HANDWRITTEN_PROMPTS]
    return _unique(pool)


def assemble_pool(query: str, bucket_members: Iterable[str],
                  items: Sequence[ContextItem] = (),
                  roles: Sequence[str] = DEFAULT_ROLES,
                  use_case: str = DEFAULT_USE_CASE,
                  web_filters: bool = False) -> List[str]:
    """Union of every candidate source, exact duplicates removed, order kept."""
    pool: Dict[str, None] = dict.fromkeys(bucket_members)
    pool.update(dict.fromkeys(build_fuzzy_candidates(query, items, roles, use_case, web_filters)))
    return list(pool)
