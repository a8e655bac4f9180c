from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class ContextItem:
    """
    One loosely shaped result row (e.g. a people-search hit) that candidate
    sources mine for employer names. Every attribute is optional.
    """
    name: Optional[str] = None
    current_job: Optional[str] = None
    title_summary: Optional[str] = None
    about_summary: Optional[str] = None
    headline: Optional[str] = None

    # JSON payloads use camelCase; python callers may pass snake_case
    _KEYS = {
        "name": ("name",),
        "current_job": ("currentJob", "current_job"),
        "title_summary": ("titleSummary", "title_summary"),
        "about_summary": ("aboutSummary", "about_summary"),
        "headline": ("headline",),
    }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ContextItem":
        values: Dict[str, Optional[str]] = {}
        for attr, keys in cls._KEYS.items():
            for key in keys:
                v = raw.get(key)
                if isinstance(v, str) and v:
                    values[attr] = v
                    break
        return cls(**values)

    def job_text(self) -> str:
        """Current job line, falling back to the title summary."""
        return self.current_job or self.title_summary or ""

    def texts(self) -> List[str]:
        return [t for t in (self.current_job, self.title_summary,
                            self.about_summary, self.headline) if t]


@dataclass
class BuildStats:
    rows: int = 0          # rows pulled from the source
    malformed: int = 0     # unparsable rows or rows without a name field
    blank: int = 0
    duplicates: int = 0
    too_short: int = 0     # no prefix key could be formed
    dropped: int = 0       # bucket already full
    indexed: int = 0
    buckets: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class CompanyMatches:
    companies: List[str]
    query: str

    @property
    def total(self) -> int:
        return len(self.companies)

    def to_dict(self) -> Dict[str, Any]:
        return {"companies": list(self.companies), "query": self.query, "total": self.total}


@dataclass(frozen=True)
class Recommendations:
    query: str
    companies: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "companies": list(self.companies),
            "suggestions": list(self.suggestions),
        }
