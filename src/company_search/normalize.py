from __future__ import annotations
import re
from typing import List, Optional

from .config import PREFIX_LEN

_WS = re.compile(r"\s+")
# token delimiters for acronyms: anything that is not a letter or digit
_ACRONYM_SPLIT = re.compile(r"[\W_]+")


def normalize(text: str) -> str:
    """
    Normalize text for scoring: lowercase, collapse whitespace runs to one
    space, trim. Display strings are never replaced by this form.
    """
    return _WS.sub(" ", text.lower()).strip()


def tokens(text: str) -> List[str]:
    """Whitespace tokens of an already normalized string."""
    return [t for t in text.split(" ") if t]


def acronym(text: str) -> str:
    """
    First character of every word, lowercased.

    >>> acronym("Amazon Web Services")
    'aws'
    """
    return "".join(w[0].lower() for w in _ACRONYM_SPLIT.split(text) if w)


def prefix_key(name: str, length: int = PREFIX_LEN) -> Optional[str]:
    """Bucket key of a trimmed name, or None when it is too short to have one."""
    lower = name.lower()
    if len(lower) < length:
        return None
    return lower[:length]
