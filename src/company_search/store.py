"""
Runtime access to the prefix bucket artifact.

The artifact is deserialized at most once per BucketStore. The first caller
of load() owns the read; callers arriving while it is in flight wait on the
same Future instead of reading the file again. A missing or corrupt artifact
does not raise into query paths: the store logs the failure once, keeps the
IndexLoadError on `error` and serves an empty mapping with status "degraded".
"""
from __future__ import annotations
import bisect
import json
import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .builder import IndexBuilder, iter_csv_names
from .config import INDEX_PATH, MAX_POOL, PREFIX_LEN
from .errors import IndexBuildError, IndexLoadError

log = logging.getLogger(__name__)

PathLike = Union[str, Path]
BucketMap = Mapping[str, Tuple[str, ...]]

_EMPTY: BucketMap = MappingProxyType({})


def read_artifact(path: PathLike) -> Dict[str, Tuple[str, ...]]:
    """Parse and validate a bucket artifact. Raises IndexLoadError."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as exc:
        raise IndexLoadError(f"cannot load company index {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise IndexLoadError(f"{path}: expected a JSON object, got {type(raw).__name__}")
    buckets: Dict[str, Tuple[str, ...]] = {}
    for key, names in raw.items():
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise IndexLoadError(f"{path}: bucket {key!r} is not a list of strings")
        buckets[key] = tuple(names)
    return buckets


class BucketStore:
    """Lazy, load-once holder of the bucket map."""

    def __init__(self, index_path: PathLike = INDEX_PATH, *,
                 csv_fallback: Optional[PathLike] = None) -> None:
        self.index_path = Path(index_path)
        self.csv_fallback = Path(csv_fallback) if csv_fallback else None
        self.error: Optional[IndexLoadError] = None
        self._lock = threading.Lock()
        self._pending: Optional[Future] = None
        self._buckets: BucketMap = _EMPTY
        self._keys: List[str] = []
        self._names = 0

    # ------------- lifecycle -------------

    def load(self) -> BucketMap:
        """Return the bucket map, reading it on the first call only."""
        with self._lock:
            fut = self._pending
            owner = fut is None
            if owner:
                fut = self._pending = Future()
        if not owner:
            return fut.result()

        try:
            buckets = self._read()
        except IndexLoadError as exc:
            self.error = exc
            log.error("company index unavailable, serving empty results: %s", exc)
            fut.set_result(_EMPTY)
            return _EMPTY
        except BaseException as exc:
            fut.set_exception(exc)
            raise

        self._keys = sorted(buckets)
        self._names = sum(len(v) for v in buckets.values())
        self._buckets = MappingProxyType(buckets)
        log.info("company index ready: %d buckets, %d names", len(buckets), self._names)
        fut.set_result(self._buckets)
        return self._buckets

    def _read(self) -> Dict[str, Tuple[str, ...]]:
        if self.index_path.exists() or self.csv_fallback is None:
            return read_artifact(self.index_path)

        log.warning("%s missing, building buckets from %s", self.index_path, self.csv_fallback)
        builder = IndexBuilder()
        try:
            builder.add_many(iter_csv_names(self.csv_fallback))
        except IndexBuildError as exc:
            raise IndexLoadError(str(exc)) from exc
        return {k: tuple(v) for k, v in builder.buckets.items()}

    @property
    def status(self) -> str:
        with self._lock:
            fut = self._pending
        if fut is None or not fut.done():
            return "unloaded"
        return "degraded" if self.error is not None else "ready"

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    @property
    def name_count(self) -> int:
        return self._names

    # ------------- lookups -------------

    def lookup(self, key: str) -> Tuple[str, ...]:
        """Bucket for an exact prefix key; empty for unknown keys."""
        return self.load().get(key, ())

    def lookup_prefix(self, prefix: str, limit: int = MAX_POOL) -> List[str]:
        """
        Names whose bucket key matches `prefix`. Three or more characters
        address a single bucket; shorter prefixes union every bucket whose
        key starts with them, up to `limit` names.
        """
        buckets = self.load()
        if not prefix or limit <= 0:
            return []
        if len(prefix) >= PREFIX_LEN:
            return list(buckets.get(prefix[:PREFIX_LEN], ())[:limit])

        out: List[str] = []
        i = bisect.bisect_left(self._keys, prefix)
        while i < len(self._keys) and self._keys[i].startswith(prefix):
            out.extend(buckets[self._keys[i]])
            if len(out) >= limit:
                return out[:limit]
            i += 1
        return out


# Process-wide default store for the CLIs and the desktop client.
_default_store: Optional[BucketStore] = None


def get_store() -> BucketStore:
    """Return the default store, creating one on INDEX_PATH if needed."""
    global _default_store
    if _default_store is None:
        _default_store = BucketStore(INDEX_PATH)
    return _default_store


def init_store(index_path: PathLike, *, csv_fallback: Optional[PathLike] = None) -> BucketStore:
    """Replace the default store with one reading `index_path`."""
    global _default_store
    _default_store = BucketStore(index_path, csv_fallback=csv_fallback)
    return _default_store
