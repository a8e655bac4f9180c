"""
Offline builder for the company prefix index.

Streams a CSV of company names once and partitions them into buckets keyed
by the first PREFIX_LEN lowercase characters:

    {
        "acm": ["Acme Corp", "Acme Inc", ...],   # first-seen order, <= MAX_PER_BUCKET
        "app": ["Apple Inc", "Appleton Labs", ...],
        ...
    }

Memory stays bounded by (distinct prefixes x MAX_PER_BUCKET) plus the set of
names already seen, whatever the size of the corpus.
"""
from __future__ import annotations
import csv
import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set, Union

from .config import (
    CSV_PATH, ENCODING, INDEX_PATH, MAX_PER_BUCKET, NAME_COLUMN,
    PREFIX_LEN, PROGRESS_EVERY_ROWS,
)
from .errors import IndexBuildError
from .models import BuildStats
from .normalize import prefix_key

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class IndexBuilder:
    """Accumulates names into capped prefix buckets."""

    def __init__(self,
                 max_per_bucket: int = MAX_PER_BUCKET,
                 prefix_len: int = PREFIX_LEN,
                 progress_every: int = PROGRESS_EVERY_ROWS) -> None:
        if max_per_bucket < 1:
            raise ValueError("max_per_bucket must be >= 1")
        self.max_per_bucket = max_per_bucket
        self.prefix_len = prefix_len
        self.progress_every = max(1, int(progress_every))
        self.buckets: Dict[str, List[str]] = {}
        self.stats = BuildStats()
        self._seen: Set[str] = set()

    def add(self, raw: Optional[str]) -> bool:
        """
        Push one source row through the pipeline. `None` marks a row the
        reader could not parse. Returns True when the name landed in a bucket.
        """
        self.stats.rows += 1
        if self.stats.rows % self.progress_every == 0:
            log.info("processed %d rows (%d buckets)", self.stats.rows, len(self.buckets))

        if raw is None:
            self.stats.malformed += 1
            return False
        name = raw.strip()
        if not name:
            self.stats.blank += 1
            return False
        if name in self._seen:
            self.stats.duplicates += 1
            return False
        self._seen.add(name)

        key = prefix_key(name, self.prefix_len)
        if key is None:
            self.stats.too_short += 1
            return False

        bucket = self.buckets.setdefault(key, [])
        if len(bucket) >= self.max_per_bucket:
            self.stats.dropped += 1
            return False
        bucket.append(name)
        self.stats.indexed += 1
        return True

    def add_many(self, names: Iterable[Optional[str]]) -> BuildStats:
        for raw in names:
            self.add(raw)
        self.stats.buckets = len(self.buckets)
        return self.stats

    def save(self, path: PathLike) -> None:
        """Write the bucket map as compact JSON, atomically."""
        path = Path(path)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(self.buckets, f, ensure_ascii=False, separators=(",", ":"))
            os.replace(tmp, path)
        except OSError as exc:
            tmp.unlink(missing_ok=True)
            raise IndexBuildError(f"cannot write index artifact {path}: {exc}") from exc
        log.info("wrote %s (%d buckets, %d bytes)", path, len(self.buckets), path.stat().st_size)


def iter_csv_names(path: PathLike, column: str = NAME_COLUMN) -> Iterator[Optional[str]]:
    """
    Stream the `column` field of every CSV row without buffering the file.

    Yields None for rows that fail to parse or lack the column, so the caller
    can count them and keep going. Raises IndexBuildError when the file
    cannot be opened or has no such column in its header.
    """
    path = Path(path)
    try:
        f = open(path, "r", encoding=ENCODING, errors="replace", newline="")
    except OSError as exc:
        raise IndexBuildError(f"cannot read company corpus {path}: {exc}") from exc

    with f:
        reader = csv.DictReader(f)
        try:
            header = reader.fieldnames
        except (csv.Error, OSError) as exc:
            raise IndexBuildError(f"cannot parse header of {path}: {exc}") from exc
        if not header or column not in header:
            raise IndexBuildError(f"{path} has no {column!r} column (header: {header})")

        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as exc:
                log.debug("skipping malformed row near line %d: %s", reader.line_num, exc)
                yield None
                continue
            except OSError as exc:
                raise IndexBuildError(f"read failed in {path} near line {reader.line_num}: {exc}") from exc
            value = row.get(column)
            yield value if isinstance(value, str) else None


def build_index(csv_path: PathLike = CSV_PATH,
                out_path: PathLike = INDEX_PATH,
                *,
                column: str = NAME_COLUMN,
                max_per_bucket: int = MAX_PER_BUCKET,
                progress_every: int = PROGRESS_EVERY_ROWS) -> BuildStats:
    """Read the corpus, bucket it and write the artifact. One pass."""
    log.info("reading %s", csv_path)
    builder = IndexBuilder(max_per_bucket=max_per_bucket, progress_every=progress_every)
    stats = builder.add_many(iter_csv_names(csv_path, column))
    log.info("writing %s", out_path)
    builder.save(out_path)
    log.info(
        "done: buckets=%d indexed=%d dropped=%d duplicates=%d malformed=%d",
        stats.buckets, stats.indexed, stats.dropped, stats.duplicates, stats.malformed,
    )
    return stats
