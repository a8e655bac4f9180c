from __future__ import annotations
import argparse
import json
import logging
import os
import sys

from . import config as CFG
from .builder import build_index
from .engine import Engine
from .errors import IndexBuildError
from .store import init_store

log = logging.getLogger("company_search")


def _setup_logging(verbose: bool) -> None:
    if verbose or os.environ.get(CFG.VERBOSE_ENV) == "1":
        logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")


def _cmd_build(args: argparse.Namespace) -> int:
    try:
        stats = build_index(
            args.csv, args.out,
            column=args.column,
            max_per_bucket=args.max_per_bucket,
            progress_every=args.progress_every,
        )
    except IndexBuildError as exc:
        log.error("build failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"buckets={stats.buckets:,} indexed={stats.indexed:,} "
          f"dropped={stats.dropped:,} malformed={stats.malformed:,} -> {args.out}")
    return 0


def _cmd_query(args: argparse.Namespace) -> int:
    eng = Engine(init_store(args.index, csv_fallback=args.csv_fallback))
    status = eng.load()
    if status == "degraded":
        print(f"warning: index unavailable ({eng.store.error})", file=sys.stderr)

    def run_query(q: str) -> None:
        res = eng.complete(q, limit=args.limit)
        if args.json:
            print(json.dumps(res.to_dict(), ensure_ascii=False, indent=2))
            return
        if not res.companies:
            print("(no matches)"); return
        for i, name in enumerate(res.companies, 1):
            print(f"{i:<3} {name}")

    if args.q:
        run_query(args.q)

    if args.repl:
        print("Type a company prefix (empty line to exit).")
        while True:
            try:
                q = input("> ").strip()
            except (EOFError, KeyboardInterrupt):
                break
            if not q:
                break
            run_query(q)
    return 0


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="company_search", description="Company name autocomplete")
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("build", help="Build the prefix index from a CSV corpus")
    b.add_argument("--csv", default=str(CFG.CSV_PATH), help="CSV with a name column")
    b.add_argument("--out", default=str(CFG.INDEX_PATH), help="JSON artifact to write")
    b.add_argument("--column", default=CFG.NAME_COLUMN)
    b.add_argument("--max-per-bucket", type=int, default=CFG.MAX_PER_BUCKET)
    b.add_argument("--progress-every", type=int, default=CFG.PROGRESS_EVERY_ROWS)
    b.set_defaults(func=_cmd_build)

    q = sub.add_parser("query", help="Rank company names for a prefix")
    q.add_argument("--index", default=str(CFG.INDEX_PATH))
    q.add_argument("--csv-fallback", default=None, help="CSV to bucket in memory if --index is missing")
    q.add_argument("-q", "--q", default=None, help="Single query to run once")
    q.add_argument("--limit", type=int, default=CFG.DEFAULT_LIMIT)
    q.add_argument("--json", action="store_true", help="Emit the JSON payload")
    q.add_argument("--repl", action="store_true", help="Interactive loop")
    q.set_defaults(func=_cmd_query)

    args = p.parse_args(argv)
    if args.cmd == "build" and args.max_per_bucket < 1:
        p.error("--max-per-bucket must be >= 1")
    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
