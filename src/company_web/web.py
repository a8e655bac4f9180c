from __future__ import annotations
import argparse
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from flask import Flask, Response, current_app, jsonify, request

from company_search import config as CFG
from company_search.cache import RateLimiter, TTLCache
from company_search.engine import Engine
from company_search.store import BucketStore

log = logging.getLogger(__name__)

EXT_KEY = "company_search"


@dataclass
class Services:
    engine: Engine
    response_cache: TTLCache
    limiter: RateLimiter


def _services() -> Services:
    return current_app.extensions[EXT_KEY]


def _client_ip() -> str:
    xf = request.headers.get("X-Forwarded-For")
    if xf:
        return xf.split(",")[0].strip()
    cf = request.headers.get("CF-Connecting-IP")
    if cf:
        return cf.strip()
    return request.remote_addr or "unknown"


def _limit_arg(default: int) -> int:
    k = request.args.get("limit", default, type=int)
    return max(1, min(CFG.MAX_LIMIT, k))


def _context_signature(items: list) -> str:
    sig = [(it.get("name"), it.get("currentJob") or it.get("titleSummary"))
           for it in items[:CFG.DERIVED_ITEMS_MAX]]
    return json.dumps(sig, ensure_ascii=False, default=str)


# ---------- API ----------
def api_companies():
    q = request.args.get("q", "", type=str).strip()
    if not q:
        return jsonify({"companies": [], "query": q, "total": 0})
    res = _services().engine.complete(q, limit=_limit_arg(CFG.DEFAULT_LIMIT))
    return jsonify(res.to_dict())


def api_recommendations_get():
    q = request.args.get("q", "", type=str).strip()
    kind = request.args.get("kind", "", type=str).lower()
    if not q:
        return jsonify([])
    if kind != "companies":
        return jsonify({"error": "unsupported_kind", "kind": kind}), 400
    res = _services().engine.complete(q, limit=_limit_arg(CFG.DEFAULT_LIMIT))
    return jsonify(res.to_dict())


def api_recommendations_post():
    svc = _services()
    decision = svc.limiter.check(_client_ip())
    if not decision.ok:
        body = {"error": "rate_limited", "backoffSeconds": decision.retry_after,
                "companies": [], "suggestions": []}
        resp = jsonify(body)
        resp.status_code = 429
        resp.headers["Retry-After"] = str(decision.retry_after)
        return resp

    body: Any = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    query = str(body.get("query") or "")
    ctx = body.get("context")
    raw_items = ctx.get("items") if isinstance(ctx, dict) else None
    items = [it for it in raw_items if isinstance(it, dict)] if isinstance(raw_items, list) else []
    use_case = str(body.get("useCase") or CFG.DEFAULT_USE_CASE).lower()
    roles = body.get("roles")
    if not (isinstance(roles, list) and all(isinstance(r, str) for r in roles)):
        roles = CFG.DEFAULT_ROLES
    web_filters = bool(body.get("webFilters", False))
    limit = body.get("limit")
    if isinstance(limit, int) and not isinstance(limit, bool):
        limit = max(1, min(CFG.MAX_LIMIT, limit))
    else:
        limit = CFG.UI_LIMIT

    key = ("v1", query.lower(), use_case, web_filters, limit, tuple(roles), _context_signature(items))
    cached = svc.response_cache.get(key)
    if cached is not None:
        return jsonify(cached)

    rec = svc.engine.recommend(query, items, use_case=use_case, roles=roles,
                               web_filters=web_filters, limit=limit)
    value = rec.to_dict()
    svc.response_cache.set(key, value)
    return jsonify(value)


def health():
    store = _services().engine.store
    status = store.status
    return jsonify({
        "ok": status != "degraded",
        "index": status,
        "buckets": store.bucket_count,
        "companies": store.name_count,
    })


# ---------- UI ----------
def home():
    # single page: inline CSS and JS, talks to the two JSON routes
    return Response(_PAGE, mimetype="text/html")


def create_app(engine: Engine, *,
               response_cache: Optional[TTLCache] = None,
               limiter: Optional[RateLimiter] = None) -> Flask:
    """Flask app serving `engine`; cache and limiter are owned by the app."""
    app = Flask(__name__)
    app.extensions[EXT_KEY] = Services(
        engine=engine,
        response_cache=response_cache if response_cache is not None else TTLCache(),
        limiter=limiter if limiter is not None else RateLimiter(),
    )
    app.add_url_rule("/api/companies", view_func=api_companies, methods=["GET"])
    app.add_url_rule("/api/recommendations", view_func=api_recommendations_get, methods=["GET"])
    app.add_url_rule("/api/recommendations", endpoint="api_recommendations_post",
                     view_func=api_recommendations_post, methods=["POST"])
    app.add_url_rule("/health", view_func=health, methods=["GET"])
    app.add_url_rule("/", view_func=home, methods=["GET"])
    return app


_PAGE = r"""
<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>Company autocomplete</title>
<style>
:root{
  --bg:#0b0f14;
  --panel:#0f141b;
  --ink:#cfd8e3;
  --muted:#8a94a6;
  --accent:#6ee7ff;
  --border:#1c2530;
  --mark-bg:rgba(110,231,255,.2);
}
*{box-sizing:border-box}
body{
  margin:0; background:var(--bg); color:var(--ink);
  font:16px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Ubuntu,"Helvetica Neue",Arial;
}
.container{ max-width:760px; margin:24px auto; padding:0 16px }
.card{
  background:var(--panel); border:1px solid var(--border);
  border-radius:16px; padding:18px; box-shadow:0 10px 30px rgba(0,0,0,.25);
}
h1{ font-size:20px; margin:0 0 8px 0 }
.controls{ display:flex; gap:12px; align-items:center; margin:12px 0 4px 0; flex-wrap:wrap }
.controls input, .controls select{
  padding:12px 14px; border-radius:12px; border:1px solid var(--border);
  background:#0b1117; color:var(--ink); outline:none; font-size:16px;
}
.controls input{ flex:1; min-width:240px }
.controls input:focus{ border-color:var(--accent) }
.meta{ color:var(--muted); font-size:13px; margin-top:6px }
h2{ font-size:11px; text-transform:uppercase; letter-spacing:.06em; color:var(--muted); margin:16px 0 4px }
ul{ list-style:none; margin:0; padding:0; border:1px solid var(--border); border-radius:12px; overflow:clip }
li{ padding:10px 14px; border-top:1px solid var(--border); cursor:pointer }
li:first-child{ border-top:none }
li:hover, li.active{ background:#0d131a }
.mark{ background:var(--mark-bg) }
.empty{ color:var(--muted); padding:12px 14px }
</style>
</head>
<body>
  <div class="container">
    <div class="card">
      <h1>Company autocomplete</h1>
      <div class="controls">
        <input id="q" type="text" placeholder="Type a company or a search…" autocomplete="off" autofocus />
        <select id="uc">
          <option>people</option><option>recruiting</option><option>sales</option>
          <option>investor</option><option>company</option>
        </select>
      </div>
      <div class="meta" id="stats">Ready.</div>
      <h2>Company matches</h2>
      <ul id="companies"><li class="empty">Start typing to see results.</li></ul>
      <h2>Top suggestions</h2>
      <ul id="suggestions"><li class="empty">Nothing yet.</li></ul>
    </div>
  </div>

<script>
const $ = (sel) => document.querySelector(sel);
const q = $("#q"), uc = $("#uc"), stats = $("#stats");
const MIN_CHARS = 2;
let t;        // debounce timer
let seq = 0;  // latest request number; older replies are dropped

function esc(s){ return s.replace(/[&<>"]/g, c => ({"&":"&amp;","<":"&lt;",">":"&gt;",'"':"&quot;"}[c])); }
function highlight(text, query){
  const i = text.toLowerCase().indexOf(query.toLowerCase());
  if(i < 0 || !query) return esc(text);
  return esc(text.slice(0,i)) + `<span class="mark">${esc(text.slice(i, i+query.length))}</span>` + esc(text.slice(i+query.length));
}
function fill(el, rows, query){
  el.innerHTML = rows.length
    ? rows.map(r => `<li data-v="${esc(r)}">${highlight(r, query)}</li>`).join("")
    : `<li class="empty">No matches.</li>`;
}

async function search(){
  const query = q.value.trim();
  const mine = ++seq;
  if(query.length < MIN_CHARS){
    fill($("#companies"), [], ""); fill($("#suggestions"), [], "");
    stats.textContent = "Ready.";
    return;
  }
  const t0 = performance.now();
  try{
    const [a, b] = await Promise.all([
      fetch(`/api/companies?q=${encodeURIComponent(query)}&limit=10`).then(r => r.json()),
      fetch("/api/recommendations", {
        method: "POST", headers: {"Content-Type": "application/json"},
        body: JSON.stringify({query, useCase: uc.value, context: {items: []}}),
      }).then(r => r.json()),
    ]);
    if(mine !== seq) return;  // a newer keystroke already fired
    fill($("#companies"), a.companies || [], query);
    fill($("#suggestions"), b.suggestions || [], query);
    stats.textContent = `Results: ${(a.total || 0)} companies • ~${Math.round(performance.now() - t0)} ms`;
  }catch(e){
    if(mine === seq) stats.textContent = `Error: ${e.message ?? e}`;
  }
}

function debouncedSearch(){ clearTimeout(t); t = setTimeout(search, 120); }
q.addEventListener("input", debouncedSearch);
uc.addEventListener("change", debouncedSearch);
document.addEventListener("click", (ev) => {
  const v = ev.target.closest("li")?.dataset?.v;
  if(v){ q.value = v; debouncedSearch(); }
});
window.addEventListener("keydown", (ev) => {
  if(ev.key === "Escape"){ q.value = ""; search(); }
});
</script>
</body>
</html>
"""


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the company autocomplete HTTP service")
    ap.add_argument("--index", default=str(CFG.INDEX_PATH), help="Prefix index JSON artifact")
    ap.add_argument("--csv-fallback", default=None, help="CSV to bucket in memory if --index is missing")
    ap.add_argument("--preload", action="store_true", help="Load the index before serving")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose or os.environ.get(CFG.VERBOSE_ENV) == "1":
        logging.basicConfig(level=logging.INFO)

    engine = Engine(BucketStore(args.index, csv_fallback=args.csv_fallback))
    if args.preload:
        log.info("index status after preload: %s", engine.load())

    app = create_app(engine)
    app.run(host=args.host, port=args.port, debug=args.verbose)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
