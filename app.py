# app.py
# CustomTkinter desktop client for company autocomplete (dark theme).
# - Open a prefix index (.json) or bucket a raw CSV in memory.
# - Background loading thread (keeps UI responsive).
# - Live search with debounce; companies, suggestions & event log panes.

from __future__ import annotations
import threading
from pathlib import Path
from typing import Optional, Sequence

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

# Project imports (pip install -e . or PYTHONPATH=src)
from company_search import BucketStore, Engine
from company_search import config as CFG


# -------------------- small helpers --------------------

def shorten_path(p: str, max_chars: int = 60) -> str:
    """Shorten long paths neatly for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


def store_for(path: str) -> BucketStore:
    """A .csv source prefers a sibling .json artifact and otherwise is bucketed in memory."""
    p = Path(path)
    if p.suffix.lower() == ".csv":
        return BucketStore(p.with_suffix(".json"), csv_fallback=p)
    return BucketStore(p)


def format_ranked(rows: Sequence[str], empty: str = "(no matches)") -> str:
    if not rows:
        return empty
    return "\n".join(f"{i:>2}. {row}" for i, row in enumerate(rows, 1))


# -------------------- main app --------------------

class CompanySearchApp(ctk.CTk):
    """Dark-themed typeahead over a company prefix index."""

    def __init__(self) -> None:
        super().__init__()

        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        self.title("Company Autocomplete")
        self.geometry("900x700")
        self.minsize(820, 580)

        # State
        self._engine: Optional[Engine] = None
        self._loading_thread: Optional[threading.Thread] = None
        self._search_after_id: Optional[str] = None
        self._seq = 0  # latest search; older replies are dropped

        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_mono = ctk.CTkFont(family="Cascadia Mono, Menlo, Consolas, Courier New", size=13)

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)  # results
        self.grid_rowconfigure(4, weight=0)  # log

        self._build_header()
        self._build_source_bar()
        self._build_search()
        self._build_results()
        self._build_log()

        self._set_status("Ready")
        self.protocol("WM_DELETE_WINDOW", self.destroy)

        if CFG.INDEX_PATH.exists():
            self._start_loading(str(CFG.INDEX_PATH))

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 6))
        ctk.CTkLabel(header, text="Company Autocomplete", font=self.font_title).grid(
            row=0, column=0, sticky="w", padx=12, pady=10
        )

    def _build_source_bar(self) -> None:
        bar = ctk.CTkFrame(self, corner_radius=10)
        bar.grid(row=1, column=0, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(1, weight=1)

        ctk.CTkButton(bar, text="Open Index / CSV", command=self._choose_source).grid(
            row=0, column=0, padx=(12, 6), pady=10
        )

        self.lbl_source = ctk.CTkLabel(bar, text="No index loaded", anchor="w", font=self.font_label)
        self.lbl_source.grid(row=0, column=1, sticky="ew", padx=6, pady=10)

        self.progress = ctk.CTkProgressBar(bar, mode="indeterminate", determinate_speed=1.2)
        self.progress.grid(row=0, column=2, sticky="e", padx=(0, 6), pady=10)

        self.lbl_status = ctk.CTkLabel(bar, text="Status: ...", anchor="e")
        self.lbl_status.grid(row=0, column=3, sticky="e", padx=12, pady=10)

    def _build_search(self) -> None:
        box = ctk.CTkFrame(self, corner_radius=10)
        box.grid(row=2, column=0, sticky="ew", padx=12, pady=6)
        box.grid_columnconfigure(0, weight=1)

        self.entry_query = ctk.CTkEntry(box, placeholder_text="Type a company or a search…")
        self.entry_query.grid(row=0, column=0, sticky="ew", padx=(12, 6), pady=10)
        self.entry_query.bind("<KeyRelease>", self._on_query_changed)

        self.use_case = ctk.CTkOptionMenu(
            box, values=list(CFG.USE_CASES), command=lambda _v: self._on_query_changed()
        )
        self.use_case.set(CFG.DEFAULT_USE_CASE)
        self.use_case.grid(row=0, column=1, padx=(6, 12), pady=10)

    def _build_results(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, sticky="nsew", padx=12, pady=6)
        frame.grid_columnconfigure((0, 1), weight=1)
        frame.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(frame, text="Companies", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )
        ctk.CTkLabel(frame, text="Suggestions", font=self.font_label).grid(
            row=0, column=1, sticky="w", padx=12, pady=(10, 2)
        )

        self.txt_companies = ctk.CTkTextbox(frame, wrap="word", font=self.font_mono)
        self.txt_companies.grid(row=1, column=0, sticky="nsew", padx=(12, 6), pady=(0, 12))
        self.txt_suggestions = ctk.CTkTextbox(frame, wrap="word", font=self.font_mono)
        self.txt_suggestions.grid(row=1, column=1, sticky="nsew", padx=(6, 12), pady=(0, 12))
        self._set_text(self.txt_companies, "(open an index and start typing)")
        self._set_text(self.txt_suggestions, "")

    def _build_log(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=4, column=0, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(frame, text="Event log", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )
        self.txt_log = ctk.CTkTextbox(frame, height=110, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self._log("GUI ready.")

    # --------- loading pipeline (threaded) ---------

    def _choose_source(self) -> None:
        path = fd.askopenfilename(
            title="Choose prefix index or company CSV",
            filetypes=[("Prefix index", "*.json"), ("Company CSV", "*.csv"), ("All files", "*.*")],
        )
        if path:
            self._start_loading(path)

    def _start_loading(self, source: str) -> None:
        if self._loading_thread and self._loading_thread.is_alive():
            mb.showinfo("Loading", "An index is already loading. Please wait.")
            return

        self.lbl_source.configure(text=shorten_path(source))
        self._set_status("Loading…")
        self.progress.start()
        self._engine = None

        self._loading_thread = threading.Thread(target=self._load_worker, args=(source,), daemon=True)
        self._loading_thread.start()

    def _load_worker(self, source: str) -> None:
        try:
            engine = Engine(store_for(source))
            status = engine.load()
        except Exception as exc:
            self.after(0, lambda: self._on_load_error(exc))
            return
        self.after(0, lambda: self._on_load_done(engine, status))

    def _on_load_done(self, engine: Engine, status: str) -> None:
        self.progress.stop()
        self._engine = engine
        store = engine.store
        if status == "degraded":
            self._set_status("Index unavailable.")
            self._log(f"WARNING: {store.error}")
            return
        self._set_status(f"{store.name_count:,} companies in {store.bucket_count:,} buckets.")
        self._log("Index ready.")
        self.entry_query.focus_set()

    def _on_load_error(self, exc: Exception) -> None:
        self.progress.stop()
        self._set_status("Error while loading index.")
        self._log(f"ERROR: {exc!r}")
        mb.showerror("Load error", "Failed to load the index.\nSee event log for details.")

    # --------- search ---------

    def _on_query_changed(self, _ev=None) -> None:
        if self._search_after_id is not None:
            self.after_cancel(self._search_after_id)
        self._search_after_id = self.after(CFG.DEBOUNCE_MS, self._do_search)

    def _do_search(self) -> None:
        self._search_after_id = None
        self._seq += 1
        seq = self._seq
        q = self.entry_query.get()
        if len(q.strip()) < CFG.MIN_QUERY_LEN:
            self._show(seq, [], [])
            return
        if self._engine is None:
            self._set_text(self.txt_companies, "error: open an index before searching.")
            return

        engine, use_case = self._engine, self.use_case.get()

        def work() -> None:
            try:
                rec = engine.recommend(q, use_case=use_case)
            except Exception as exc:
                self.after(0, lambda: self._log(f"ERROR in search: {exc!r}"))
                return
            self.after(0, lambda: self._show(seq, rec.companies, rec.suggestions))

        threading.Thread(target=work, daemon=True).start()

    def _show(self, seq: int, companies: Sequence[str], suggestions: Sequence[str]) -> None:
        if seq != self._seq:
            return  # stale
        self._set_text(self.txt_companies, format_ranked(companies, empty=""))
        self._set_text(self.txt_suggestions, format_ranked(suggestions, empty=""))

    # --------- misc UI helpers ---------

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    @staticmethod
    def _set_text(box: ctk.CTkTextbox, text: str) -> None:
        box.configure(state="normal")
        box.delete("0.0", "end")
        if text:
            box.insert("end", text)
        box.configure(state="disabled")

    def _log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")


if __name__ == "__main__":
    app = CompanySearchApp()
    app.mainloop()
