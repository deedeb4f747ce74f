# app.py
# CustomTkinter GUI for the Chinese typo checker (dark theme, .docx-aware).
# - Open a .txt/.md file OR a Word .docx (text extracted on a worker thread).
# - Live re-check with debounce; selectable typo list; fix all / fix selected.
# - Save back to the text file, or export "<name>_修正后.docx" for Word input.

from __future__ import annotations
import threading
from pathlib import Path
from typing import List, Optional

import tkinter.filedialog as fd
import tkinter.messagebox as mb
import customtkinter as ctk

from typocheck import Engine
from typocheck import config as CFG
from typocheck.docx_bridge import is_docx_file, text_to_docx
from typocheck.errors import NoActiveTarget, TypoCheckError
from typocheck.models import MatchOccurrence


# -------------------- small helpers --------------------

def shorten_path(p: str, max_chars: int = 60) -> str:
    """Shorten long paths neatly for labels."""
    if len(p) <= max_chars:
        return p
    keep = max_chars // 2 - 3
    return p[:keep] + "..." + p[-keep:]


def tk_index(offset: int) -> str:
    """Text-widget index for a character offset into the widget's text."""
    return f"1.0+{offset}c"


# -------------------- main app --------------------

class TypoCheckerApp(ctk.CTk):
    """Dark-themed window that checks a document against the typo dictionary."""

    def __init__(self, engine: Optional[Engine] = None) -> None:
        super().__init__()

        # Theme
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("blue")

        # Window
        self.title("中文错别字检查")
        self.geometry("1080x720")
        self.minsize(900, 600)

        # State
        self.engine = engine or Engine()
        self._path: Optional[str] = None
        self._loading_thread: Optional[threading.Thread] = None
        self._scan_after_id: Optional[str] = None
        self._occurrences: List[MatchOccurrence] = []
        self._checks: List[ctk.BooleanVar] = []

        # Fonts
        self.font_title = ctk.CTkFont(size=18, weight="bold")
        self.font_label = ctk.CTkFont(size=13)
        self.font_text = ctk.CTkFont(family="Microsoft YaHei, PingFang SC, Noto Sans CJK SC", size=15)

        # Layout grid
        self.grid_columnconfigure(0, weight=3)
        self.grid_columnconfigure(1, weight=2)
        self.grid_rowconfigure(2, weight=1)  # document + list
        self.grid_rowconfigure(3, weight=0)  # log

        # Build UI
        self._build_header()
        self._build_source_bar()
        self._build_document()
        self._build_typo_list()
        self._build_log()

        self._set_status(f"Ready ({len(self.engine.index)} rules)")
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # --------- UI sections ---------

    def _build_header(self) -> None:
        header = ctk.CTkFrame(self, corner_radius=10)
        header.grid(row=0, column=0, columnspan=2, sticky="ew", padx=12, pady=(12, 6))
        header.grid_columnconfigure(0, weight=1)

        title = ctk.CTkLabel(header, text="中文错别字检查", font=self.font_title)
        title.grid(row=0, column=0, sticky="w", padx=12, pady=10)

        self.var_defaults = ctk.BooleanVar(value=bool(self.engine.get_setting(CFG.KEY_USE_DEFAULT_RULES)))
        sw = ctk.CTkSwitch(header, text="使用默认规则", variable=self.var_defaults, command=self._toggle_defaults)
        sw.grid(row=0, column=1, padx=6, pady=10)

        ctk.CTkButton(header, text="导入规则", width=90, command=self._import_rules).grid(row=0, column=2, padx=6)
        ctk.CTkButton(header, text="导出规则", width=90, command=self._export_rules).grid(row=0, column=3, padx=(0, 12))

    def _build_source_bar(self) -> None:
        bar = ctk.CTkFrame(self, corner_radius=10)
        bar.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=6)
        bar.grid_columnconfigure(2, weight=1)

        ctk.CTkButton(bar, text="打开文件", command=self._choose_file).grid(row=0, column=0, padx=(12, 6), pady=10)
        ctk.CTkButton(bar, text="保存", command=self._save).grid(row=0, column=1, padx=(0, 6), pady=10)

        self.lbl_source = ctk.CTkLabel(bar, text="No document", anchor="w", font=self.font_label)
        self.lbl_source.grid(row=0, column=2, sticky="ew", padx=6, pady=10)

        self.progress = ctk.CTkProgressBar(bar, mode="indeterminate", determinate_speed=1.2)
        self.progress.grid(row=0, column=3, sticky="e", padx=(0, 6), pady=10)

        self.lbl_status = ctk.CTkLabel(bar, text="Status: —", anchor="e")
        self.lbl_status.grid(row=0, column=4, sticky="e", padx=12, pady=10)

    def _build_document(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=2, column=0, sticky="nsew", padx=(12, 6), pady=6)
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(0, weight=1)

        self.txt_doc = ctk.CTkTextbox(frame, wrap="word", font=self.font_text, undo=True)
        self.txt_doc.grid(row=0, column=0, sticky="nsew", padx=8, pady=8)
        self.txt_doc.bind("<KeyRelease>", self._on_text_changed)
        self.txt_doc.tag_config("typo", underline=True, foreground=self.engine.get_setting(CFG.KEY_HIGHLIGHT_COLOR))

    def _build_typo_list(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=2, column=1, sticky="nsew", padx=(6, 12), pady=6)
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(1, weight=1)

        self.lbl_count = ctk.CTkLabel(frame, text="错别字列表", font=self.font_label)
        self.lbl_count.grid(row=0, column=0, sticky="w", padx=12, pady=(10, 2))

        self.list_frame = ctk.CTkScrollableFrame(frame, corner_radius=8)
        self.list_frame.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 6))
        self.list_frame.grid_columnconfigure(0, weight=1)

        buttons = ctk.CTkFrame(frame, fg_color="transparent")
        buttons.grid(row=2, column=0, sticky="ew", padx=8, pady=(0, 8))
        for i, (label, cmd) in enumerate((
            ("全选", lambda: self._select_all(True)),
            ("全不选", lambda: self._select_all(False)),
            ("修正所选", self._fix_selected),
            ("全部修正", self._fix_all),
        )):
            ctk.CTkButton(buttons, text=label, width=70, command=cmd).grid(row=0, column=i, padx=3)

    def _build_log(self) -> None:
        frame = ctk.CTkFrame(self, corner_radius=10)
        frame.grid(row=3, column=0, columnspan=2, sticky="nsew", padx=12, pady=(6, 12))
        frame.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(frame, text="Event log", font=self.font_label).grid(
            row=0, column=0, sticky="w", padx=12, pady=(10, 2)
        )
        self.txt_log = ctk.CTkTextbox(frame, height=90, wrap="word", font=ctk.CTkFont(size=12))
        self.txt_log.grid(row=1, column=0, sticky="nsew", padx=12, pady=(0, 12))
        self._log("GUI ready. Open a text or Word file, or type into the editor.")

    # --------- document loading (threaded) ---------

    def _choose_file(self) -> None:
        path = fd.askopenfilename(
            title="Choose document",
            filetypes=[("Documents", "*.txt *.md *.markdown *.docx"), ("All files", "*.*")],
        )
        if not path:
            return
        if not self.engine.is_supported(path):
            mb.showwarning("Unsupported", f"Unsupported file type: {Path(path).suffix}")
            return
        self._start_loading(path)

    def _start_loading(self, path: str) -> None:
        # prevent re-entrancy
        if self._loading_thread and self._loading_thread.is_alive():
            mb.showinfo("Loading", "A document is already loading. Please wait.")
            return
        self.lbl_source.configure(text=shorten_path(path))
        self._set_status("Loading…")
        self.progress.start()
        self._loading_thread = threading.Thread(target=self._load_worker, args=(path,), daemon=True)
        self._loading_thread.start()

    def _load_worker(self, path: str) -> None:
        try:
            text = self.engine.read_document(path)
        except TypoCheckError as exc:
            self.after(0, self._on_load_error, exc)
            return
        self.after(0, self._on_load_ok, path, text)

    def _on_load_ok(self, path: str, text: str) -> None:
        self.progress.stop()
        self._path = path
        self._set_text(text)
        self._log(f"Loaded {path} ({len(text):,} chars).")
        self._run_check()

    def _on_load_error(self, exc: Exception) -> None:
        self.progress.stop()
        self._set_status("Error while loading document.")
        self._log(f"ERROR: {exc}")
        mb.showerror("Load error", str(exc))

    # --------- checking ---------

    def _on_text_changed(self, _ev=None) -> None:
        if not self.engine.is_enabled():
            return
        # debounce for smoother typing
        if self._scan_after_id is not None:
            self.after_cancel(self._scan_after_id)
        self._scan_after_id = self.after(250, self._run_check)

    def _run_check(self) -> None:
        self._scan_after_id = None
        self._occurrences = self.engine.scan(self._get_text())
        self._render_list()
        self._highlight()
        n = len(self._occurrences)
        self._set_status(f"发现 {n} 个错别字" if n else "未发现错别字")

    def _render_list(self) -> None:
        for child in self.list_frame.winfo_children():
            child.destroy()
        self._checks = []
        for i, occ in enumerate(self._occurrences):
            var = ctk.BooleanVar(value=False)
            self._checks.append(var)
            row = ctk.CTkFrame(self.list_frame, fg_color="transparent")
            row.grid(row=i, column=0, sticky="ew", pady=1)
            ctk.CTkCheckBox(row, text="", width=24, variable=var).grid(row=0, column=0)
            ctk.CTkButton(
                row, anchor="w", fg_color="transparent",
                text=f"{occ.original} → {occ.suggestion} (第 {occ.line + 1} 行)",
                command=lambda o=occ: self._reveal(o),
            ).grid(row=0, column=1, sticky="ew")
            ctk.CTkButton(row, text="修正", width=44, command=lambda o=occ: self._fix_one(o)).grid(row=0, column=2, padx=(4, 0))
        self.lbl_count.configure(text=f"错别字列表 ({len(self._occurrences)})")

    def _highlight(self) -> None:
        if not self.engine.get_setting(CFG.KEY_HIGHLIGHT_ENABLED):
            return
        self.txt_doc.tag_remove("typo", "1.0", "end")
        for occ in self._occurrences:
            self.txt_doc.tag_add("typo", tk_index(occ.start_offset), tk_index(occ.end_offset))

    def _reveal(self, occ: MatchOccurrence) -> None:
        start, end = tk_index(occ.start_offset), tk_index(occ.end_offset)
        self.txt_doc.tag_remove("sel", "1.0", "end")
        self.txt_doc.tag_add("sel", start, end)
        self.txt_doc.see(start)
        self._log(f"{occ.original} → {occ.suggestion}（第 {occ.line + 1} 行，第 {occ.column + 1} 列）")

    def _select_all(self, flag: bool) -> None:
        for var in self._checks:
            var.set(flag)

    # --------- correcting ---------

    def _fix_all(self) -> None:
        self._apply(self.engine.fix_all(self._get_text()), "All typos")

    def _fix_selected(self) -> None:
        selected = [o for o, var in zip(self._occurrences, self._checks) if var.get()]
        if not selected:
            mb.showinfo("修正所选", "请先选择要修正的错别字")
            return
        # offsets refer to the text the list was built from
        self._apply(self.engine.fix_selected(self._get_text(), selected), f"{len(selected)} selected typo(s)")

    def _fix_one(self, occ: MatchOccurrence) -> None:
        # every occurrence of this phrase, not only the clicked one
        self._apply(self.engine.fix_one(self._get_text(), occ.original, occ.suggestion), f"\"{occ.original}\"")

    def _apply(self, new_text: str, what: str) -> None:
        before = len(self._occurrences)
        self._set_text(new_text)
        self._run_check()
        left = len(self._occurrences)
        self._log(f"Fixed {what}: {before} → {left} remaining.")
        if left:
            self._set_status(f"已修正部分错别字，仍有 {left} 个错别字")
        else:
            self._set_status("所有错别字已修正")

    def _save(self) -> None:
        try:
            if not self._path:
                raise NoActiveTarget("没有打开的文件")
            text = self._get_text()
            if is_docx_file(self._path):
                out = text_to_docx(text, self._path)
            else:
                with open(self._path, "w", encoding="utf-8", newline="") as f:
                    f.write(text)
                out = self._path
        except (TypoCheckError, OSError) as exc:
            self._log(f"ERROR: {exc}")
            mb.showerror("Save error", str(exc))
            return
        self._log(f"Saved to {out}")
        self._set_status(f"Saved: {shorten_path(out, 40)}")

    # --------- rules ---------

    def _toggle_defaults(self) -> None:
        try:
            self.engine.set_use_default_rules(self.var_defaults.get())
        except TypoCheckError as exc:
            self._log(f"ERROR: {exc}")
            mb.showerror("Rules", str(exc))
            return
        self._log(f"Rules reloaded: {len(self.engine.index)} active.")
        self._run_check()

    def _import_rules(self) -> None:
        path = fd.askopenfilename(title="Import rules", filetypes=[("JSON Files", "*.json")])
        if not path:
            return
        try:
            rules = self.engine.import_rules(path)
        except TypoCheckError as exc:
            self._log(f"ERROR: {exc}")
            mb.showerror("导入规则失败", str(exc))
            return
        self._log(f"规则导入成功: {len(rules)} rule(s).")
        self._run_check()

    def _export_rules(self) -> None:
        directory = fd.askdirectory(title="Export rules to folder")
        if not directory:
            return
        try:
            out = self.engine.export_rules(directory)
        except TypoCheckError as exc:
            self._log(f"ERROR: {exc}")
            mb.showerror("导出规则失败", str(exc))
            return
        self._log(f"规则已导出到: {out}")

    # --------- misc UI helpers ---------

    def _get_text(self) -> str:
        return self.txt_doc.get("1.0", "end-1c")

    def _set_text(self, text: str) -> None:
        self.txt_doc.delete("1.0", "end")
        self.txt_doc.insert("1.0", text)

    def _set_status(self, text: str) -> None:
        self.lbl_status.configure(text=f"Status: {text}")

    def _log(self, msg: str) -> None:
        self.txt_log.insert("end", msg + "\n")
        self.txt_log.see("end")

    # --------- lifecycle ---------

    def _on_close(self) -> None:
        self.engine.shutdown()
        self.destroy()


if __name__ == "__main__":
    app = TypoCheckerApp(Engine("sqlite:///" + str(Path.home() / ".typocheck" / "settings.sqlite")))
    app.mainloop()
