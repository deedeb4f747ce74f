from __future__ import annotations
import argparse
from typing import Any, List

from flask import Flask, request, jsonify, Response

from typocheck import config as CFG
from typocheck.engine import Engine
from typocheck.errors import NoActiveTarget, RuleParseError, TypoCheckError
from typocheck.loader import parse_rules_json
from typocheck.models import MatchOccurrence
from typocheck.scanner import summarize, to_diagnostics

app = Flask(__name__)
app.json.ensure_ascii = False
_engine: Engine | None = None


def _eng() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Run main() or set typocheck_web.web._engine.")
    return _engine


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _text(data: dict) -> str:
    text = data.get("text")
    if not isinstance(text, str):
        raise NoActiveTarget("没有打开的文档")
    return text


# ---------- errors ----------
@app.errorhandler(NoActiveTarget)
def _no_target(exc: NoActiveTarget):
    return jsonify({"error": str(exc)}), 400

@app.errorhandler(RuleParseError)
def _bad_rules(exc: RuleParseError):
    return jsonify({"error": str(exc)}), 400

@app.errorhandler(TypoCheckError)
def _typo_error(exc: TypoCheckError):
    return jsonify({"error": str(exc)}), 500


# ---------- API ----------
@app.get("/api/health")
def api_health():
    eng = _eng()
    return jsonify({"ok": True, "rules": len(eng.rules), "enabled": len(eng.index)})

@app.post("/api/scan")
def api_scan():
    text = _text(_payload())
    rows = _eng().scan(text)
    return jsonify({
        "occurrences": [r.to_dict() for r in rows],
        "diagnostics": [d.to_dict() for d in to_diagnostics(rows)],
        "summary": summarize(rows),
    })

@app.post("/api/fix")
def api_fix():
    """
    Body: {"text": ..., and one of:
             "occurrences": [...]            -> fix the selected occurrences
             "original", "suggestion"        -> replace that phrase everywhere
             (nothing else)                  -> fix every typo}
    Returns the corrected text and the edits applied to the submitted text.
    """
    data = _payload()
    text = _text(data)
    eng = _eng()
    if "original" in data:
        original, suggestion = data.get("original"), data.get("suggestion")
        if not isinstance(original, str) or not original:
            return jsonify({"error": "original is required"}), 400
        if not isinstance(suggestion, str) or not suggestion:
            return jsonify({"error": "suggestion is required"}), 400
        fixed = eng.fix_one(text, original, suggestion)
        edits: List[Any] = []
    elif isinstance(data.get("occurrences"), list):
        try:
            selected = [MatchOccurrence.from_dict(o) for o in data["occurrences"]]
        except (KeyError, TypeError, ValueError) as exc:
            return jsonify({"error": f"invalid occurrence: {exc}"}), 400
        edits = eng.edits(text, selected)
        fixed = eng.fix_selected(text, selected)
    else:
        edits = eng.edits(text)
        fixed = eng.fix_all(text)
    return jsonify({
        "text": fixed,
        "edits": [e.to_dict() for e in edits],
        "remaining": len(eng.scan(fixed)),
    })

@app.get("/api/rules")
def api_rules():
    return jsonify([r.to_dict() for r in _eng().rules])

@app.post("/api/rules")
def api_rules_import():
    # whole-body validation first: a malformed set merges nothing
    rules = parse_rules_json(request.get_data(as_text=True))
    _eng().merge_rules(rules)
    return jsonify({"imported": len(rules), "rules": len(_eng().rules)})

@app.post("/api/rules/toggle")
def api_rules_toggle():
    data = _payload()
    original = data.get("original")
    if not original:
        return jsonify({"error": "original is required"}), 400
    try:
        rule = _eng().set_rule_enabled(original, bool(data.get("enabled", True)))
    except KeyError:
        return jsonify({"error": f"未找到规则 {original}"}), 404
    return jsonify(rule.to_dict())

@app.post("/api/settings/defaults")
def api_settings_defaults():
    flag = bool(_payload().get("useDefaultRules", True))
    _eng().set_use_default_rules(flag)
    return jsonify({CFG.KEY_USE_DEFAULT_RULES: flag, "rules": len(_eng().rules)})


# ---------- UI ----------
@app.get("/")
def home():
    # Single page: textarea + selectable typo list, no external deps.
    html = r"""
<!doctype html>
<html lang="zh">
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width,initial-scale=1" />
<title>中文错别字检查</title>
<style>
:root{ --bg:#0b0f14; --panel:#0f141b; --ink:#cfd8e3; --muted:#8a94a6; --accent:#ffd700; --border:#1c2530; --danger:#ff5d5d; }
*{box-sizing:border-box}
body{ margin:0; background:var(--bg); color:var(--ink); font:16px/1.5 system-ui,"PingFang SC","Microsoft YaHei",sans-serif; }
.container{ max-width:1080px; margin:24px auto; padding:0 16px; display:grid; grid-template-columns:1fr 340px; gap:16px; }
.card{ background:var(--panel); border:1px solid var(--border); border-radius:14px; padding:16px; }
h1{ font-size:18px; margin:0 0 10px 0; }
textarea{ width:100%; min-height:420px; background:#0b1117; color:var(--ink); border:1px solid var(--border); border-radius:10px; padding:12px; font-size:15px; }
.btn{ padding:8px 12px; border-radius:10px; border:1px solid var(--border); background:#0b1117; color:var(--ink); cursor:pointer; margin:8px 6px 0 0; }
.btn:hover{ border-color:var(--accent); }
ul{ list-style:none; padding:0; margin:0; max-height:420px; overflow:auto; }
li{ padding:6px 4px; border-bottom:1px solid var(--border); }
.typo{ color:var(--accent); font-weight:600; }
.muted{ color:var(--muted); font-size:13px; }
.err{ color:var(--danger); display:none; }
</style>
</head>
<body>
<div class="container">
  <div class="card">
    <h1>中文错别字检查</h1>
    <textarea id="doc" placeholder="在此粘贴或输入文本…"></textarea>
    <div>
      <button class="btn" id="check">检查</button>
      <button class="btn" id="fixAll">全部修正</button>
      <button class="btn" id="fixSel">修正所选</button>
    </div>
    <div class="err" id="err"></div>
  </div>
  <div class="card">
    <h1>错别字列表</h1>
    <div>
      <button class="btn" id="selAll">全选</button>
      <button class="btn" id="selNone">全不选</button>
    </div>
    <div class="muted" id="stats">Ready.</div>
    <ul id="list"></ul>
  </div>
</div>
<script>
const doc = document.getElementById("doc"), list = document.getElementById("list");
const stats = document.getElementById("stats"), err = document.getElementById("err");
let items = [], timer = null;

async function post(url, body){
  const r = await fetch(url, {method:"POST", headers:{"Content-Type":"application/json"}, body:JSON.stringify(body)});
  const data = await r.json();
  if(!r.ok){ throw new Error(data.error || r.statusText); }
  return data;
}
function showError(e){ err.textContent = String(e.message || e); err.style.display = "block"; }
function render(){
  list.innerHTML = "";
  items.forEach((o, i) => {
    const li = document.createElement("li");
    li.innerHTML = `<label><input type="checkbox" data-i="${i}"> <span class="typo"></span> → <span></span>
      <span class="muted">(第 ${o.line + 1} 行，第 ${o.column + 1} 列)</span></label>`;
    li.querySelector(".typo").textContent = o.original;
    li.querySelectorAll("span")[1].textContent = o.suggestion;
    li.addEventListener("dblclick", () => { doc.focus(); doc.setSelectionRange(o.start_offset, o.end_offset); });
    list.appendChild(li);
  });
  stats.textContent = items.length ? `发现 ${items.length} 个错别字` : "未发现错别字";
}
async function check(){
  err.style.display = "none";
  try{ items = (await post("/api/scan", {text: doc.value})).occurrences; render(); }catch(e){ showError(e); }
}
async function fix(selectedOnly){
  const body = {text: doc.value};
  if(selectedOnly){
    body.occurrences = [...list.querySelectorAll("input:checked")].map(c => items[+c.dataset.i]);
  }
  try{ doc.value = (await post("/api/fix", body)).text; await check(); }catch(e){ showError(e); }
}
function selectAll(flag){ list.querySelectorAll("input").forEach(c => c.checked = flag); }
document.getElementById("check").onclick = check;
document.getElementById("fixAll").onclick = () => fix(false);
document.getElementById("fixSel").onclick = () => fix(true);
document.getElementById("selAll").onclick = () => selectAll(true);
document.getElementById("selNone").onclick = () => selectAll(false);
doc.addEventListener("input", () => { clearTimeout(timer); timer = setTimeout(check, 250); });
</script>
</body>
</html>
"""
    return Response(html, mimetype="text/html")

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the Flask UI on top of the typo checker Engine")
    ap.add_argument("--db", dest="db", default=CFG.DEFAULT_DSN)  # DSN: "sqlite:///path" or "memory://"
    ap.add_argument("--dictionary", default=None, help="User override dictionary file")
    ap.add_argument("--no-defaults", action="store_true")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    global _engine
    _engine = Engine(args.db, verbose=args.verbose, autoload=False)
    if args.no_defaults:
        _engine.set_setting(CFG.KEY_USE_DEFAULT_RULES, False)
    if args.dictionary:
        _engine.set_setting(CFG.KEY_CUSTOM_DICTIONARY, args.dictionary)
    _engine.reload()

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose)
    finally:
        _engine.shutdown()
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
