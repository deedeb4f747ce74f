from __future__ import annotations
import argparse, json, os, sys
from typing import List

from . import Engine
from . import config as CFG
from .errors import NoActiveTarget, TypoCheckError
from .scanner import summarize

def _supports_color() -> bool:
    return sys.stdout.isatty() and os.environ.get("NO_COLOR", "") == ""

CSI = "\033["
def _c(text: str, code: str) -> str:
    if not _supports_color(): return text
    return f"{CSI}{code}m{text}{CSI}0m"

def _print_table(path: str, rows) -> None:
    if not rows:
        print(_c(f"{path}: 未发现错别字", "2;37")); return
    print(_c(f"{path}: 发现 {len(rows)} 个错别字", "1;37"))
    print(_c("#   Line  Col   Typo → Suggestion", "2;37"))
    for i, r in enumerate(rows, 1):
        print(f"{i:<3} {r.line + 1:<5} {r.column + 1:<5} {_c(r.original, '1;33')} → {r.suggestion}")

def _read_target(engine: Engine, target: str) -> str:
    if target == "-":
        return sys.stdin.read()
    return engine.read_document(target)

def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="typocheck", description="Chinese typo checker (dictionary-driven)")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--check", nargs="*", metavar="FILE", help="Scan files ('-' reads stdin)")
    g.add_argument("--fix", nargs="*", metavar="FILE", help="Correct every typo in files")
    g.add_argument("--list-rules", action="store_true", help="Print the active rule set")
    g.add_argument("--import-rules", metavar="JSON", help="Merge a JSON rule set into the user rules")
    g.add_argument("--export-rules", metavar="DIR", help="Write the rule set to DIR/typo-rules-<date>.json")
    g.add_argument("--add-rule", nargs=2, metavar=("TYPO", "CORRECTION"), help="Add or update a user rule")
    g.add_argument("--disable-rule", metavar="TYPO", help="Disable a rule without deleting it")
    g.add_argument("--enable-rule", metavar="TYPO", help="Re-enable a disabled rule")

    p.add_argument("--db", default=CFG.DEFAULT_DSN, help='Settings store DSN: "sqlite:///path" or "memory://"')
    p.add_argument("--dictionary", default=None, help="User override dictionary (错误词：正确词 per line)")
    p.add_argument("--no-defaults", action="store_true", help="Do not load the bundled dictionary")
    p.add_argument("--output", default=None, help="Output path for --fix (single file only)")
    p.add_argument("--stdout", action="store_true", help="With --fix: print corrected text instead of writing")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    try:
        eng = Engine(args.db, verbose=args.verbose, autoload=False)
    except TypoCheckError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    try:
        if args.no_defaults:
            eng.set_setting(CFG.KEY_USE_DEFAULT_RULES, False)
        if args.dictionary:
            eng.set_setting(CFG.KEY_CUSTOM_DICTIONARY, os.path.abspath(args.dictionary))
        eng.reload()

        if args.check is not None:
            if not args.check:
                raise NoActiveTarget("没有要检查的文件")
            report = {}
            for target in args.check:
                rows = eng.scan(_read_target(eng, target))
                if args.json:
                    report[target] = [r.to_dict() for r in rows]
                else:
                    _print_table(target, rows)
                    if rows:
                        counts = ", ".join(f"{k}×{v}" for k, v in summarize(rows).items())
                        print(_c(f"    {counts}", "2;36"))
            if args.json:
                print(json.dumps(report, ensure_ascii=False, indent=2))
            return 0

        if args.fix is not None:
            if not args.fix:
                raise NoActiveTarget("没有要修正的文件")
            if args.output and len(args.fix) != 1:
                p.error("--output requires exactly one file")
            for target in args.fix:
                if target == "-" or args.stdout:
                    sys.stdout.write(eng.fix_all(_read_target(eng, target)))
                    continue
                before = len(eng.check_file(target))
                out = eng.fix_file(target, args.output)
                print(f"{target}: 已修正 {before} 处 → {out}")
            return 0

        if args.list_rules:
            rules = eng.rules
            if args.json:
                print(json.dumps([r.to_dict() for r in rules], ensure_ascii=False, indent=2))
            else:
                for r in rules:
                    flag = " " if r.enabled else _c("✗", "2;31")
                    print(f"{flag} {r.original}{CFG.SEPARATOR}{r.suggestion}")
            return 0

        if args.import_rules:
            rules = eng.import_rules(args.import_rules)
            print(f"规则导入成功: {len(rules)} 条")
            return 0

        if args.export_rules:
            print(f"规则已导出到: {eng.export_rules(args.export_rules)}")
            return 0

        if args.add_rule:
            rule = eng.add_rule(*args.add_rule)
            print(f"{rule.original}{CFG.SEPARATOR}{rule.suggestion}")
            return 0

        name = args.disable_rule or args.enable_rule
        try:
            rule = eng.set_rule_enabled(name, enabled=bool(args.enable_rule))
        except KeyError:
            print(f"error: 未找到规则 {name}", file=sys.stderr)
            return 1
        print(f"{rule.original}: {'enabled' if rule.enabled else 'disabled'}")
        return 0

    except NoActiveTarget as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except TypoCheckError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        eng.shutdown()

if __name__ == "__main__":
    raise SystemExit(main())
