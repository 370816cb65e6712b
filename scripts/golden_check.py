#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import difflib
import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from goiface_builder.errors import GenerateError
from goiface_builder.generate import generate_contract

GOLDENS = ROOT / "tests" / "goldens"


def list_cases() -> list[str]:
    return sorted(p.name for p in GOLDENS.iterdir() if (p / "case.json").exists())


def run_case(case_dir: Path) -> str:
    case = json.loads((case_dir / "case.json").read_text(encoding="utf-8"))
    source = (case_dir / "input.go").read_text(encoding="utf-8")
    result = generate_contract(source, case["type"], case["interface"], path=str(case_dir / "input.go"))
    return result.source


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--update", action="store_true", help="Rewrite expected.go from current output.")
    ap.add_argument("--emit-stdout", action="store_true", help="Emit generated source to stdout.")
    ap.add_argument("--case", default=None, help="Golden case name (default: all).")
    args = ap.parse_args()

    cases = list_cases()
    if args.case is not None:
        if args.case not in cases:
            print(f"UNKNOWN_CASE: {args.case}")
            return 2
        cases = [args.case]

    failures = 0
    for name in cases:
        case_dir = GOLDENS / name
        golden_path = case_dir / "expected.go"
        try:
            output = run_case(case_dir)
        except GenerateError as exc:
            print(f"[FAIL] {name}: {exc}")
            failures += 1
            continue

        if args.emit_stdout:
            sys.stdout.write(output)
            continue

        if args.update:
            golden_path.write_text(output, encoding="utf-8")
            print(f"[OK] updated {golden_path}")
            continue

        if not golden_path.exists():
            print(f"[FAIL] golden not found: {golden_path}")
            failures += 1
            continue
        expected = golden_path.read_text(encoding="utf-8")
        if output != expected:
            print(f"[FAIL] output differs: {golden_path}")
            diff = difflib.unified_diff(
                expected.splitlines(),
                output.splitlines(),
                fromfile=str(golden_path),
                tofile="generated",
                lineterm="",
            )
            print("\n".join(diff))
            failures += 1
            continue
        print(f"[OK] {name}")

    return 2 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
