#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import hashlib
import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
GOLDENS = ROOT / "tests" / "goldens"


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def run_cmd(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    print("+", " ".join(cmd))
    return subprocess.run(cmd, capture_output=True, text=True, cwd=ROOT)


def load_case(case_dir: Path) -> dict:
    path = case_dir / "case.json"
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"CASE_INVALID_JSON: {path}: {exc}") from exc


def generate(case: dict, source: Path) -> subprocess.CompletedProcess[str]:
    return run_cmd([sys.executable, "-m", "goiface_builder.run", case["type"], case["interface"], str(source)])


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--case", default=None, help="Golden case name (default: all).")
    args = ap.parse_args()

    cases = sorted(p.name for p in GOLDENS.iterdir() if (p / "case.json").exists())
    if args.case is not None:
        cases = [c for c in cases if c == args.case]
    if not cases:
        print("No determinism cases found.")
        return 2

    failures = 0
    for name in cases:
        case_dir = GOLDENS / name
        case = load_case(case_dir)

        first = generate(case, case_dir / "input.go")
        if first.returncode != 0:
            print(f"[FAIL] run failed: {name}")
            if first.stderr:
                print(first.stderr.strip())
            failures += 1
            continue

        second = generate(case, case_dir / "input.go")
        if second.returncode != 0 or sha256_text(first.stdout) != sha256_text(second.stdout):
            print(f"[FAIL] non-deterministic output: {name}")
            failures += 1
            continue

        # a second pass over the expected file must not change it
        again = generate(case, case_dir / "expected.go")
        if again.returncode != 0:
            print(f"[FAIL] re-run on expected failed: {name}")
            if again.stderr:
                print(again.stderr.strip())
            failures += 1
            continue
        if again.stdout != (case_dir / "expected.go").read_text(encoding="utf-8"):
            print(f"[FAIL] not idempotent: {name}")
            failures += 1
            continue

        print(f"[OK] {name}")

    return 2 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
