from __future__ import annotations

import json
from pathlib import Path

import pytest


GOLDENS = Path(__file__).resolve().parent / "goldens"


def golden_cases() -> list[str]:
    return sorted(p.name for p in GOLDENS.iterdir() if (p / "case.json").exists())


def load_case(name: str) -> tuple[str, str, str, str]:
    case_dir = GOLDENS / name
    case = json.loads((case_dir / "case.json").read_text(encoding="utf-8"))
    return (
        (case_dir / "input.go").read_text(encoding="utf-8"),
        (case_dir / "expected.go").read_text(encoding="utf-8"),
        case["type"],
        case["interface"],
    )


@pytest.fixture
def write_go(tmp_path: Path):
    def _write(text: str, name: str = "src.go") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
