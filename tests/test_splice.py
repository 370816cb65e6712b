from __future__ import annotations

import pytest

from goiface_builder.splice import insert_declaration, remove_lines


SOURCE = "package main\n\n// doc\ntype a int\n"


def test_insert_declaration_adds_blank_separator() -> None:
    out = insert_declaration(SOURCE, "type I interface {\n}", 3)
    assert out == "package main\n\ntype I interface {\n}\n\n// doc\ntype a int\n"


def test_insert_declaration_keeps_other_lines() -> None:
    out = insert_declaration(SOURCE, "type I interface {\n}", 3)
    lines = out.split("\n")
    assert lines[:2] == SOURCE.split("\n")[:2]
    assert lines[5:] == SOURCE.split("\n")[2:]


def test_insert_declaration_past_end_appends() -> None:
    out = insert_declaration("package main", "type I interface {\n}", 10)
    assert out == "package main\ntype I interface {\n}\n"


def test_insert_declaration_rejects_line_zero() -> None:
    with pytest.raises(ValueError):
        insert_declaration(SOURCE, "x", 0)


def test_remove_lines_inclusive() -> None:
    assert remove_lines(SOURCE, 3, 4) == "package main\n\n"


def test_remove_lines_rejects_bad_range() -> None:
    with pytest.raises(ValueError):
        remove_lines(SOURCE, 4, 3)
