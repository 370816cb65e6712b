from __future__ import annotations

import pytest

from goiface_builder.config import config_from_dict
from goiface_builder.errors import GenerateError
from goiface_builder.format import canonicalize
from goiface_builder.generate import extract_declaration_text, generate_contract
from goiface_builder.parse import parse_document


def go(text: str) -> str:
    return text.replace("→", "\t")


EXAMPLE = go(
    """\
package main

type example struct{}

func (e example) First() {}

func (e example) Second(one, two string) (named example, other example) {
→return e, e
}
"""
)


def test_end_to_end_new_interface() -> None:
    result = generate_contract(EXAMPLE, "example", "ExampleInterface")
    assert result.created is True
    assert result.anchor == 3
    assert result.contract == go(
        "type ExampleInterface interface {\n"
        "→First()\n"
        "→Second(one, two string) (example, example)\n"
        "}"
    )
    assert result.source == EXAMPLE.replace(
        "type example struct{}",
        result.contract + "\n\ntype example struct{}",
    )


def test_untouched_lines_are_byte_identical() -> None:
    messy = EXAMPLE.replace("package main\n", "package main   \r\n\n\n")
    canonical = canonicalize(messy)
    result = generate_contract(messy, "example", "ExampleInterface")
    inserted = result.contract.split("\n") + [""]
    anchor = result.anchor - 1
    expected = canonical.split("\n")
    assert result.source.split("\n") == expected[:anchor] + inserted + expected[anchor:]


def test_output_is_deterministic() -> None:
    first = generate_contract(EXAMPLE, "example", "ExampleInterface")
    second = generate_contract(EXAMPLE, "example", "ExampleInterface")
    assert first == second


def test_update_is_idempotent() -> None:
    first = generate_contract(EXAMPLE, "example", "ExampleInterface")
    second = generate_contract(first.source, "example", "ExampleInterface")
    assert second.created is False
    assert second.source == first.source
    assert second.source.count("type ExampleInterface interface") == 1


def test_merge_prefers_current_signature() -> None:
    text = go(
        """\
package p

type Checker interface {
→M(x int) bool
}

type impl struct{}

func (i impl) M(x int) string { return "" }
"""
    )
    result = generate_contract(text, "impl", "Checker")
    assert result.contract == go("type Checker interface {\n→M(x int) string\n}")
    assert result.source.count("M(x int)") == 2


def test_merge_keeps_methods_without_a_concrete_counterpart() -> None:
    text = go(
        """\
package p

type impl struct{}

func (i impl) New() {}

// Contract is hand written.
type Contract interface {
→// Legacy stays.
→Legacy()
}

func after() {}
"""
    )
    result = generate_contract(text, "impl", "Contract")
    assert result.anchor == 7
    assert result.contract == go(
        "// Contract is hand written.\n"
        "type Contract interface {\n"
        "→New()\n"
        "→// Legacy stays.\n"
        "→Legacy()\n"
        "}"
    )
    # interface stays where it was, below the type
    lines = result.source.split("\n")
    assert lines.index("type impl struct{}") < lines.index("type Contract interface {")
    assert result.source.endswith("}\n\nfunc after() {}\n")


def test_update_keeps_embeds_and_trailing_comments() -> None:
    text = go(
        """\
package p

import "fmt"

type Thing interface {
→fmt.Stringer
→Old() int // deprecated
} // Thing

type thing int

func (t thing) Old() int { return 0 }

func (t thing) String() string { return "" }
"""
    )
    result = generate_contract(text, "thing", "Thing")
    assert result.contract == go(
        "type Thing interface {\n"
        "→fmt.Stringer\n"
        "→Old() int // deprecated\n"
        "→String() string\n"
        "} // Thing"
    )


def test_empty_method_set_produces_empty_interface() -> None:
    result = generate_contract("package p\n\ntype lonely int\n", "lonely", "Lonely")
    assert result.source == "package p\n\ntype Lonely interface {\n}\n\ntype lonely int\n"


def test_anchor_goes_above_type_doc_comment() -> None:
    text = "package p\n\n// t is documented.\ntype t int\n\nfunc (x t) Do() {}\n"
    result = generate_contract(text, "t", "Doer")
    assert result.source == go(
        "package p\n\ntype Doer interface {\n→Do()\n}\n\n"
        "// t is documented.\ntype t int\n\nfunc (x t) Do() {}\n"
    )


def test_pointer_receivers_follow_config() -> None:
    text = "package p\n\ntype t int\n\nfunc (x *t) Ptr() {}\n\nfunc (x t) Val() {}\n"
    config = config_from_dict({"match_pointer_receivers": False})
    result = generate_contract(text, "t", "I", config)
    assert result.contract == go("type I interface {\n→Val()\n}")


def test_reparsed_contract_can_be_isolated() -> None:
    result = generate_contract(EXAMPLE, "example", "ExampleInterface")
    document = parse_document(result.source)
    assert extract_declaration_text(document, "ExampleInterface") == result.contract


@pytest.mark.parametrize(
    "text,type_name,contract_name,code",
    [
        ("package p\n\ntype t int\n", "missing", "I", "E_TYPE_NOT_FOUND"),
        ("package p\n\nfunc t() {}\n", "t", "I", "E_TYPE_NOT_FOUND"),
        ("package p\n\ntype t int\n\ntype I struct{}\n", "t", "I", "E_NAME_COLLISION"),
        ("package p\n\ntype t int\n\nfunc I() {}\n", "t", "I", "E_MALFORMED_EXISTING_CONTRACT"),
        ("package p\n\ntype t int\n\nvar I = 1\n", "t", "I", "E_MALFORMED_EXISTING_CONTRACT"),
        (
            "package p\n\ntype t int\n\ntype (\n\tI interface{}\n\tJ int\n)\n",
            "t",
            "I",
            "E_DECL_NOT_TOP_LEVEL",
        ),
        (
            "package p\n\ntype t int\n\ntype I interface{ A() }; var x = 1\n",
            "t",
            "I",
            "E_DECL_NOT_TOP_LEVEL",
        ),
        ("package p\n\ntype t struct {\n", "t", "I", "E_GO_SYNTAX"),
    ],
)
def test_errors(text: str, type_name: str, contract_name: str, code: str) -> None:
    with pytest.raises(GenerateError) as excinfo:
        generate_contract(text, type_name, contract_name, path="p.go")
    assert excinfo.value.code == code


def test_empty_names_are_rejected() -> None:
    with pytest.raises(ValueError):
        generate_contract(EXAMPLE, "", "I")


MULTILINE = go(
    """\
package p

type t int

func (x t) Do(opts struct {
→A int
→B int
}) {}
"""
)


def test_multiline_parameter_type_is_reindented() -> None:
    result = generate_contract(MULTILINE, "t", "I")
    assert result.contract == go(
        "type I interface {\n"
        "→Do(opts struct {\n"
        "→→A int\n"
        "→→B int\n"
        "→})\n"
        "}"
    )
    again = generate_contract(result.source, "t", "I")
    assert again.source == result.source


def test_unchanged_interface_keeps_element_order_and_header_comment() -> None:
    text = go(
        """\
package p

import "io"

type I interface { // note
→A()
→io.Reader
}

type t int

func (x t) A() {}
"""
    )
    result = generate_contract(text, "t", "I")
    assert result.created is False
    assert result.source == text


def test_broken_splice_is_reported(monkeypatch) -> None:
    monkeypatch.setattr(
        "goiface_builder.generate.render_contract",
        lambda name, spec, **kwargs: f"type {name} interface {{",
    )
    with pytest.raises(GenerateError) as excinfo:
        generate_contract(EXAMPLE, "example", "ExampleInterface", path="p.go")
    assert excinfo.value.code == "E_SPLICE_REPARSE_FAILED"
    assert excinfo.value.diagnostic.got.startswith("E_GO_SYNTAX")
