from __future__ import annotations

from dataclasses import dataclass

from .anchor import first_line_including_doc
from .config import Config, default_config
from .contract import merge_contracts, render_contract, synthesize_contract
from .errors import GenerateError, fail, source_position
from .format import format_source
from .index import REFERENCE_KINDS, DeclarationIndex
from .methods import gather_type_methods
from .models import ContractSpec, Declaration, DeclKind, Document
from .parse import parse_document
from .splice import insert_declaration, remove_lines


@dataclass(frozen=True)
class GenerateResult:
    source: str
    contract: str
    created: bool
    anchor: int


def generate_contract(
    text: str,
    type_name: str,
    contract_name: str,
    config: Config | None = None,
    path: str = "<input>",
) -> GenerateResult:
    """Create or update interface ``contract_name`` from the methods of ``type_name``.

    The input is canonicalized and parsed once. A new interface is spliced in
    above the target type (above its doc comment when it has one). An existing
    interface is merged with the synthesized method set, its old text span is
    removed, and the merged declaration is spliced in at the same anchor. The
    result is re-canonicalized and re-parsed before anything is returned.
    """
    if not type_name or not contract_name:
        raise ValueError("type_name and contract_name must be non-empty")
    if config is None:
        config = default_config()

    formatted = format_source(text, config, path)
    document = parse_document(formatted, path, original_text=text)
    index = DeclarationIndex(document)

    target = index.lookup(type_name)
    if target is None or target.kind not in REFERENCE_KINDS:
        raise fail(
            "E_TYPE_NOT_FOUND",
            "type not declared in file",
            expected="type declaration",
            got=type_name,
            path=path,
        )

    methods = gather_type_methods(document, type_name, config.match_pointer_receivers)
    candidate = synthesize_contract(methods, path)

    existing = index.lookup(contract_name)
    if existing is None:
        anchor = first_line_including_doc(index, type_name)
        rendered = render_contract(contract_name, candidate)
        spliced = insert_declaration(formatted, rendered, anchor)
        created = True
    else:
        _check_existing(existing, index, path)
        anchor = first_line_including_doc(index, contract_name)
        merged = merge_contracts(existing.contract or ContractSpec(), candidate)
        rendered = render_contract(
            contract_name,
            merged,
            doc=existing.doc.lines if existing.doc is not None else (),
            type_params=existing.type_params,
            trailing=existing.trailing,
        )
        excised = remove_lines(formatted, anchor, existing.end_line)
        spliced = insert_declaration(excised, rendered, anchor)
        created = False

    reparsed = _reparse(spliced, config, path, text)
    return GenerateResult(
        source=reparsed.text,
        contract=extract_declaration_text(reparsed, contract_name),
        created=created,
        anchor=anchor,
    )


def _check_existing(existing: Declaration, index: DeclarationIndex, path: str) -> None:
    where = source_position(path, existing.start_line)
    if existing.kind is DeclKind.CONTRACT:
        pass
    elif existing.kind is DeclKind.TYPE:
        raise fail(
            "E_NAME_COLLISION",
            "interface name already in use by a non-interface type",
            expected="interface type",
            got=f"type {existing.name}",
            path=where,
        )
    elif existing.kind in (DeclKind.FUNCTION, DeclKind.VALUE):
        raise fail(
            "E_MALFORMED_EXISTING_CONTRACT",
            "interface name is bound to a declaration that is not a type",
            expected="type declaration",
            got=f"{existing.kind.value} {existing.name}",
            path=where,
        )
    else:
        raise AssertionError(f"unhandled declaration kind: {existing.kind}")

    if existing.grouped:
        raise fail(
            "E_DECL_NOT_TOP_LEVEL",
            "interface is declared inside a grouped type declaration",
            expected="standalone type declaration",
            got=f"type ( ... {existing.name} ... )",
            path=where,
        )
    others = index.overlapping(existing.first_line, existing.end_line, exclude=existing)
    if others:
        raise fail(
            "E_DECL_NOT_TOP_LEVEL",
            "interface declaration shares lines with another declaration",
            expected="interface on its own lines",
            got=", ".join(decl.name for decl in others),
            path=where,
        )


def _reparse(spliced: str, config: Config, path: str, original_text: str) -> Document:
    try:
        source = format_source(spliced, config, path)
        return parse_document(source, path, original_text=original_text)
    except GenerateError as exc:
        raise fail(
            "E_SPLICE_REPARSE_FAILED",
            "spliced source did not parse; this is a bug in the splice",
            expected="valid Go after splice",
            got=f"{exc.diagnostic.code}: {exc.diagnostic.got}",
            path=exc.diagnostic.path,
        ) from exc


def extract_declaration_text(document: Document, name: str) -> str:
    """Return the text of interface ``name`` in ``document``, doc comment included."""
    decl = DeclarationIndex(document).lookup(name)
    if decl is None or decl.kind is not DeclKind.CONTRACT:
        raise fail(
            "E_SPLICE_REPARSE_FAILED",
            "generated interface not found after splice",
            expected=f"interface {name}",
            got="missing" if decl is None else f"{decl.kind.value} {name}",
            path=document.path,
        )
    return "\n".join(document.lines[decl.first_line - 1 : decl.end_line])
