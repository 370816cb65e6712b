from __future__ import annotations

from typing import Iterator

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from .errors import fail, source_position
from .models import (
    ContractEmbed,
    ContractEntry,
    ContractSpec,
    Declaration,
    DeclKind,
    DocBlock,
    Document,
    Param,
    Receiver,
    Signature,
)


GO_LANGUAGE = Language(tree_sitter_go.language())

FUNCTION_DECL_TYPES = {"function_declaration", "method_declaration"}
TYPE_SPEC_TYPES = {"type_spec", "type_alias"}
VALUE_DECL_TYPES = {"var_declaration", "const_declaration"}
VALUE_SPEC_TYPES = {"var_spec", "const_spec"}
# older grammar releases call interface methods "method_spec"
METHOD_ELEM_TYPES = {"method_elem", "method_spec"}
PARAM_DECL_TYPES = {"parameter_declaration", "variadic_parameter_declaration"}
RECEIVER_WRAPPER_TYPES = {"pointer_type", "parenthesized_type"}


def parse_document(text: str, path: str = "<input>", original_text: str | None = None) -> Document:
    """Parse Go source into a ``Document``.

    Raises ``GenerateError`` with ``E_GO_SYNTAX`` when tree-sitter reports an
    error or missing node anywhere in the file.
    """
    source = text.encode("utf-8")
    tree = Parser(GO_LANGUAGE).parse(source)
    root = tree.root_node
    if root.has_error:
        raise _syntax_error(root, source, path)

    reader = _DeclarationReader(source, text)
    declarations: list[Declaration] = []
    for node in root.named_children:
        declarations.extend(reader.read(node))
    return Document(
        path=path,
        text=text,
        declarations=tuple(declarations),
        original_text=original_text,
    )


def _syntax_error(root: Node, source: bytes, path: str):
    node = _first_error_node(root)
    if node is None:
        return fail("E_GO_SYNTAX", "source is not valid Go", expected="Go source file", got="", path=path)
    line = node.start_point[0] + 1
    if node.is_missing:
        got = f"missing {node.type}"
    else:
        snippet = source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
        got = " ".join(snippet.split())[:80]
    return fail(
        "E_GO_SYNTAX",
        "source is not valid Go",
        expected="Go source file",
        got=got,
        path=source_position(path, line),
    )


def _first_error_node(root: Node) -> Node | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(reversed(node.children))
    return None


class _DeclarationReader:
    def __init__(self, source: bytes, text: str) -> None:
        self.source = source
        self.lines = text.split("\n")

    def read(self, node: Node) -> list[Declaration]:
        if node.type == "type_declaration":
            return self._types(node)
        if node.type in FUNCTION_DECL_TYPES:
            return [self._function(node)]
        if node.type in VALUE_DECL_TYPES:
            return self._values(node)
        return []

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def type_text(self, node: Node | None) -> str:
        """Type source with whitespace runs collapsed.

        Multi-line types such as anonymous ``struct`` bodies keep their line
        breaks. Continuation lines drop the indentation of the line the type
        starts on, so the renderer can indent them for wherever they land.
        """
        if node is None:
            return ""
        raw = self.text(node)
        if "\n" not in raw:
            return " ".join(raw.split())
        first = self.lines[node.start_point[0]]
        base = first[: len(first) - len(first.lstrip())]
        lines = raw.split("\n")
        kept = [" ".join(lines[0].split())]
        for line in lines[1:]:
            kept.append(line[len(base) :] if line.startswith(base) else line.lstrip())
        return "\n".join(kept)

    def _span(self, node: Node) -> tuple[int, int]:
        start_row, _ = node.start_point
        end_row, end_col = node.end_point
        if end_col == 0 and end_row > start_row:
            end_row -= 1
        return start_row + 1, end_row + 1

    def _doc(self, node: Node) -> DocBlock | None:
        comments: list[Node] = []
        current_row = node.start_point[0]
        prev = node.prev_named_sibling
        while prev is not None and prev.type == "comment":
            if current_row - prev.end_point[0] > 1:
                break
            before = prev.prev_named_sibling
            if (
                before is not None
                and before.type != "comment"
                and before.end_point[0] == prev.start_point[0]
            ):
                # line comment of the previous statement
                break
            comments.append(prev)
            current_row = prev.start_point[0]
            prev = before
        if not comments:
            return None
        start_line = comments[-1].start_point[0] + 1
        end_line = comments[0].end_point[0] + 1
        return DocBlock(
            start_line=start_line,
            end_line=end_line,
            lines=tuple(self.lines[start_line - 1 : end_line]),
        )

    def _trailing(self, node: Node) -> Node | None:
        nxt = node.next_named_sibling
        if nxt is not None and nxt.type == "comment" and nxt.start_point[0] == node.end_point[0]:
            return nxt
        return None

    def _trailing_text(self, node: Node) -> str | None:
        comment = self._trailing(node)
        return self.text(comment) if comment is not None else None

    def _types(self, node: Node) -> list[Declaration]:
        start_line, end_line = self._span(node)
        doc = self._doc(node)
        trailing = self._trailing_text(node)
        grouped = any(child.type == "(" for child in node.children)
        decls: list[Declaration] = []
        for spec in node.named_children:
            if spec.type not in TYPE_SPEC_TYPES:
                continue
            name_node = spec.child_by_field_name("name")
            if name_node is None:
                continue
            type_node = spec.child_by_field_name("type")
            params_node = spec.child_by_field_name("type_parameters")
            is_contract = (
                spec.type == "type_spec"
                and type_node is not None
                and type_node.type == "interface_type"
            )
            decls.append(
                Declaration(
                    name=self.text(name_node),
                    kind=DeclKind.CONTRACT if is_contract else DeclKind.TYPE,
                    start_line=start_line,
                    end_line=end_line,
                    doc=doc,
                    grouped=grouped,
                    contract=self._interface(type_node) if is_contract else None,
                    type_params=self.type_text(params_node),
                    trailing=trailing,
                )
            )
        return decls

    def _function(self, node: Node) -> Declaration:
        start_line, end_line = self._span(node)
        receiver_list = node.child_by_field_name("receiver")
        receivers: tuple[Receiver, ...] = ()
        if receiver_list is not None:
            receivers = tuple(
                self._receiver(param)
                for param in receiver_list.named_children
                if param.type in PARAM_DECL_TYPES
            )
        return Declaration(
            name=self.text(node.child_by_field_name("name")),
            kind=DeclKind.FUNCTION,
            start_line=start_line,
            end_line=end_line,
            doc=self._doc(node),
            receivers=receivers,
            has_receiver=receiver_list is not None,
            signature=self._signature(node),
            trailing=self._trailing_text(node),
        )

    def _values(self, node: Node) -> list[Declaration]:
        start_line, end_line = self._span(node)
        doc = self._doc(node)
        names = list(self._value_names(node))
        return [
            Declaration(
                name=name,
                kind=DeclKind.VALUE,
                start_line=start_line,
                end_line=end_line,
                doc=doc,
                grouped=len(names) > 1,
            )
            for name in names
        ]

    def _value_names(self, node: Node) -> Iterator[str]:
        for child in node.named_children:
            if child.type in VALUE_SPEC_TYPES:
                for name in child.children_by_field_name("name"):
                    yield self.text(name)
            elif child.type.endswith("_spec_list"):
                yield from self._value_names(child)

    def _receiver(self, param: Node) -> Receiver:
        binding_node = param.child_by_field_name("name")
        type_node = param.child_by_field_name("type")
        pointer = False
        while type_node is not None and type_node.type in RECEIVER_WRAPPER_TYPES:
            if type_node.type == "pointer_type":
                pointer = True
            inner = [child for child in type_node.named_children if child.type != "comment"]
            type_node = inner[0] if inner else None
        if type_node is not None and type_node.type == "generic_type":
            type_node = type_node.child_by_field_name("type")
        return Receiver(
            binding=self.text(binding_node) if binding_node is not None else None,
            type_name=self.type_text(type_node),
            pointer=pointer,
        )

    def _signature(self, node: Node) -> Signature:
        return Signature(
            params=self._params(node.child_by_field_name("parameters")),
            results=self._results(node.child_by_field_name("result")),
        )

    def _params(self, list_node: Node | None) -> tuple[Param, ...]:
        if list_node is None:
            return ()
        params: list[Param] = []
        for child in list_node.named_children:
            if child.type == "parameter_declaration":
                names = tuple(self.text(name) for name in child.children_by_field_name("name"))
                params.append(Param(names, self.type_text(child.child_by_field_name("type"))))
            elif child.type == "variadic_parameter_declaration":
                name = child.child_by_field_name("name")
                names = (self.text(name),) if name is not None else ()
                params.append(Param(names, "..." + self.type_text(child.child_by_field_name("type"))))
        return tuple(params)

    def _results(self, node: Node | None) -> tuple[Param, ...]:
        if node is None:
            return ()
        if node.type == "parameter_list":
            return self._params(node)
        return (Param((), self.type_text(node)),)

    def _interface(self, node: Node) -> ContractSpec:
        entries: list[ContractEntry] = []
        embeds: list[ContractEmbed] = []
        pending: list[str] = []
        consumed: set[int] = set()
        header: str | None = None
        for child in node.named_children:
            if child.type == "comment":
                if child.start_byte in consumed:
                    continue
                if (
                    header is None
                    and not (entries or embeds or pending)
                    and child.start_point[0] == node.start_point[0]
                ):
                    # comment after the opening brace
                    header = self.text(child)
                    continue
                pending.append(self.text(child))
                continue
            trailing_node = self._trailing(child)
            trailing = None
            if trailing_node is not None:
                consumed.add(trailing_node.start_byte)
                trailing = self.text(trailing_node)
            if child.type in METHOD_ELEM_TYPES:
                entries.append(
                    ContractEntry(
                        name=self.text(child.child_by_field_name("name")),
                        signature=self._signature(child),
                        doc=tuple(pending),
                        trailing=trailing,
                    )
                )
            else:
                embeds.append(
                    ContractEmbed(
                        self.type_text(child),
                        tuple(pending),
                        trailing,
                        follows=entries[-1].name if entries else None,
                    )
                )
            pending = []
        return ContractSpec(
            entries=tuple(entries),
            embeds=tuple(embeds),
            footer=tuple(pending),
            header=header,
        )
