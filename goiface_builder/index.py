from __future__ import annotations

from .errors import fail
from .models import Declaration, DeclKind, Document


REFERENCE_KINDS = {DeclKind.TYPE, DeclKind.CONTRACT}


class DeclarationIndex:
    """Name lookup over the top-level declarations of one document.

    Methods are left out because their names are only unique per receiver.
    The index is built per ``Document`` and must be rebuilt after a re-parse.
    """

    def __init__(self, document: Document) -> None:
        self.document = document
        self._by_name: dict[str, Declaration] = {}
        for decl in document.declarations:
            if decl.kind is DeclKind.FUNCTION and decl.has_receiver:
                continue
            self._by_name.setdefault(decl.name, decl)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def lookup(self, name: str) -> Declaration | None:
        return self._by_name.get(name)

    def require_reference(self, name: str) -> Declaration:
        decl = self._by_name.get(name)
        if decl is None or decl.kind not in REFERENCE_KINDS:
            raise fail(
                "E_REFERENCE_NOT_FOUND",
                "reference declaration not found",
                expected="type or interface declaration",
                got=name if decl is None else f"{decl.kind.value} {name}",
                path=self.document.path,
            )
        return decl

    def overlapping(self, first_line: int, last_line: int, exclude: Declaration) -> list[Declaration]:
        return [
            decl
            for decl in self.document.declarations
            if decl is not exclude
            and decl.start_line <= last_line
            and decl.end_line >= first_line
        ]
