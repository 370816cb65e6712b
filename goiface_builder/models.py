from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DeclKind(Enum):
    TYPE = "type"
    CONTRACT = "contract"
    FUNCTION = "function"
    VALUE = "value"


@dataclass(frozen=True)
class DocBlock:
    start_line: int
    end_line: int
    lines: tuple[str, ...]


@dataclass(frozen=True)
class Param:
    names: tuple[str, ...]
    type_text: str


@dataclass(frozen=True)
class Signature:
    params: tuple[Param, ...] = ()
    results: tuple[Param, ...] = ()


@dataclass(frozen=True)
class Receiver:
    binding: str | None
    type_name: str
    pointer: bool


@dataclass(frozen=True)
class ContractEntry:
    name: str
    signature: Signature
    doc: tuple[str, ...] = ()
    trailing: str | None = None


@dataclass(frozen=True)
class ContractEmbed:
    text: str
    doc: tuple[str, ...] = ()
    trailing: str | None = None
    # name of the method this element sits under, None when above all methods
    follows: str | None = None


@dataclass(frozen=True)
class ContractSpec:
    entries: tuple[ContractEntry, ...] = ()
    embeds: tuple[ContractEmbed, ...] = ()
    footer: tuple[str, ...] = ()
    header: str | None = None

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]


@dataclass(frozen=True)
class Declaration:
    """A named top-level construct.

    ``start_line``/``end_line`` cover the enclosing top-level statement, so a
    type declared inside ``type ( ... )`` reports the whole group.
    """

    name: str
    kind: DeclKind
    start_line: int
    end_line: int
    doc: DocBlock | None = None
    grouped: bool = False
    receivers: tuple[Receiver, ...] = ()
    has_receiver: bool = False
    signature: Signature | None = None
    contract: ContractSpec | None = None
    type_params: str = ""
    trailing: str | None = None

    @property
    def first_line(self) -> int:
        if self.doc is not None:
            return self.doc.start_line
        return self.start_line


@dataclass(frozen=True)
class Method:
    name: str
    receiver: Receiver
    signature: Signature
    line: int


@dataclass(frozen=True)
class Document:
    path: str
    text: str
    declarations: tuple[Declaration, ...] = field(default_factory=tuple)
    original_text: str | None = None

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")
