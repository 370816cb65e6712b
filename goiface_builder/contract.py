from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Iterator

from .errors import fail, source_position
from .models import ContractEmbed, ContractEntry, ContractSpec, Method, Param, Signature


INDENT = "\t"


def erase_result_names(signature: Signature) -> Signature:
    """Drop result names, keeping one unnamed result per named one."""
    results: list[Param] = []
    for result in signature.results:
        count = max(1, len(result.names))
        results.extend(Param((), result.type_text) for _ in range(count))
    return Signature(params=signature.params, results=tuple(results))


def synthesize_contract(methods: Iterable[Method], path: str = "<input>") -> ContractSpec:
    entries: list[ContractEntry] = []
    seen: set[str] = set()
    for method in methods:
        if method.name in seen:
            raise fail(
                "E_METHOD_REDECLARED",
                "method declared more than once for type",
                expected="unique method names",
                got=f"{method.receiver.type_name}.{method.name}",
                path=source_position(path, method.line),
            )
        seen.add(method.name)
        entries.append(ContractEntry(name=method.name, signature=erase_result_names(method.signature)))
    return ContractSpec(entries=tuple(entries))


def merge_contracts(left: ContractSpec, right: ContractSpec) -> ContractSpec:
    """Merge an existing interface (``left``) with a synthesized one (``right``).

    All ``right`` entries come first, in order, followed by the ``left`` entries
    whose names ``right`` does not define. On a name clash the ``right``
    signature wins; the ``left`` doc and trailing comments are kept for it.
    """
    left_by_name = {entry.name: entry for entry in left.entries}
    entries: list[ContractEntry] = []
    seen: set[str] = set()

    for entry in right.entries:
        if entry.name in seen:
            continue
        previous = left_by_name.get(entry.name)
        if previous is not None:
            entry = replace(
                entry,
                doc=entry.doc or previous.doc,
                trailing=entry.trailing or previous.trailing,
            )
        seen.add(entry.name)
        entries.append(entry)

    for entry in left.entries:
        if entry.name in seen:
            continue
        seen.add(entry.name)
        entries.append(entry)

    embeds: list[ContractEmbed] = []
    embed_texts: set[str] = set()
    for embed in (*left.embeds, *right.embeds):
        if embed.text in embed_texts:
            continue
        embed_texts.add(embed.text)
        embeds.append(embed)

    return ContractSpec(
        entries=tuple(entries),
        embeds=tuple(embeds),
        footer=left.footer + right.footer,
        header=left.header or right.header,
    )


def _render_param(param: Param) -> str:
    if not param.names:
        return param.type_text
    return f"{', '.join(param.names)} {param.type_text}"


def render_params(params: tuple[Param, ...]) -> str:
    return "(" + ", ".join(_render_param(p) for p in params) + ")"


def render_results(results: tuple[Param, ...]) -> str:
    if not results:
        return ""
    if len(results) == 1 and not results[0].names:
        return " " + results[0].type_text
    return " " + render_params(results)


def render_signature(name: str, signature: Signature) -> str:
    return name + render_params(signature.params) + render_results(signature.results)


def _element_lines(doc: tuple[str, ...], text: str, trailing: str | None) -> list[str]:
    lines = [INDENT + comment for comment in doc]
    if trailing:
        text = f"{text} {trailing}"
    lines.append(_indent(text))
    return lines


def _indent(text: str) -> str:
    return "\n".join(INDENT + line if line else line for line in text.split("\n"))


def ordered_elements(spec: ContractSpec) -> Iterator[ContractEntry | ContractEmbed]:
    """Yield methods and embedded elements in source order.

    An embed sits directly under the method it ``follows``. Embeds that follow
    no method present in ``spec`` come first.
    """
    names = set(spec.names())
    under: dict[str | None, list[ContractEmbed]] = {}
    for embed in spec.embeds:
        key = embed.follows if embed.follows in names else None
        under.setdefault(key, []).append(embed)
    yield from under.get(None, ())
    for entry in spec.entries:
        yield entry
        yield from under.get(entry.name, ())


def render_contract(
    name: str,
    spec: ContractSpec,
    *,
    doc: Iterable[str] = (),
    type_params: str = "",
    trailing: str | None = None,
) -> str:
    """Render a gofmt-style interface declaration without a final newline."""
    lines = list(doc)
    header = f" {spec.header}" if spec.header else ""
    lines.append(f"type {name}{type_params} interface {{{header}")
    for element in ordered_elements(spec):
        if isinstance(element, ContractEntry):
            text = render_signature(element.name, element.signature)
        else:
            text = element.text
        lines.extend(_element_lines(element.doc, text, element.trailing))
    lines.extend(INDENT + comment for comment in spec.footer)
    lines.append("}" + (f" {trailing}" if trailing else ""))
    return "\n".join(lines)
