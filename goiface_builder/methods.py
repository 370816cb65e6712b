from __future__ import annotations

from .models import DeclKind, Document, Method


def gather_type_methods(
    document: Document,
    type_name: str,
    match_pointer_receivers: bool = True,
) -> list[Method]:
    """Return the methods declared on ``type_name``, in document order.

    Receivers are matched on identifier text only; ``T[K]`` matches ``T``.
    ``*T`` receivers count as ``T`` unless ``match_pointer_receivers`` is false.
    Functions whose receiver list does not hold exactly one field are skipped.
    """
    if not type_name:
        raise ValueError("type_name must be non-empty")

    methods: list[Method] = []
    for decl in document.declarations:
        if decl.kind is not DeclKind.FUNCTION or not decl.has_receiver:
            continue
        if len(decl.receivers) != 1 or decl.signature is None:
            continue
        receiver = decl.receivers[0]
        if receiver.type_name != type_name:
            continue
        if receiver.pointer and not match_pointer_receivers:
            continue
        methods.append(
            Method(
                name=decl.name,
                receiver=receiver,
                signature=decl.signature,
                line=decl.start_line,
            )
        )
    return methods
