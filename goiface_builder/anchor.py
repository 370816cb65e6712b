from __future__ import annotations

from .index import DeclarationIndex


def first_line_including_doc(index: DeclarationIndex, name: str) -> int:
    """Return the 1-indexed line a declaration for ``name`` starts on.

    Given

        1: // comment
        2: // comment
        3: type test string

    the anchor for ``test`` is line 1. Without a doc comment it is the line of
    the ``type`` keyword. Types inside ``type ( ... )`` anchor on the group.
    """
    return index.require_reference(name).first_line
