from __future__ import annotations


def insert_declaration(text: str, rendered: str, line: int) -> str:
    """Insert ``rendered`` plus one blank separator line before ``line``.

    ``line`` is 1-indexed; past the end of ``text`` the block is appended.
    Every other line is returned unchanged.
    """
    if line < 1:
        raise ValueError(f"line must be >= 1, got {line}")
    lines = text.split("\n")
    block = rendered + "\n"
    index = line - 1
    if index > len(lines):
        lines.append(block)
    else:
        lines[index:index] = [block]
    return "\n".join(lines)


def remove_lines(text: str, first: int, last: int) -> str:
    """Remove the inclusive 1-indexed line range ``first..last``."""
    if first < 1 or last < first:
        raise ValueError(f"invalid line range {first}..{last}")
    lines = text.split("\n")
    del lines[first - 1 : last]
    return "\n".join(lines)
