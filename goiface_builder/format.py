from __future__ import annotations

import subprocess
from typing import Sequence

from .config import Config
from .errors import fail


def format_source(text: str, config: Config, path: str = "<input>") -> str:
    """Return the canonical form of ``text`` using the configured formatter."""
    if config.formatter == "gofmt":
        return run_gofmt(text, config.gofmt_command, path)
    return canonicalize(text)


def run_gofmt(text: str, command: Sequence[str], path: str = "<input>") -> str:
    try:
        proc = subprocess.run(list(command), input=text, capture_output=True, text=True)
    except OSError as exc:
        raise fail(
            "E_FORMATTER_UNAVAILABLE",
            "formatter could not be started",
            expected=" ".join(command),
            got=str(exc),
            path=path,
        ) from exc
    if proc.returncode != 0:
        raise fail(
            "E_GO_SYNTAX",
            "formatter rejected source",
            expected="Go source file",
            got=proc.stderr.strip(),
            path=path,
        )
    return proc.stdout


def canonicalize(text: str) -> str:
    """Whitespace-only normalization of Go source.

    Line endings become ``\\n``, trailing whitespace is removed, runs of blank
    lines collapse to one and the text ends with a single newline. Lines that
    start or end inside a raw string literal are left alone.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    output: list[str] = []
    blank_streak = 0
    in_raw = False
    in_block_comment = False

    for line in normalized.split("\n"):
        starts_inside = in_raw or in_block_comment
        in_raw, in_block_comment = _scan_line(line, in_raw, in_block_comment)
        if in_raw:
            output.append(line)
            blank_streak = 0
            continue
        line = line.rstrip()
        if line == "" and not starts_inside:
            blank_streak += 1
            if blank_streak > 1:
                continue
        else:
            blank_streak = 0
        output.append(line)

    while output and output[0] == "":
        output.pop(0)
    while output and output[-1] == "":
        output.pop()
    if not output:
        return ""
    return "\n".join(output) + "\n"


def _scan_line(line: str, in_raw: bool, in_block_comment: bool) -> tuple[bool, bool]:
    quote: str | None = None
    index = 0
    while index < len(line):
        ch = line[index]
        if in_raw:
            if ch == "`":
                in_raw = False
            index += 1
            continue
        if in_block_comment:
            if line.startswith("*/", index):
                in_block_comment = False
                index += 2
                continue
            index += 1
            continue
        if quote:
            if ch == "\\":
                index += 2
                continue
            if ch == quote:
                quote = None
            index += 1
            continue
        if line.startswith("//", index):
            break
        if line.startswith("/*", index):
            in_block_comment = True
            index += 2
            continue
        if ch == "`":
            in_raw = True
        elif ch in ("\"", "'"):
            quote = ch
        index += 1
    return in_raw, in_block_comment
