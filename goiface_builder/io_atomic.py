from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .errors import fail


def read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise fail(
            "E_FILE_UNREADABLE",
            "source file could not be read",
            expected="readable UTF-8 file",
            got=str(exc),
            path=str(path),
        ) from exc


def atomic_write_source(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` through a temp file in the same directory.

    The file keeps its permission bits. Symlinks are refused so the link target
    is never swapped out from under it.
    """
    if path.is_symlink():
        raise fail(
            "E_FILE_UNWRITABLE",
            "refusing to replace a symlink",
            expected="regular file",
            got="symlink",
            path=str(path),
        )
    tmp_path: Path | None = None
    try:
        mode = path.stat().st_mode & 0o777 if path.exists() else None
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", delete=False, dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as exc:
        raise fail(
            "E_FILE_UNWRITABLE",
            "source file could not be written",
            expected="writable file",
            got=str(exc),
            path=str(path),
        ) from exc
    finally:
        if tmp_path is not None and tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                pass
