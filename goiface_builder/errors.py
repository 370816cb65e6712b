from __future__ import annotations

from dataclasses import dataclass


def source_position(path: str, line: int | None = None) -> str:
    if line is None:
        return path
    return f"{path}:{line}"


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    expected: str
    got: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return {
            "code": self.code,
            "message": self.message,
            "expected": self.expected,
            "got": self.got,
            "path": self.path,
        }


class GenerateError(Exception):
    def __init__(self, diagnostic: Diagnostic) -> None:
        super().__init__(f"{diagnostic.code}: {diagnostic.message}")
        self.diagnostic = diagnostic

    @property
    def code(self) -> str:
        return self.diagnostic.code


def fail(code: str, message: str, *, expected: str = "", got: str = "", path: str = "") -> GenerateError:
    return GenerateError(
        Diagnostic(code=code, message=message, expected=expected, got=got, path=path)
    )
