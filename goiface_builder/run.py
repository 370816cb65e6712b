from __future__ import annotations

import argparse
import difflib
import json
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, default_config, load_config
from .errors import Diagnostic, GenerateError
from .generate import GenerateResult, generate_contract
from .io_atomic import atomic_write_source, read_source


DESCRIPTION = """\
Generates an interface from the type's methods found in the specified file.
The file must be valid Go source. If the interface already exists it is
updated in place with the methods found for the type. By default the
resulting file is printed to standard output."""

EXAMPLES = """\
examples:
  goifacegen somecustomtype SomeCustomInterface src.go
  goifacegen -w memStore Store store.go
  goifacegen -i memStore Store store.go"""


def _print_diagnostics(diags: list[Diagnostic]) -> None:
    payload = [d.to_dict() for d in diags]
    print(json.dumps(payload, ensure_ascii=False, indent=2), file=sys.stderr)


def _note(enabled: bool, message: str) -> None:
    if enabled:
        print(message, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="goifacegen",
        description=DESCRIPTION,
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument("type_name", metavar="type", help="Concrete type whose methods form the interface.")
    ap.add_argument("interface_name", metavar="interface", help="Interface to create or update.")
    ap.add_argument("file", help="Go source file.")
    ap.add_argument(
        "-i",
        dest="print_interface",
        action="store_true",
        help="Print only the interface to standard output. Takes precedence over -w and -d.",
    )
    ap.add_argument("-w", dest="write", action="store_true", help="Write result to file instead of stdout.")
    ap.add_argument("-d", dest="diff", action="store_true", help="Print a unified diff instead of the whole file.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Report progress on stderr.")
    ap.add_argument("--config", default=None, help="Path to a JSON config file.")
    ap.add_argument("--version", action="version", version=f"goifacegen {__version__}")
    return ap


def _describe(result: GenerateResult, args: argparse.Namespace) -> str:
    if result.created:
        return f"[INFO] created interface {args.interface_name} at line {result.anchor} above type {args.type_name}"
    return f"[INFO] updated interface {args.interface_name} at line {result.anchor} from type {args.type_name}"


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    path = Path(args.file)

    try:
        config = load_config(Path(args.config)) if args.config else default_config()
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        original = read_source(path)
        result = generate_contract(original, args.type_name, args.interface_name, config, str(path))
        _note(args.verbose, _describe(result, args))

        if args.print_interface:
            print(result.contract)
            return 0

        if args.diff:
            diff = difflib.unified_diff(
                original.splitlines(),
                result.source.splitlines(),
                fromfile=f"{path}.orig",
                tofile=str(path),
                lineterm="",
            )
            output = "\n".join(diff)
            if output:
                print(output)
            else:
                _note(args.verbose, "[INFO] no changes")

        if args.write:
            atomic_write_source(path, result.source)
            _note(args.verbose, f"[OK] wrote {path}")
        elif not args.diff:
            sys.stdout.write(result.source)
    except GenerateError as exc:
        _print_diagnostics([exc.diagnostic])
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
