from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .api import CompileOptions, compile_file
from .errors import BBFError
from .executor import ExecutorOptions, execute


def _add_run_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("input", nargs="?", default="", help="Input string consumed by ','")
    p.add_argument("--bits", type=int, default=8, help="Cell width in bits (default 8)")
    p.add_argument("--number-input", action="store_true", help="Read input characters as single digits")
    p.add_argument("--tape-size", type=int, default=30000, help="Number of tape cells (default 30000)")
    p.add_argument("--step-limit", type=int, default=None, help="Abort after this many instructions")


def _add_compile_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument("--free-subtraction-copies", action="store_true",
                   help="Release the scratch cells subtraction would otherwise keep")
    p.add_argument("--trace", action="store_true", help="Print the per-statement compile trace to stderr")


def _compile_options(args) -> CompileOptions:
    return CompileOptions(free_subtraction_copies=args.free_subtraction_copies, trace=args.trace)


def _executor_options(args) -> ExecutorOptions:
    return ExecutorOptions(
        tape_size=args.tape_size,
        bits=args.bits,
        number_input=args.number_input,
        step_limit=args.step_limit,
    )


def _compile(args):
    result = compile_file(args.src, options=_compile_options(args))
    if args.trace:
        for line in result.trace:
            print(line, file=sys.stderr)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="bbf", description="Compile BBF programs to tape-machine code.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    c_compile = sub.add_parser("compile", help="Compile a .bbf source file")
    c_compile.add_argument("src", help="Source file")
    c_compile.add_argument("out", nargs="?", help="Output file (defaults to <src>.bf next to the source)")
    _add_compile_flags(c_compile)

    c_execute = sub.add_parser("execute", help="Run compiled tape-machine code")
    c_execute.add_argument("program", help="Compiled program file")
    _add_run_flags(c_execute)

    c_run = sub.add_parser("run", help="Compile and run a .bbf source file")
    c_run.add_argument("src", help="Source file")
    _add_compile_flags(c_run)
    _add_run_flags(c_run)

    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.cmd == "compile":
            result = _compile(args)
            out_path = Path(args.out) if args.out else Path(args.src).with_suffix(".bf")
            out_path.write_text(result.bf_code, encoding="utf-8")
            print(f"Compiled {args.src} -> {out_path}")
        elif args.cmd == "execute":
            program = Path(args.program).read_text(encoding="utf-8")
            print(execute(program, args.input, _executor_options(args)))
        elif args.cmd == "run":
            result = _compile(args)
            print(execute(result.bf_code, args.input, _executor_options(args)))
    except BBFError as e:
        print(str(e), file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
