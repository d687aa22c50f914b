import argparse
import os
import sys
import time

from .compiler import compile_arrowscript
from .config import STAGE_MAP
from .exceptions import ArrowScriptError, InternalCompilerError
from .parser.core.classes import ConstDeclaration
from .utils import TerminalColors, offset_to_line_col


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{TerminalColors.RESET}" if enabled else text


def format_diagnostic(source: str, diagnostic) -> str:
    line, column = offset_to_line_col(source, diagnostic.offset)
    return f"Error (Line: {line}, Column: {column}): {diagnostic.message}"


def _build_arg_parser() -> argparse.ArgumentParser:
    stages = " ".join(f"'{key}' = {description}." for key, (_, description) in STAGE_MAP.items())
    parser = argparse.ArgumentParser(prog="asc", description="Type-check an ArrowScript file.")
    parser.add_argument("input_file", nargs="?", help="Path to the .as file. Reads stdin when omitted.")
    parser.add_argument(
        "-c",
        "--compile",
        choices=STAGE_MAP.keys(),
        metavar="STAGE",
        help=f"Stop after a stage and write its artifact as JSON. {stages}",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors in the output.")
    return parser


def _read_source(input_file):
    if input_file is None:
        return sys.stdin.read(), None
    path = os.path.abspath(input_file)
    with open(path, "r", encoding="utf-8") as f:
        return f.read(), path


def main(argv=None):
    start_time = time.perf_counter()
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    use_color = not args.no_color

    if args.input_file is None and sys.stdin.isatty():
        parser.error("input_file is required when not reading from a pipe.")

    display_name = args.input_file or "stdin"
    stop_after_stage = STAGE_MAP[args.compile][0] if args.compile else None
    print(f"--- Compiling {display_name} ---")

    try:
        source, source_path = _read_source(args.input_file)
        program, diagnostics = compile_arrowscript(
            source,
            file_path=source_path,
            dump_stages=[stop_after_stage] if stop_after_stage else None,
            stop_after_stage=stop_after_stage,
        )

        if diagnostics:
            print(_paint(f"\n--- {len(diagnostics)} ERROR(S) FOUND ---", TerminalColors.RED, use_color), file=sys.stderr)
            for diagnostic in diagnostics:
                print(_paint(format_diagnostic(source, diagnostic), TerminalColors.RED, use_color), file=sys.stderr)
            sys.exit(1)

        if stop_after_stage:
            description = STAGE_MAP[args.compile][1]
            print(_paint(f"\n--- Compilation to stage '{args.compile} ({description})' successful ---", TerminalColors.GREEN, use_color))
            return

        print(_paint("\n--- Type Check Successful ---", TerminalColors.GREEN, use_color))
        for statement in program.body:
            if isinstance(statement, ConstDeclaration):
                print(f"{statement.id.name}: {statement.inferred_type}")

    except FileNotFoundError:
        print(_paint(f"ERROR: Script file '{display_name}' not found.", TerminalColors.RED, use_color), file=sys.stderr)
        sys.exit(1)
    except ArrowScriptError as e:
        print(_paint(f"\n--- COMPILATION ERROR ---\n{e}", TerminalColors.RED, use_color), file=sys.stderr)
        sys.exit(1)
    except InternalCompilerError as e:
        print(_paint("\n--- UNEXPECTED COMPILER ERROR ---", TerminalColors.RED, use_color), file=sys.stderr)
        print("This may be a bug in the compiler. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        duration = time.perf_counter() - start_time
        print(_paint(f"\n--- Total Execution Time: {duration:.4f} seconds ---", TerminalColors.CYAN, use_color))


if __name__ == "__main__":
    main()
