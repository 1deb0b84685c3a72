import sys
import os
import argparse
from .ui.app import run_tui
from .engine import CpleEngine
from .utils.lang import is_supported
from .utils.report import print_report


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="cplebolt: build, check and run CPLE programs")
    parser.add_argument("file", nargs="?", help="CPLE source file (.cple)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--compile", action="store_true", help="Compile once and print diagnostics")
    mode.add_argument("--run", action="store_true", help="Compile, then run the compiled program")
    mode.add_argument("--check", action="store_true", help="Check syntax only")
    mode.add_argument("--debug", action="store_true", help="Show which files the compiler creates")
    return parser


def _one_shot(args, abs_path: str) -> int:
    engine = CpleEngine(abs_path)
    if args.run:
        ok = engine.run() is not None and not engine.state.last_run.failed
    elif args.check:
        ok = engine.check_syntax()
    elif args.debug:
        ok = engine.debug_compiler()
    else:
        ok = engine.compile()
    print_report(engine.state)
    return 0 if ok else 1


def run():
    parser = _build_parser()
    args = parser.parse_args()

    if not args.file:
        print("Error: No source file specified.")
        print("Usage: cplebolt <filename.cple> [--compile|--run|--check|--debug]")
        sys.exit(1)

    # Resolve to absolute path immediately
    abs_path = os.path.abspath(args.file)

    if not os.path.exists(abs_path):
        print(f"Error: File not found: {abs_path}")
        sys.exit(1)

    if not is_supported(abs_path):
        print("Error: Not a CPLE file. Use a .cple source file")
        sys.exit(1)

    if args.compile or args.run or args.check or args.debug:
        sys.exit(_one_shot(args, abs_path))

    try:
        run_tui(abs_path)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        print(f"Fatal Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
