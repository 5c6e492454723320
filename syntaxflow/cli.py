"""
syntaxflow - Command Line Interface

Usage:
    syntaxflowc [--emit-ast] [--debug] [--capacity N]
    python -m syntaxflow [--emit-ast] [--debug] [--capacity N]
"""

import sys
import argparse
import logging


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="syntaxflowc",
        description="Build, print and dispose the syntaxflow sample ASTs",
    )
    parser.add_argument(
        "--emit-ast",
        action="store_true",
        dest="emit_ast",
        help="Print each tree as JSON instead of its canonical text",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log allocation and disposal details to stderr",
    )
    parser.add_argument(
        "--capacity",
        type=int,
        default=None,
        help="Maximum number of live allocations (default: unlimited)",
    )

    args = parser.parse_args(argv)
    if args.capacity is not None and args.capacity < 0:
        parser.error("--capacity must be non-negative")

    handler = None
    package_logger = logging.getLogger("syntaxflow")
    previous_level = package_logger.level
    if args.debug:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[syntaxflow] %(message)s"))
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG)

    from .driver import run_demo
    from .memory import Allocator, SyntaxFlowError

    try:
        leaked = run_demo(sys.stdout, allocator=Allocator(args.capacity), emit_ast=args.emit_ast)
    except SyntaxFlowError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)
    finally:
        if handler is not None:
            package_logger.removeHandler(handler)
            package_logger.setLevel(previous_level)

    if leaked:
        print(f"[syntaxflow] Error: {leaked} allocation(s) leaked", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
