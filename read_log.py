"""CLI debug log reader: tail, dump, clear, filter errors, or follow the SERQ debug log."""

import argparse
import logging
import os
import sys
import threading

from serq_native.bridge import LogBridge
from serq_native.config import load_config
from serq_native.errors import SerqError
from serq_native.inspector import error_lines, follow, read_all, tail_lines

ACTIONS = ("all", "clear", "errors", "watch")


def _action(value: str) -> str:
    if value in ACTIONS or value.isdigit():
        return value
    raise argparse.ArgumentTypeError(
        f"expected a line count or one of: {', '.join(ACTIONS)}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serq-read-log",
        description="Quick access to the SERQ debug bridge log file.",
    )
    parser.add_argument(
        "action", nargs="?", default="50", type=_action,
        help="N (last N lines, default 50), all, clear, errors, or watch",
    )
    parser.add_argument(
        "count", nargs="?", type=int, default=50,
        help="Number of matching lines for 'errors' (default: 50)",
    )
    return parser


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [serq-log] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    args = build_parser().parse_args(argv)
    bridge = LogBridge(load_config())

    try:
        path = bridge.log_path()
    except SerqError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not os.path.exists(path):
        print(f"No debug log found at {path}")
        print("Start SERQ in development mode to begin logging.")
        return 0

    try:
        if args.action == "clear":
            bridge.clear()
            print("Debug log cleared.")
        elif args.action == "all":
            sys.stdout.write(read_all(path))
        elif args.action == "errors":
            for line in error_lines(path, args.count):
                print(line)
        elif args.action == "watch":
            print(f"Watching {path} (Ctrl+C to stop)...", flush=True)
            stop = threading.Event()
            try:
                follow(path, lambda line: print(line, flush=True), stop)
            except KeyboardInterrupt:
                stop.set()
        else:
            for line in tail_lines(path, int(args.action)):
                print(line)
    except (SerqError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
