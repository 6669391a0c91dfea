from __future__ import annotations

import argparse
import json
import sys

from logscry import __version__


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="logscry",
        description="logscry: live, categorized view of a game client log",
    )
    parser.add_argument("path", nargs="?", help="Log file to watch (e.g. Client.txt)")
    parser.add_argument("--config", help="Path to config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the categorized events of PATH as JSON lines and exit",
    )
    args = parser.parse_args()

    if args.dump:
        if not args.path:
            parser.error("--dump requires a PATH")
        sys.exit(dump(args.path, config_path=args.config, verbose=args.verbose))

    from logscry.app import LogscryApp

    app = LogscryApp(config_path=args.config, log_path=args.path, verbose=args.verbose)
    app.run()


def dump(path: str, config_path: str | None = None, verbose: bool = False) -> int:
    """Write one JSON object per event in *path* to stdout; return an exit code."""
    from pathlib import Path

    from logscry.categorize.engine import Categorizer
    from logscry.config.manager import ConfigManager
    from logscry.utils.logger import setup_logging
    from logscry.watch.manager import iter_file_events

    cfg = ConfigManager(config_path).config
    general_cfg = cfg.get("general", {})
    log_level = "DEBUG" if verbose else str(general_cfg.get("log_level", "INFO"))
    setup_logging(log_file=str(general_cfg.get("log_file", "")), log_level=log_level)

    log_path = Path(path).expanduser()
    if not log_path.is_file():
        print(f"logscry: log file does not exist: {log_path}", file=sys.stderr)
        return 1

    categorizer = Categorizer.from_config(cfg)
    try:
        for event in iter_file_events(log_path, categorizer):
            print(json.dumps(event.to_dict(), ensure_ascii=False))
    except OSError as exc:
        print(f"logscry: failed to read log file: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    main()
