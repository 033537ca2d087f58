import argparse
import logging
import sys
from pathlib import Path

from cliphoard.config import LOG_LEVEL, LOG_NAME, resolve_cache_dir
from cliphoard.errors import ClipHoardError
from cliphoard.storage import ClipboardStore
from cliphoard.utils import parse_query, single_line

logger = logging.getLogger("cliphoard")

ENTRY_HELP = (
    "zero-based index as printed by `list`, optionally followed by a colon and "
    "the preview text (e.g. `0` or `0: some text`); read from stdin when omitted"
)


def setup_logging(cache_dir: Path) -> None:
    cache_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(cache_dir / LOG_NAME),
            logging.StreamHandler(sys.stderr),
        ],
    )


def read_stdin_bytes() -> bytes:
    return sys.stdin.buffer.read()


def read_query(entry: str | None) -> str:
    """Return the positional entry, or stdin decoded as UTF-8 when it is absent."""
    if entry is not None:
        return entry
    try:
        return read_stdin_bytes().decode("utf-8")
    except UnicodeDecodeError:
        return ""


def list_items(store: ClipboardStore) -> int:
    for index, entry in enumerate(store.entries):
        print(f"{index}: {single_line(entry.preview)}")
    return 0


def store_item(store: ClipboardStore) -> int:
    data = read_stdin_bytes()
    if not data:
        logger.info("Nothing on stdin, nothing stored")
        return 0
    store.add(data)
    return 0


def get_item(store: ClipboardStore, entry: str | None) -> int:
    query = read_query(entry)
    if not query.strip():
        return 0
    item = store.get(parse_query(query))
    print(store.blob_path(item))
    print(item.content_type)
    return 0


def remove_item(store: ClipboardStore, entry: str | None) -> int:
    query = read_query(entry)
    if not query.strip():
        return 0
    store.remove(parse_query(query))
    return 0


def clear_items(store: ClipboardStore) -> int:
    store.clear()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cliphoard",
        description="cliphoard - clipboard history kept on disk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wl-paste | cliphoard store                 # save the current clipboard
  cliphoard list                             # newest entry is 0
  cliphoard get "2: some text"               # print blob path and type
  cliphoard list | fzf | cliphoard remove    # pick an entry to drop
""",
    )
    parser.add_argument(
        "--cache-dir",
        help="cache root (default: $CLIPHOARD_CACHE_DIR or ~/.cache/cliphoard)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List all stored clipboard items")
    subparsers.add_parser("store", help="Store stdin as a new clipboard item")
    get_parser = subparsers.add_parser("get", help="Print the blob path and type of an item")
    get_parser.add_argument("entry", nargs="?", help=ENTRY_HELP)
    remove_parser = subparsers.add_parser("remove", help="Remove a clipboard item")
    remove_parser.add_argument("entry", nargs="?", help=ENTRY_HELP)
    subparsers.add_parser("clear", help="Remove all clipboard items")
    return parser


def run(args: argparse.Namespace) -> int:
    cache_dir = resolve_cache_dir(args.cache_dir)
    setup_logging(cache_dir)

    try:
        store = ClipboardStore(cache_dir)
        if args.command == "list":
            return list_items(store)
        elif args.command == "store":
            return store_item(store)
        elif args.command == "get":
            return get_item(store, args.entry)
        elif args.command == "remove":
            return remove_item(store, args.entry)
        else:
            return clear_items(store)
    except ClipHoardError as err:
        logger.error("Application error: %s", err)
        return 1


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
