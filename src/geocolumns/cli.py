import argparse
import sys
import logging
from typing import Optional, Sequence

from geocolumns.vector import (
    CollectionValidationError,
    ReaderConfig,
    load_collection
)

def setup_logging(level: int = logging.INFO) -> None:
    """
    Configures the standard logging format and level for the command-line interface.

    Args:
        level (int): The logging threshold level.
    """
    logging.basicConfig(
        level=level, 
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

def show_collection(path: str, config: ReaderConfig, limit: Optional[int] = None) -> int:
    """
    Loads a vector file and prints one line per feature geometry.

    Args:
        path (str): Vector file to read.
        config (ReaderConfig): Reader options.
        limit (Optional[int]): Maximum number of features to print.

    Returns:
        int: Process exit code.
    """
    try:
        collection = load_collection(path, config)
    except FileNotFoundError as e:
        logging.error(str(e))
        return 1
    except CollectionValidationError as e:
        logging.error(f"Cannot build a feature collection from {path}: {e}")
        return 1

    logging.info(f"{collection!r}")

    for index, geometry in enumerate(collection.geometry_iter()):
        if limit is not None and index >= limit:
            break
        line = f"{index}\t{geometry.wkt}"
        interval = collection.time_at(index)
        if interval is not None:
            line += f"\t{interval.start}\t{interval.end}"
        print(line)

    return 0

def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Parses command-line arguments and routes execution to the appropriate subroutine.
    """
    parser = argparse.ArgumentParser(
        prog="geocolumns", 
        description="Inspect point and multi-point feature collections"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser(
        "show", 
        help="Loads a vector file into a feature collection and prints its geometries."
    )
    show_parser.add_argument("path", type=str, help="Vector file to read.")
    show_parser.add_argument("--layer", type=str, default=None, help="Layer name for multi-layer sources.")
    show_parser.add_argument("--time-start", type=str, default=None, help="Column holding interval start instants.")
    show_parser.add_argument("--time-end", type=str, default=None, help="Column holding interval end instants.")
    show_parser.add_argument("--limit", type=int, default=None, help="Print at most this many features.")
    show_parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "show":
        config = ReaderConfig(
            layer=args.layer,
            time_start_column=args.time_start,
            time_end_column=args.time_end
        )
        sys.exit(show_collection(args.path, config, limit=args.limit))

if __name__ == "__main__":
    main()
