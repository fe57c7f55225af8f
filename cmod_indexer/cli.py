"""Command line entry point: build a CMOD generic index from a delimited file."""

import argparse
import sys
from pathlib import Path

from cmod_indexer.cache_manager import write_parquet
from cmod_indexer.config import load_config
from cmod_indexer.errors import IndexerError
from cmod_indexer.index_frame import read_index
from cmod_indexer.ingest.index_writer import DEFAULT_ENCODING
from cmod_indexer.ingest.pipeline import run_indexing

_EXAMPLE = "example:\n  cmod-indexer --input NTQBSWHF_.data.csv --output output.ind --config cmod_indexer.yml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmod-indexer",
        description="Write a GROUP_* index of the records in a delimited data file.",
        epilog=_EXAMPLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--input", required=True, help="Delimited data file (first line is a header)")
    parser.add_argument("--output", required=True, help="Index file to write")
    parser.add_argument("--config", required=True, help="YAML config holding the profile list")
    parser.add_argument(
        "--encoding",
        default=DEFAULT_ENCODING,
        help=f"Text encoding of the data file (default: {DEFAULT_ENCODING})",
    )
    parser.add_argument(
        "--skip-fresh",
        action="store_true",
        help="Do nothing if the output is newer than the input and the config",
    )
    parser.add_argument("--parquet", default=None, help="Also export the finished index as a parquet table")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress messages")
    return parser


def main(argv: list[str] | None = None) -> int:
    ns = build_parser().parse_args(argv)
    verbose = not ns.quiet

    try:
        config = load_config(ns.config)
        stats = run_indexing(
            ns.input,
            ns.output,
            config,
            encoding=ns.encoding,
            skip_fresh=ns.skip_fresh,
            verbose=verbose,
        )
    except IndexerError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if ns.parquet and not stats.skipped:
        try:
            df = read_index(Path(ns.output), ns.encoding)
            write_parquet(df, Path(ns.parquet))
        except (OSError, ValueError) as e:
            print(f"error: cannot export parquet '{ns.parquet}': {e}", file=sys.stderr)
            return 1
        if verbose:
            print(f"  wrote {len(df)} rows to {ns.parquet}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
