#!/usr/bin/env python3

"""
Command line entry point: fastq_pair LEFT RIGHT [options]
"""

import argparse
import logging
import sys

from . import __version__
from .constants import DEFAULT_TABLE_SIZE
from .errors import FastqPairError
from .models import PairOptions
from .pairing import pair_files


def version():
    # 1.0 - hash index over the left file, single pass over the right
    # 1.1 - gzip input and output
    # 1.2 - deduplication, identifier reformatting, BGZF random access
    return f"fastq_pair version {__version__}"


def parse_args(argv):
    parser = argparse.ArgumentParser(
        description="Pair reads from two FASTQ files that are out of order or have different numbers of reads.")

    parser.add_argument("left_file", help="First FASTQ file (e.g. R1), gzipped or plain text")
    parser.add_argument("right_file", help="Second FASTQ file (e.g. R2), gzipped or plain text")

    parser.add_argument("-t", "--table-size", type=int, default=DEFAULT_TABLE_SIZE,
                        help=f"Number of hash table buckets; larger is faster but uses more memory (default: {DEFAULT_TABLE_SIZE})")
    parser.add_argument("-d", "--deduplicate", action="store_true",
                        help="Keep only the first record of each identifier in both files")
    parser.add_argument("-s", "--split-space", action="store_true",
                        help="Ignore everything after the first space or tab in identifiers")
    parser.add_argument("-f", "--format-id", action="store_true",
                        help="Rewrite output identifiers as <id>/1 and <id>/2")
    parser.add_argument("-p", "--print-table-counts", action="store_true",
                        help="Print the number of entries in each hash table bucket (for tuning --table-size)")
    parser.add_argument("-O", "--output-dir", default=None,
                        help="Directory for output files (default: next to each input file)")
    parser.add_argument("--no-progress", action="store_true", help="Do not show progress bars")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging, including every identifier")
    parser.add_argument("--version", action="version", version=version())

    args = parser.parse_args(argv[1:])

    if args.table_size < 1:
        parser.error(f"--table-size must be a positive integer, got {args.table_size}")

    return args


def setup_pair_options(args) -> PairOptions:
    return PairOptions(
        table_size=args.table_size,
        deduplicate=args.deduplicate,
        split_space=args.split_space,
        format_id=args.format_id,
        print_table_counts=args.print_table_counts,
        verbose=args.verbose,
        output_dir=args.output_dir,
        show_progress=False if args.no_progress else None,
    )


def main(argv=None):
    if argv is None:
        argv = sys.argv
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    options = setup_pair_options(args)
    logging.debug(f"Options: {options}")

    try:
        counts = pair_files(args.left_file, args.right_file, options)
    except FastqPairError as e:
        logging.error(str(e))
        return 1

    for line in counts.summary_lines(options.deduplicate):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
