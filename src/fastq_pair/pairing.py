"""
Pair two FASTQ files using an index over the left file.

The left file is read once to record, for every normalized identifier, the
position of its record (tell() before the header line).  The right file is then
read once, top to bottom; each record whose key is in the index is written to the
paired outputs together with the left record, re-read by seeking to its recorded
position.  Right records without a partner go to the right single output.
Finally every left record that was never paired is re-read and written to the
left single output, in bucket order rather than file order.

Nothing beyond the index itself is held in memory.
"""

import logging
import timeit
from typing import List, Optional

from tqdm import tqdm

from .constants import LEFT_MATE, RECORD_LINES, RIGHT_MATE, OutputKind, Side
from .errors import FastqPairError, IndexBuildError
from .identifiers import identifier_from_header, is_short_identifier, normalize_key
from .index import DuplicateTable, IndexTable, print_bucket_sizes
from .models import IndexEntry, PairOptions, PairingCounts
from .naming import output_paths
from .records import Compression, OutputSet, RecordReader, detect_compression, open_reader


class PairingContext:
    """State owned by a single pairing run."""

    def __init__(self, options: PairOptions, index: IndexTable,
                 right_seen: Optional[DuplicateTable], left: RecordReader):
        self.options = options
        self.index = index
        self.right_seen = right_seen
        self.left = left
        self.counts = PairingCounts()

    def progress(self, desc: str, total: Optional[int] = None) -> tqdm:
        show = self.options.show_progress
        return tqdm(total=total, desc=desc, unit="seq", disable=None if show is None else not show)


def read_record(ctx: PairingContext, stream: RecordReader) -> Optional[List[bytes]]:
    record = stream.read_record()
    if record is not None and len(record) < RECORD_LINES:
        ctx.counts.truncated_records += 1
        logging.warning(f"Truncated record at the end of {stream.filename}: "
                        f"{len(record)} of {RECORD_LINES} lines, copying what is there")
    return record


def record_key(ctx: PairingContext, header: bytes, side: str) -> bytes:
    identifier = identifier_from_header(header, ctx.options.split_space)
    if is_short_identifier(identifier):
        ctx.counts.short_identifiers += 1
        logging.warning(f"Identifier {identifier!r} in the {side} file is too short "
                        f"to carry a mate suffix, using it as is")
    key = normalize_key(identifier)
    if ctx.options.verbose:
        logging.debug(f"ID {side} file is |{key.decode('utf-8', 'replace')}|")
    return key


def format_record(ctx: PairingContext, record: List[bytes], key: bytes, mate: bytes) -> List[bytes]:
    """Optionally replace the header with "<key><mate>"."""
    if not ctx.options.format_id:
        return record
    return [key + mate + b"\n"] + record[1:]


def reread_left(ctx: PairingContext, entry: IndexEntry) -> List[bytes]:
    ctx.left.seek(entry.position)
    record = ctx.left.read_record()
    if record is None:
        raise FastqPairError(f"No record found in {ctx.left.filename} at position {entry.position}; "
                             f"was the file modified while pairing?")
    return record


def index_record(ctx: PairingContext, key: bytes, position):
    counts = ctx.counts
    existing = ctx.index.find(key)
    if existing is not None:
        if ctx.options.deduplicate:
            counts.left_duplicates += 1
            logging.debug(f"Duplicate ID found in the left file, skipping: {key!r}")
            return
        counts.unsuppressed_duplicates += 1
        logging.debug(f"Duplicate ID found in the left file, indexing it again: {key!r}")

    try:
        ctx.index.add(key, position)
    except MemoryError as e:
        raise IndexBuildError(f"Out of memory indexing record {counts.left_records} of "
                              f"{ctx.left.filename}; try a smaller --table-size") from e


def build_index(ctx: PairingContext):
    """Sequential pass over the left file recording where each record starts."""
    with ctx.progress("Indexing left file") as pbar:
        while True:
            position = ctx.left.tell()
            record = read_record(ctx, ctx.left)
            if record is None:
                break
            ctx.counts.left_records += 1
            index_record(ctx, record_key(ctx, record[0], Side.LEFT), position)
            pbar.update(1)

    logging.info(f"Indexed {len(ctx.index):,} of {ctx.counts.left_records:,} records "
                 f"from {ctx.left.filename}")


def match_right(ctx: PairingContext, right: RecordReader, outputs: OutputSet):
    """Single pass over the right file writing pairs and right singles."""
    counts = ctx.counts
    with ctx.progress("Pairing right file") as pbar:
        while True:
            record = read_record(ctx, right)
            if record is None:
                break
            counts.right_records += 1
            pbar.update(1)
            key = record_key(ctx, record[0], Side.RIGHT)

            if ctx.right_seen is not None and not ctx.right_seen.add(key):
                counts.right_duplicates += 1
                logging.debug(f"Duplicate ID found in the right file, skipping: {key!r}")
                continue

            entry = ctx.index.match(key)
            if entry is None:
                outputs.write_record(Side.RIGHT, OutputKind.SINGLE,
                                     format_record(ctx, record, key, RIGHT_MATE))
                counts.right_single += 1
                continue

            left_record = reread_left(ctx, entry)
            outputs.write_record(Side.LEFT, OutputKind.PAIRED,
                                 format_record(ctx, left_record, key, LEFT_MATE))
            outputs.write_record(Side.RIGHT, OutputKind.PAIRED,
                                 format_record(ctx, record, key, RIGHT_MATE))
            entry.printed = True
            counts.left_paired += 1
            counts.right_paired += 1


def emit_residual(ctx: PairingContext, outputs: OutputSet):
    """Write every left record that never paired, in bucket then chain order."""
    remaining = len(ctx.index) - ctx.counts.left_paired
    with ctx.progress("Writing left singles", total=remaining) as pbar:
        for entry in ctx.index.unprinted():
            left_record = reread_left(ctx, entry)
            outputs.write_record(Side.LEFT, OutputKind.SINGLE,
                                 format_record(ctx, left_record, entry.key, LEFT_MATE))
            entry.printed = True
            ctx.counts.left_single += 1
            pbar.update(1)


def pair_files(left_filename: str, right_filename: str,
               options: Optional[PairOptions] = None) -> PairingCounts:
    """Pair left_filename with right_filename, writing four output files.

    Returns the run's counts.  Raises a FastqPairError subclass if the tables
    cannot be allocated or a file cannot be opened; in that case no output file
    is left behind.
    """
    options = options or PairOptions()

    # Allocate both tables before touching any file
    index = IndexTable(options.table_size)
    right_seen = DuplicateTable(options.table_size) if options.deduplicate else None

    left_compression = detect_compression(left_filename)
    right_compression = detect_compression(right_filename)
    compressed = left_compression != Compression.NONE or right_compression != Compression.NONE
    logging.info(f"First file is gzipped: {left_compression != Compression.NONE}")
    logging.info(f"Second file is gzipped: {right_compression != Compression.NONE}")
    logging.info(f"Output files will be gzipped: {compressed}")

    paths = output_paths(left_filename, right_filename, compressed, options.output_dir)

    start_time = timeit.default_timer()

    with open_reader(left_filename) as left:
        ctx = PairingContext(options, index, right_seen, left)
        build_index(ctx)

        if options.print_table_counts:
            print_bucket_sizes(index)

        logging.info(f"Writing the paired reads to {paths.left_paired} and {paths.right_paired}")
        logging.info(f"Writing the single reads to {paths.left_single} and {paths.right_single}")

        with OutputSet(paths) as outputs, open_reader(right_filename) as right:
            match_right(ctx, right, outputs)
            emit_residual(ctx, outputs)

    counts = ctx.counts
    if counts.unsuppressed_duplicates:
        logging.warning(f"{counts.unsuppressed_duplicates:,} duplicate identifiers were indexed from "
                        f"{left_filename}; use --deduplicate to keep only the first of each")

    elapsed = timeit.default_timer() - start_time
    logging.info(f"Elapsed time: {elapsed:.2f} seconds")

    return counts
