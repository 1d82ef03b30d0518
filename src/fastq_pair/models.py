"""
Value types passed between the pairing stages.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from .constants import DEFAULT_TABLE_SIZE


class PairOptions(NamedTuple):
    table_size: int = DEFAULT_TABLE_SIZE
    deduplicate: bool = False
    split_space: bool = False
    format_id: bool = False
    print_table_counts: bool = False
    verbose: bool = False
    output_dir: Optional[str] = None
    # None lets tqdm decide based on whether stderr is a terminal
    show_progress: Optional[bool] = None


class IndexEntry:
    """One left-file record: its normalized key and where its header line starts.

    The position is whatever the left stream's tell() returned and is only ever
    handed back to seek() on that same stream.
    """

    __slots__ = ("key", "position", "printed")

    def __init__(self, key: bytes, position: int):
        self.key = key
        self.position = position
        self.printed = False

    def __repr__(self):
        return f"IndexEntry(key={self.key!r}, position={self.position}, printed={self.printed})"


@dataclass
class PairingCounts:
    left_paired: int = 0
    right_paired: int = 0
    left_single: int = 0
    right_single: int = 0
    left_duplicates: int = 0
    right_duplicates: int = 0

    # Records read from each input, duplicates included
    left_records: int = 0
    right_records: int = 0

    # Data anomalies, reported but never fatal
    short_identifiers: int = 0
    unsuppressed_duplicates: int = 0
    truncated_records: int = 0

    @property
    def left_indexed(self) -> int:
        return self.left_records - self.left_duplicates

    @property
    def right_considered(self) -> int:
        return self.right_records - self.right_duplicates

    def summary_lines(self, deduplicate: bool) -> List[str]:
        lines = [
            f"Left paired: {self.left_paired:<14d} Right paired: {self.right_paired}",
            f"Left single: {self.left_single:<14d} Right single: {self.right_single}",
        ]
        if deduplicate:
            lines.append(f"Left duplicates: {self.left_duplicates:<10d} Right duplicates: {self.right_duplicates}")
        return lines


class OutputPaths(NamedTuple):
    left_paired: str
    right_paired: str
    left_single: str
    right_single: str
    compressed: bool
