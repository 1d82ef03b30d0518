"""
Fixed-size hash tables keyed by normalized identifiers.

The bucket count is chosen by the caller and never changes, which keeps memory
use predictable for files with many millions of reads.  Smaller tables only make
the chains longer; results do not depend on the size.

Each bucket is a list that is appended to, and walked from the end, so chains are
always seen most-recently-inserted first.
"""

import sys
from typing import Iterator, List, Optional, TextIO

from .errors import ConfigurationError, TableSizeError
from .identifiers import hash_identifier
from .models import IndexEntry


class _BucketTable:
    def __init__(self, table_size: int):
        if isinstance(table_size, bool) or not isinstance(table_size, int) or table_size < 1:
            raise ConfigurationError(f"Table size must be a positive integer, got {table_size!r}")
        try:
            self._buckets: List[Optional[list]] = [None] * table_size
        except (MemoryError, OverflowError) as e:
            raise TableSizeError(table_size, type(e).__name__) from e
        self.table_size = table_size
        self._count = 0

    def __len__(self):
        return self._count

    def bucket_index(self, key: bytes) -> int:
        return hash_identifier(key) % self.table_size

    def _insert(self, key: bytes, item):
        index = self.bucket_index(key)
        bucket = self._buckets[index]
        if bucket is None:
            bucket = self._buckets[index] = []
        bucket.append(item)
        self._count += 1

    def chain(self, index: int) -> Iterator:
        bucket = self._buckets[index]
        if bucket:
            yield from reversed(bucket)

    def bucket_sizes(self) -> List[int]:
        return [len(bucket) if bucket else 0 for bucket in self._buckets]


class IndexTable(_BucketTable):
    """Left-file index: normalized key -> record position and printed flag."""

    def add(self, key: bytes, position) -> IndexEntry:
        entry = IndexEntry(key, position)
        self._insert(key, entry)
        return entry

    def find(self, key: bytes) -> Optional[IndexEntry]:
        """Most recently inserted entry with exactly this key."""
        for entry in self.chain(self.bucket_index(key)):
            if entry.key == key:
                return entry
        return None

    def match(self, key: bytes) -> Optional[IndexEntry]:
        """Entry a right-file record with this key pairs with.

        The whole chain is scanned and the last matching entry that has not been
        printed yet wins.  With unique keys that is simply the one entry; when
        duplicates were indexed they pair off in the order they were read.
        """
        found = None
        for entry in self.chain(self.bucket_index(key)):
            if entry.key == key and not entry.printed:
                found = entry
        return found

    def entries(self) -> Iterator[IndexEntry]:
        """All entries in bucket order, each chain most recent first."""
        for index in range(self.table_size):
            yield from self.chain(index)

    def unprinted(self) -> Iterator[IndexEntry]:
        for entry in self.entries():
            if not entry.printed:
                yield entry


class DuplicateTable(_BucketTable):
    """Right-file key set, only used to skip identifiers already seen."""

    def __contains__(self, key: bytes) -> bool:
        for existing in self.chain(self.bucket_index(key)):
            if existing == key:
                return True
        return False

    def add(self, key: bytes) -> bool:
        """Insert key unless present.  Returns False for a key seen before."""
        if key in self:
            return False
        self._insert(key, key)
        return True


def print_bucket_sizes(table: _BucketTable, out: TextIO = None):
    """Write "index<TAB>size" for every bucket, a tuning aid for --table-size."""
    out = out or sys.stdout
    out.write("Bucket sizes\n")
    for index, size in enumerate(table.bucket_sizes()):
        out.write(f"{index}\t{size}\n")
