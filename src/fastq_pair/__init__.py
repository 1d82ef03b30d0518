"""fastq_pair: Pair reads from two out-of-order FASTQ files with a bounded-memory index."""

__version__ = "1.2.0"

# Re-export key functions and classes for programmatic access
from .errors import FastqPairError
from .identifiers import hash_identifier, normalize_identifier
from .index import DuplicateTable, IndexTable
from .models import PairOptions, PairingCounts
from .naming import output_paths, split_suffix
from .pairing import pair_files

__all__ = [
    "DuplicateTable",
    "FastqPairError",
    "IndexTable",
    "PairOptions",
    "PairingCounts",
    "hash_identifier",
    "normalize_identifier",
    "output_paths",
    "pair_files",
    "split_suffix",
]
