"""
Constants shared by the pairing pipeline.
"""

# Prime bucket count; large enough for a few million reads with short chains
DEFAULT_TABLE_SIZE = 100003

RECORD_LINES = 4

# Characters that may precede a mate indicator (id/1, id_2, id.f)
MATE_SEPARATORS = b"/_."
MATE_INDICATORS = b"12fr"

NORMALIZED_SUFFIX = b"/"
LEFT_MATE = b"1"
RIGHT_MATE = b"2"

# Longest first, so "reads.fastq.gz" loses ".fastq.gz" rather than nothing
FASTQ_SUFFIXES = (".fastq.gz", ".fq.gz", ".fastq", ".fq")

GZIP_MAGIC = b"\x1f\x8b"


class OutputKind:
    PAIRED = "paired"
    SINGLE = "single"


class Side:
    LEFT = "left"
    RIGHT = "right"
