"""
Exception hierarchy for fastq_pair.

Everything raised deliberately by the library derives from FastqPairError so the
command line can report it and exit with a non-zero status.  Data anomalies
(duplicate or very short identifiers) are not errors; they are counted instead.
"""


class FastqPairError(Exception):
    pass


class ConfigurationError(FastqPairError):
    pass


class TableSizeError(ConfigurationError):
    """Raised when a hash table of the requested size cannot be allocated."""

    def __init__(self, table_size, reason: str = ""):
        self.table_size = table_size
        message = (f"Cannot allocate a hash table with {table_size} buckets. "
                   f"Please try a smaller value for --table-size")
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class StreamOpenError(FastqPairError):
    def __init__(self, filename: str, reason: str = ""):
        self.filename = filename
        message = f"Can't open file {filename}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class IndexBuildError(FastqPairError):
    """Raised when the left-file index cannot be completed (e.g. out of memory)."""
    pass
