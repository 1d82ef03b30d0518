"""
Line-oriented access to FASTQ files, plain or compressed.

Reads and writes raw bytes so that copied records come out exactly as they went
in.  Readers expose tell()/seek() for the random-access re-reads the pairing
passes need; positions are opaque and only valid on the stream that produced
them (byte offsets for plain files, uncompressed offsets for gzip, virtual
offsets for BGZF).
"""

import gzip
import logging
import os
from typing import Dict, List, Optional, Tuple

from Bio import bgzf

from .constants import GZIP_MAGIC, RECORD_LINES, OutputKind, Side
from .errors import StreamOpenError
from .models import OutputPaths

_BGZF_HEADER = b"\x1f\x8b\x08\x04"

PARTIAL_SUFFIX = ".partial"


class Compression:
    NONE = "none"
    GZIP = "gzip"
    BGZF = "bgzf"


def detect_compression(filename: str) -> str:
    """Identify gzip (and its blocked BGZF variant) by magic bytes rather than by name."""
    try:
        with open(filename, "rb") as handle:
            header = handle.read(16)
    except OSError as e:
        raise StreamOpenError(filename, e.strerror or str(e)) from e

    if not header.startswith(GZIP_MAGIC):
        return Compression.NONE
    # BGZF stores its block size in a "BC" extra subfield right after XLEN
    if header.startswith(_BGZF_HEADER) and header[12:14] == b"BC":
        return Compression.BGZF
    return Compression.GZIP


class RecordReader:
    def __init__(self, handle, filename: str, compression: str = Compression.NONE):
        self._handle = handle
        self.filename = filename
        self.compression = compression

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def read_line(self) -> bytes:
        """Return the next line with its terminator, or b"" at end of stream."""
        return self._handle.readline()

    def tell(self):
        return self._handle.tell()

    def seek(self, position):
        self._handle.seek(position)

    def read_record(self) -> Optional[List[bytes]]:
        """Read up to four lines starting at the current position.

        Returns None at end of stream.  A record cut short by the end of the file
        is returned with the lines that were present.
        """
        header = self.read_line()
        if not header:
            return None
        lines = [header]
        for _ in range(RECORD_LINES - 1):
            line = self.read_line()
            if not line:
                break
            lines.append(line)
        return lines

    def close(self):
        self._handle.close()


class RecordWriter:
    def __init__(self, handle, filename: str):
        self._handle = handle
        self.filename = filename
        self.closed = False

    def write(self, data: bytes):
        self._handle.write(data)

    def write_record(self, lines: List[bytes]):
        for line in lines:
            # A final line without a newline would otherwise run into the next record
            if not line.endswith(b"\n"):
                line += b"\n"
            self._handle.write(line)

    def close(self):
        # BgzfWriter appends an EOF block on every close
        if not self.closed:
            self.closed = True
            self._handle.close()


def open_reader(filename: str) -> RecordReader:
    compression = detect_compression(filename)
    try:
        if compression == Compression.BGZF:
            handle = bgzf.BgzfReader(filename, "rb")
        elif compression == Compression.GZIP:
            handle = gzip.open(filename, "rb")
        else:
            handle = open(filename, "rb")
    except OSError as e:
        raise StreamOpenError(filename, e.strerror or str(e)) from e
    return RecordReader(handle, filename, compression)


def open_writer(filename: str, compressed: bool) -> RecordWriter:
    try:
        if compressed:
            # BGZF output is ordinary gzip to other tools, and cheap to seek into if re-paired
            handle = bgzf.BgzfWriter(filename, "wb")
        else:
            handle = open(filename, "wb")
    except OSError as e:
        raise StreamOpenError(filename, e.strerror or str(e)) from e
    return RecordWriter(handle, filename)


class OutputSet:
    """The four paired/single outputs of one run.

    Records are written to "<name>.partial" files which are renamed into place only
    when the run finishes cleanly; on any error they are closed and removed, so a
    file with the final name is always complete.
    """

    def __init__(self, paths: OutputPaths):
        self.paths = paths
        self._targets: Dict[Tuple[str, str], str] = {
            (Side.LEFT, OutputKind.PAIRED): paths.left_paired,
            (Side.RIGHT, OutputKind.PAIRED): paths.right_paired,
            (Side.LEFT, OutputKind.SINGLE): paths.left_single,
            (Side.RIGHT, OutputKind.SINGLE): paths.right_single,
        }
        self._writers: Dict[Tuple[str, str], RecordWriter] = {}

    def __enter__(self):
        try:
            for key, filename in self._targets.items():
                directory = os.path.dirname(filename)
                if directory:
                    try:
                        os.makedirs(directory, exist_ok=True)
                    except OSError as e:
                        raise StreamOpenError(directory, e.strerror or str(e)) from e
                self._writers[key] = open_writer(filename + PARTIAL_SUFFIX, self.paths.compressed)
        except Exception:
            self._discard()
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self._commit()
        else:
            self._discard()
        return False

    def write_record(self, side: str, kind: str, lines: List[bytes]):
        self._writers[(side, kind)].write_record(lines)

    def _commit(self):
        try:
            for writer in self._writers.values():
                writer.close()
        except Exception:
            self._discard()
            raise
        committed = []
        for key, writer in self._writers.items():
            target = self._targets[key]
            try:
                os.replace(writer.filename, target)
            except OSError as e:
                # Four outputs or none
                for filename in committed:
                    os.remove(filename)
                self._discard()
                raise StreamOpenError(target, e.strerror or str(e)) from e
            committed.append(target)
        self._writers.clear()

    def _discard(self):
        for writer in self._writers.values():
            try:
                writer.close()
            except Exception as e:
                logging.warning(f"Error closing {writer.filename}: {e}")
            try:
                os.remove(writer.filename)
            except FileNotFoundError:
                pass
        self._writers.clear()
        logging.warning("Run did not complete; removed partial output files")
