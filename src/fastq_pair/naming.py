"""
Output file naming.

Each input contributes a paired and a single output next to it (or in an output
directory), named from the input with its FASTQ suffix removed:

    reads_R1.fastq.gz  ->  reads_R1.paired.fastq.gz, reads_R1.single.fastq.gz
"""

import os
from typing import Optional, Tuple

from .constants import FASTQ_SUFFIXES, OutputKind
from .errors import ConfigurationError
from .models import OutputPaths


def split_suffix(filename: str) -> Tuple[str, Optional[str]]:
    """Split a filename into (stem, recognized FASTQ suffix or None)."""
    for suffix in FASTQ_SUFFIXES:
        if filename.endswith(suffix):
            return filename[:-len(suffix)], suffix
    return filename, None


def output_name(input_filename: str, kind: str, compressed: bool,
                output_dir: Optional[str] = None) -> str:
    stem, _ = split_suffix(input_filename)
    if output_dir:
        stem = os.path.join(output_dir, os.path.basename(stem))
    extension = ".fastq.gz" if compressed else ".fastq"
    return f"{stem}.{kind}{extension}"


def output_paths(left_filename: str, right_filename: str, compressed: bool,
                 output_dir: Optional[str] = None) -> OutputPaths:
    paths = OutputPaths(
        left_paired=output_name(left_filename, OutputKind.PAIRED, compressed, output_dir),
        right_paired=output_name(right_filename, OutputKind.PAIRED, compressed, output_dir),
        left_single=output_name(left_filename, OutputKind.SINGLE, compressed, output_dir),
        right_single=output_name(right_filename, OutputKind.SINGLE, compressed, output_dir),
        compressed=compressed,
    )
    names = [os.path.abspath(p) for p in paths[:4]]
    if len(set(names)) != len(names):
        raise ConfigurationError(
            f"Left and right inputs would be written to the same output files "
            f"({paths.left_paired}); rename one of the inputs or use a different output directory")
    return paths
