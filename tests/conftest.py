"""
Shared pytest fixtures for fastq_pair tests.
"""

import gzip
import tempfile
from pathlib import Path

import pytest
from Bio import SeqIO, bgzf

from fastq_pair import PairOptions


def fastq_record(identifier: str, sequence: str = None) -> str:
    """Build one 4-line record; the sequence defaults to something derived from the identifier."""
    if sequence is None:
        sequence = "ACGT"[len(identifier) % 4] * 4 + "ACGT" * (1 + sum(map(ord, identifier)) % 3)
    return f"@{identifier}\n{sequence}\n+\n{'I' * len(sequence)}\n"


def read_text(path) -> str:
    path = Path(path)
    opener = gzip.open if path.name.endswith(".gz") else open
    with opener(path, "rt") as f:
        return f.read()


def read_ids(path):
    """Record ids (up to the first blank, without '@') in file order, parsed with Biopython."""
    path = Path(path)
    opener = gzip.open if path.name.endswith(".gz") else open
    with opener(path, "rt") as handle:
        return [record.id for record in SeqIO.parse(handle, "fastq")]


@pytest.fixture(scope="session")
def test_data_root():
    """Return the root directory containing test data."""
    return Path(__file__).parent / "data"


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory(prefix="fastq_pair_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_fastq(temp_dir):
    """Factory writing a FASTQ file of the given identifiers into temp_dir.

    compression may be None, "gzip" or "bgzf".
    """
    def _write(name, identifiers, compression=None, text=None):
        path = temp_dir / name
        if text is None:
            text = "".join(fastq_record(i) for i in identifiers)
        data = text.encode("utf-8")
        if compression == "gzip":
            with gzip.open(path, "wb") as f:
                f.write(data)
        elif compression == "bgzf":
            with bgzf.BgzfWriter(str(path), "wb") as f:
                f.write(data)
        else:
            path.write_bytes(data)
        return path
    return _write


@pytest.fixture
def options():
    """Factory for PairOptions with progress bars off."""
    def _options(**kwargs):
        kwargs.setdefault("show_progress", False)
        return PairOptions(**kwargs)
    return _options


@pytest.fixture
def sample_pair(test_data_root):
    """The small out-of-order R1/R2 pair shipped with the tests."""
    left = test_data_root / "sample_R1.fastq"
    right = test_data_root / "sample_R2.fastq"
    if not left.exists() or not right.exists():
        pytest.skip("Sample FASTQ data not found")
    return left, right


# Markers for test organization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
