"""
Identifier normalization and hashing.

Reads in the two files pair up when their header lines reduce to the same key:

    @id1/1  and @id1/2   ->  @id1/
    @id1_f  and @id1_r   ->  @id1_
    @id1    and @id1     ->  @id1/

The record marker is kept as part of the key; both files carry it, so it never
affects whether two headers match.
"""

import re
from typing import Union

from .constants import MATE_INDICATORS, MATE_SEPARATORS, NORMALIZED_SUFFIX

_FIRST_BLANK = re.compile(rb"[ \t]")

_HASH_MASK = 0xFFFFFFFF


def identifier_from_header(line: bytes, split_space: bool = False) -> bytes:
    """Strip the line terminator and, optionally, everything after the first blank."""
    identifier = line.rstrip(b"\r\n")
    if split_space:
        identifier = _FIRST_BLANK.split(identifier, 1)[0]
    return identifier


def is_short_identifier(identifier: bytes) -> bool:
    return len(identifier) < 2


def normalize_key(identifier: bytes) -> bytes:
    """Reduce a stripped identifier to its pairing key.

    A trailing mate indicator (1, 2, f or r after /, _ or .) is dropped; any other
    identifier gets a "/" appended unless it already ends with one, so applying this
    twice gives the same key.  Identifiers shorter than two characters cannot carry
    a mate suffix and are returned unchanged.
    """
    if is_short_identifier(identifier):
        return identifier

    if identifier[-2] in MATE_SEPARATORS and identifier[-1] in MATE_INDICATORS:
        return identifier[:-1]
    if identifier.endswith(NORMALIZED_SUFFIX):
        return identifier
    return identifier + NORMALIZED_SUFFIX


def normalize_identifier(line: Union[bytes, str], split_space: bool = False) -> bytes:
    if isinstance(line, str):
        line = line.encode("utf-8")
    return normalize_key(identifier_from_header(line, split_space))


def hash_identifier(key: bytes) -> int:
    """Polynomial rolling hash (h = b + 31*h) over the key bytes, wrapped to 32 bits."""
    h = 0
    for b in key:
        h = (b + 31 * h) & _HASH_MASK
    return h
