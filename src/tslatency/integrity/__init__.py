"""
Integrity Module
================

Redundancy schemes wrapping the timestamp payload.

Components:
    - IntegrityScheme: protocol (encode/decode)
    - RawScheme: original, no protection
    - ChecksumScheme: optimized, CRC-16 detection
    - BchScheme: fast-robust, BCH forward error correction
    - create_scheme: variant + capacity -> scheme

Both ends of a session must build the same scheme from the same variant
and region; nothing in the codeword identifies the scheme.
"""

from tslatency.integrity.base import (
    TIMESTAMP_BITS,
    DecodedPayload,
    IntegrityScheme,
    bits_to_int,
    int_to_bits,
)
from tslatency.integrity.raw import RawScheme
from tslatency.integrity.checksum import ChecksumScheme, crc16_ccitt
from tslatency.integrity.bch import BchCode, BchParameters, BchScheme
from tslatency.integrity.factory import create_scheme

__all__ = [
    "TIMESTAMP_BITS",
    "DecodedPayload",
    "IntegrityScheme",
    "bits_to_int",
    "int_to_bits",
    "RawScheme",
    "ChecksumScheme",
    "crc16_ccitt",
    "BchCode",
    "BchParameters",
    "BchScheme",
    "create_scheme",
]
