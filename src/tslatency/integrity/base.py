"""
Integrity Scheme Interface
==========================

Common protocol and bit helpers for the three integrity schemes.

A scheme turns a timestamp payload into a codeword (a 0/1 bit vector in
transmission order) and back. Decode failures are raised as DecodeError
subclasses; schemes never return a payload they cannot vouch for, except
RawScheme, which by definition cannot vouch for anything.
"""

from dataclasses import dataclass
from typing import Protocol, Sequence, Union

import numpy as np

from tslatency.models.variant import StamperVariant


TIMESTAMP_BITS = 64

Bits = Union[Sequence[int], np.ndarray]


@dataclass(frozen=True, slots=True)
class DecodedPayload:
    """
    Result of a successful decode.

    Attributes:
        payload: Recovered timestamp
        corrected_bits: Number of codeword bits repaired
    """

    payload: int
    corrected_bits: int = 0


class IntegrityScheme(Protocol):
    """
    Protocol for integrity schemes.

    Implemented by:
        - RawScheme (original)
        - ChecksumScheme (optimized)
        - BchScheme (fast-robust)
    """

    variant: StamperVariant
    payload_bits: int
    codeword_bits: int

    def encode(self, payload: int) -> np.ndarray:
        """
        Encode a timestamp.

        Args:
            payload: Unsigned timestamp that fits in payload_bits

        Returns:
            uint8 vector of codeword_bits 0/1 values, MSB first
        """
        ...

    def decode(self, codeword: Bits) -> DecodedPayload:
        """
        Recover a timestamp from a received codeword.

        Raises:
            DecodeError: If the codeword is detected as corrupt
        """
        ...


def int_to_bits(value: int, width: int) -> np.ndarray:
    """
    Big-endian bit vector of an unsigned integer.

    Raises:
        ValueError: If value is negative or needs more than width bits
    """
    if value < 0 or value >> width:
        raise ValueError(f"{value} does not fit in {width} unsigned bits")
    nbytes = (width + 7) // 8
    raw = np.frombuffer(value.to_bytes(nbytes, "big"), dtype=np.uint8)
    return np.unpackbits(raw)[nbytes * 8 - width:]


def bits_to_int(bits: Bits) -> int:
    """Unsigned integer from a big-endian bit vector."""
    bits = np.asarray(bits, dtype=np.uint8) & 1
    pad = (-bits.size) % 8
    if pad:
        bits = np.concatenate([np.zeros(pad, dtype=np.uint8), bits])
    return int.from_bytes(np.packbits(bits).tobytes(), "big")


def as_codeword(codeword: Bits, length: int) -> np.ndarray:
    """
    Normalize a received codeword to a uint8 0/1 vector.

    Raises:
        ValueError: If the length is wrong
    """
    bits = np.asarray(codeword, dtype=np.uint8).reshape(-1)
    if bits.size != length:
        raise ValueError(f"Expected {length} codeword bits, got {bits.size}")
    return bits & 1
