"""
Raw Scheme (original)
=====================

Timestamp bits written verbatim. No redundancy, no detection: a flipped
bit produces a different timestamp that decodes "successfully". Meant for
lossless paths where encode cost matters more than protection.
"""

import numpy as np

from tslatency.integrity.base import (
    TIMESTAMP_BITS,
    Bits,
    DecodedPayload,
    as_codeword,
    bits_to_int,
    int_to_bits,
)
from tslatency.models.variant import StamperVariant


class RawScheme:
    """64 timestamp bits, MSB first."""

    variant = StamperVariant.ORIGINAL
    payload_bits = TIMESTAMP_BITS
    codeword_bits = TIMESTAMP_BITS

    def encode(self, payload: int) -> np.ndarray:
        return int_to_bits(payload, self.payload_bits)

    def decode(self, codeword: Bits) -> DecodedPayload:
        bits = as_codeword(codeword, self.codeword_bits)
        return DecodedPayload(payload=bits_to_int(bits))

    def __repr__(self) -> str:
        return f"RawScheme(bits={self.codeword_bits})"
