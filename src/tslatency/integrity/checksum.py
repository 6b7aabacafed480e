"""
Checksum Scheme (optimized)
===========================

Timestamp followed by a CRC-16 of its big-endian bytes:

    | timestamp (64 bits) | CRC-16 (16 bits) |

CRC parameters (CRC-16/CCITT-FALSE):
    polynomial 0x1021, init 0xFFFF, no reflection, no final xor

Every single-bit error and every burst up to 16 bits is detected. Nothing
is corrected: a mismatch drops the measurement for that frame.
"""

import numpy as np

from tslatency.errors import IntegrityCheckFailed
from tslatency.integrity.base import (
    TIMESTAMP_BITS,
    Bits,
    DecodedPayload,
    as_codeword,
    bits_to_int,
    int_to_bits,
)
from tslatency.models.variant import StamperVariant


CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF
CRC_BITS = 16


def _build_crc16_table() -> list:
    table = []
    for byte in range(256):
        crc = byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = ((crc << 1) ^ CRC16_POLY) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
        table.append(crc)
    return table


_CRC16_TABLE = _build_crc16_table()


def crc16_ccitt(data: bytes) -> int:
    """CRC-16/CCITT-FALSE of `data`."""
    crc = CRC16_INIT
    for byte in data:
        crc = ((crc << 8) & 0xFFFF) ^ _CRC16_TABLE[(crc >> 8) ^ byte]
    return crc


def timestamp_crc(timestamp: int) -> int:
    """CRC-16 over the 8 big-endian bytes of a timestamp."""
    return crc16_ccitt(timestamp.to_bytes(TIMESTAMP_BITS // 8, "big"))


class ChecksumScheme:
    """Timestamp plus CRC-16; detects corruption, never corrects it."""

    variant = StamperVariant.OPTIMIZED
    payload_bits = TIMESTAMP_BITS
    codeword_bits = TIMESTAMP_BITS + CRC_BITS

    def encode(self, payload: int) -> np.ndarray:
        if payload < 0 or payload >> self.payload_bits:
            raise ValueError(f"{payload} does not fit in {self.payload_bits} bits")
        word = (payload << CRC_BITS) | timestamp_crc(payload)
        return int_to_bits(word, self.codeword_bits)

    def decode(self, codeword: Bits) -> DecodedPayload:
        """
        Recompute the CRC over the received timestamp bits.

        Raises:
            IntegrityCheckFailed: On checksum mismatch
        """
        word = bits_to_int(as_codeword(codeword, self.codeword_bits))
        timestamp = word >> CRC_BITS
        received = word & 0xFFFF
        expected = timestamp_crc(timestamp)
        if received != expected:
            raise IntegrityCheckFailed(
                f"CRC mismatch: received 0x{received:04X}, computed 0x{expected:04X}"
            )
        return DecodedPayload(payload=timestamp)

    def __repr__(self) -> str:
        return f"ChecksumScheme(bits={self.codeword_bits})"
