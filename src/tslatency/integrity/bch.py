"""
BCH Scheme (fast-robust)
========================

Forward error correction with a binary, narrow-sense, primitive BCH code.

Code parameters are derived from the region capacity so the codeword
fills the region:

    m = min(8, floor(log2(capacity + 1)))
    n = 2^m - 1
    t = largest value whose generator leaves k = n - deg(g) >= 80

The default 64x64 region with 4px cells (256 cells) gives BCH(255, 87, 26).

Message layout (systematic, MSB first):

    | timestamp (64) | CRC-16 (16) | zero padding (k - 80) | parity (n - k) |

Decoding:
    1. Syndromes S_1..S_2t of the received word
    2. Berlekamp-Massey error locator
    3. Chien search for the error positions
    4. Flip, then check the padding and CRC

A locator of degree > t, a root count that differs from the degree, or a
corrected word whose padding/CRC is inconsistent all raise
UncorrectableError. The CRC catches miscorrections past t, so a decode
never returns a timestamp that does not check out.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import numpy as np

from tslatency.errors import PayloadTooLarge, UncorrectableError
from tslatency.integrity.base import (
    TIMESTAMP_BITS,
    Bits,
    DecodedPayload,
    as_codeword,
    bits_to_int,
    int_to_bits,
)
from tslatency.integrity.checksum import CRC_BITS, timestamp_crc
from tslatency.integrity.galois import GaloisField, galois_field, gf2_mod, gf2_mul
from tslatency.models.variant import StamperVariant


logger = logging.getLogger(__name__)


MAX_FIELD_ORDER = 8
MIN_FIELD_ORDER = 3
MESSAGE_BITS = TIMESTAMP_BITS + CRC_BITS


@dataclass(frozen=True, slots=True)
class BchParameters:
    """Design parameters (n, k, t) of a BCH code."""

    n: int
    k: int
    t: int

    def __str__(self) -> str:
        return f"BCH({self.n}, {self.k}, {self.t})"


class BchCode:
    """
    Binary BCH code of length 2^m - 1 correcting up to t errors.

    Operates on bit vectors in transmission order: index 0 is the
    coefficient of x^(n-1).

    Attributes:
        field: GF(2^m) tables
        generator: Generator polynomial as a GF(2) bit mask
        params: (n, k, t)
    """

    def __init__(self, m: int, t: int) -> None:
        """
        Build the generator polynomial.

        Raises:
            ValueError: If t is below 1 or leaves no message bits
        """
        if t < 1:
            raise ValueError(f"t must be >= 1, got {t}")
        self.field = galois_field(m)
        n = self.field.n
        self.generator = _generator_polynomial(self.field, t)
        k = n - (self.generator.bit_length() - 1)
        if k <= 0 or 2 * t >= n:
            raise ValueError(f"t={t} is too large for n={n}")
        self.params = BchParameters(n=n, k=k, t=t)
        self._syndrome_orders = np.arange(1, 2 * t + 1, dtype=np.int64)
        self._positions = np.arange(n, dtype=np.int64)

    @classmethod
    def design(cls, max_codeword_bits: int, min_message_bits: int) -> Optional["BchCode"]:
        """
        Strongest code with n <= max_codeword_bits and k >= min_message_bits.

        Returns:
            The code, or None when no field order can host the message
        """
        m = min(MAX_FIELD_ORDER, (max_codeword_bits + 1).bit_length() - 1)
        if m < MIN_FIELD_ORDER:
            return None
        field = galois_field(m)

        best_t = 0
        for t, generator in _generator_sequence(field):
            if field.n - (generator.bit_length() - 1) < min_message_bits:
                break
            best_t = t

        if best_t == 0:
            return None
        return cls(m, best_t)

    @property
    def n(self) -> int:
        return self.params.n

    @property
    def k(self) -> int:
        return self.params.k

    @property
    def t(self) -> int:
        return self.params.t

    def encode(self, message: Bits) -> np.ndarray:
        """Systematic encoding of k message bits into n codeword bits."""
        message = as_codeword(message, self.k)
        shifted = bits_to_int(message) << (self.n - self.k)
        parity = gf2_mod(shifted, self.generator)
        return int_to_bits(shifted | parity, self.n)

    def decode(self, received: Bits) -> Tuple[np.ndarray, int]:
        """
        Correct up to t bit errors.

        Returns:
            (corrected codeword, number of flipped bits)

        Raises:
            UncorrectableError: If the error pattern exceeds the code
        """
        received = as_codeword(received, self.n)
        syndromes = self._syndromes(received)
        if not any(syndromes):
            return received.copy(), 0

        locator = self._berlekamp_massey(syndromes)
        degree = len(locator) - 1
        if degree > self.t:
            raise UncorrectableError(
                f"{self.params}: error locator degree {degree} exceeds t={self.t}"
            )

        errors = self._chien_search(locator)
        if errors.size != degree:
            raise UncorrectableError(
                f"{self.params}: locator of degree {degree} has {errors.size} roots"
            )

        corrected = received.copy()
        corrected[self.n - 1 - errors] ^= 1
        return corrected, degree

    def _syndromes(self, received: np.ndarray) -> List[int]:
        ones = np.flatnonzero(received)
        if ones.size == 0:
            return [0] * self._syndrome_orders.size
        degrees = (self.n - 1 - ones).astype(np.int64)
        powers = np.outer(degrees, self._syndrome_orders) % self.n
        values = self.field.exp_array[powers]
        return np.bitwise_xor.reduce(values, axis=0).tolist()

    def _berlekamp_massey(self, syndromes: List[int]) -> List[int]:
        """Error locator polynomial, lowest degree first."""
        gf = self.field
        locator = [1]
        previous = [1]
        length = 0
        shift = 1
        last_discrepancy = 1

        for r, syndrome in enumerate(syndromes):
            discrepancy = syndrome
            for i in range(1, min(length, len(locator) - 1) + 1):
                discrepancy ^= gf.mul(locator[i], syndromes[r - i])

            if discrepancy == 0:
                shift += 1
                continue

            coef = gf.div(discrepancy, last_discrepancy)
            snapshot = list(locator)
            needed = len(previous) + shift
            if len(locator) < needed:
                locator.extend([0] * (needed - len(locator)))
            for i, value in enumerate(previous):
                locator[i + shift] ^= gf.mul(coef, value)

            if 2 * length <= r:
                length = r + 1 - length
                previous = snapshot
                last_discrepancy = discrepancy
                shift = 1
            else:
                shift += 1

        while len(locator) > 1 and locator[-1] == 0:
            locator.pop()
        return locator

    def _chien_search(self, locator: List[int]) -> np.ndarray:
        """Exponents i with locator(alpha^-i) == 0."""
        gf = self.field
        degrees = np.array([d for d, c in enumerate(locator) if c], dtype=np.int64)
        logs = np.array([gf.log[c] for c in locator if c], dtype=np.int64)
        powers = (logs[np.newaxis, :] - np.outer(self._positions, degrees)) % self.n
        values = np.bitwise_xor.reduce(gf.exp_array[powers], axis=1)
        return np.flatnonzero(values == 0)

    def __repr__(self) -> str:
        return f"BchCode(n={self.n}, k={self.k}, t={self.t})"


def _generator_sequence(field: GaloisField) -> Iterator[Tuple[int, int]]:
    """
    Yield (t, g_t) for t = 1, 2, ... while 2t < n.

    g_t is the LCM of the minimal polynomials of alpha^1 .. alpha^2t, grown
    one conjugacy class at a time.
    """
    generator = 1
    seen = set()
    t = 1
    while 2 * t < field.n:
        for exponent in (2 * t - 1, 2 * t):
            coset_id = min(field.cyclotomic_coset(exponent))
            if coset_id not in seen:
                seen.add(coset_id)
                generator = gf2_mul(generator, field.minimal_polynomial(exponent))
        yield t, generator
        t += 1


def _generator_polynomial(field: GaloisField, t: int) -> int:
    """Generator polynomial of the t-error-correcting code over `field`."""
    for current, generator in _generator_sequence(field):
        if current == t:
            return generator
    raise ValueError(f"t={t} is too large for n={field.n}")


def smallest_codeword_bits(message_bits: int = MESSAGE_BITS) -> int:
    """Shortest BCH length able to carry `message_bits` with t >= 1."""
    for m in range(MIN_FIELD_ORDER, MAX_FIELD_ORDER + 1):
        n = (1 << m) - 1
        if n - m >= message_bits:
            return n
    raise ValueError(f"No supported BCH code carries {message_bits} bits")


class BchScheme:
    """
    Timestamp protected by a BCH codeword sized to the region.

    Attributes:
        code: Underlying BchCode
        codeword_bits: n
    """

    variant = StamperVariant.FAST_ROBUST
    payload_bits = TIMESTAMP_BITS

    def __init__(self, capacity: int) -> None:
        """
        Design the strongest code that fits `capacity` cells.

        Raises:
            PayloadTooLarge: If no code carrying the message fits
        """
        code = BchCode.design(capacity, MESSAGE_BITS)
        if code is None:
            raise PayloadTooLarge(smallest_codeword_bits(), capacity)
        self.code = code
        self.codeword_bits = code.n
        self._padding = code.k - MESSAGE_BITS

        logger.info(
            f"BchScheme initialized: {code.params}, capacity={capacity} bits"
        )

    @property
    def params(self) -> BchParameters:
        return self.code.params

    def encode(self, payload: int) -> np.ndarray:
        if payload < 0 or payload >> self.payload_bits:
            raise ValueError(f"{payload} does not fit in {self.payload_bits} bits")
        word = (payload << CRC_BITS) | timestamp_crc(payload)
        message = np.concatenate([
            int_to_bits(word, MESSAGE_BITS),
            np.zeros(self._padding, dtype=np.uint8),
        ])
        return self.code.encode(message)

    def decode(self, codeword: Bits) -> DecodedPayload:
        """
        Correct and unpack a received codeword.

        Raises:
            UncorrectableError: If correction fails or the result is inconsistent
        """
        corrected, flipped = self.code.decode(codeword)
        message = corrected[:self.code.k]

        if message[MESSAGE_BITS:].any():
            raise UncorrectableError(f"{self.params}: non-zero padding after correction")

        word = bits_to_int(message[:MESSAGE_BITS])
        timestamp = word >> CRC_BITS
        if word & 0xFFFF != timestamp_crc(timestamp):
            raise UncorrectableError(f"{self.params}: CRC mismatch after correction")

        if flipped:
            logger.debug(f"{self.params}: corrected {flipped} bit errors")
        return DecodedPayload(payload=timestamp, corrected_bits=flipped)

    def __repr__(self) -> str:
        return f"BchScheme({self.params})"
