"""
Galois Field Arithmetic
=======================

GF(2^m) tables and binary polynomial helpers for the BCH code.

Elements are plain ints in [0, 2^m). Polynomials over GF(2) are ints used
as bit masks (bit i = coefficient of x^i); polynomials over GF(2^m) are
lists of coefficients, lowest degree first.
"""

from functools import lru_cache
from typing import List

import numpy as np


# Primitive polynomials, indexed by field order m
PRIMITIVE_POLYNOMIALS = {
    2: 0b111,
    3: 0b1011,
    4: 0b10011,
    5: 0b100101,
    6: 0b1000011,
    7: 0b10001001,
    8: 0b100011101,
}


class GaloisField:
    """
    Log/antilog tables for GF(2^m).

    Attributes:
        m: Field order exponent
        n: Multiplicative group size, 2^m - 1
        exp: Antilog table, doubled so exp[a + b] needs no reduction
        log: Log table (log[0] is unused)
        exp_array: exp[:n] as a numpy array for vectorized lookups
    """

    def __init__(self, m: int) -> None:
        if m not in PRIMITIVE_POLYNOMIALS:
            raise ValueError(f"No primitive polynomial for GF(2^{m})")

        self.m = m
        self.n = (1 << m) - 1
        poly = PRIMITIVE_POLYNOMIALS[m]

        exp = [0] * (2 * self.n)
        log = [0] * (self.n + 1)
        x = 1
        for i in range(self.n):
            exp[i] = x
            log[x] = i
            x <<= 1
            if x >> m:
                x ^= poly
        for i in range(self.n, 2 * self.n):
            exp[i] = exp[i - self.n]

        self.exp = exp
        self.log = log
        self.exp_array = np.array(exp[:self.n], dtype=np.int64)

    def mul(self, a: int, b: int) -> int:
        if a == 0 or b == 0:
            return 0
        return self.exp[self.log[a] + self.log[b]]

    def div(self, a: int, b: int) -> int:
        if b == 0:
            raise ZeroDivisionError("division by zero in GF(2^m)")
        if a == 0:
            return 0
        return self.exp[(self.log[a] - self.log[b]) % self.n]

    def cyclotomic_coset(self, exponent: int) -> List[int]:
        """Exponents {e * 2^i mod n} conjugate to `exponent`."""
        coset = []
        e = exponent % self.n
        while e not in coset:
            coset.append(e)
            e = (e * 2) % self.n
        return coset

    def minimal_polynomial(self, exponent: int) -> int:
        """
        Minimal polynomial of alpha^exponent over GF(2), as a bit mask.

        Product of (x - alpha^c) over the cyclotomic coset; every
        coefficient of the product lies in GF(2).
        """
        poly = [1]
        for c in self.cyclotomic_coset(exponent):
            root = self.exp[c]
            product = [0] * (len(poly) + 1)
            for i, coef in enumerate(poly):
                product[i + 1] ^= coef
                product[i] ^= self.mul(coef, root)
            poly = product

        mask = 0
        for i, coef in enumerate(poly):
            if coef not in (0, 1):
                raise ArithmeticError(f"Minimal polynomial of alpha^{exponent} is not binary")
            mask |= coef << i
        return mask


@lru_cache(maxsize=None)
def galois_field(m: int) -> GaloisField:
    """Shared, immutable field tables for GF(2^m)."""
    return GaloisField(m)


def gf2_mul(a: int, b: int) -> int:
    """Carry-less product of two GF(2) polynomials."""
    result = 0
    while b:
        if b & 1:
            result ^= a
        a <<= 1
        b >>= 1
    return result


def gf2_mod(a: int, divisor: int) -> int:
    """Remainder of GF(2) polynomial division."""
    degree = divisor.bit_length()
    while a.bit_length() >= degree:
        a ^= divisor << (a.bit_length() - degree)
    return a
