"""
Stamper Variants
================

Integrity scheme selection. Both ends of a session must use the same
variant; it is agreed out of band and never detected from the pixels.

    original     raw timestamp bits, no redundancy
    optimized    timestamp followed by a CRC-16 (detects, does not correct)
    fast-robust  BCH codeword (corrects up to t bit errors)
"""

from enum import Enum


class StamperVariant(str, Enum):
    """
    Stamper/reader variant identifiers.

    The string values are the `stamper-type` option nicknames.
    """

    ORIGINAL = "original"
    OPTIMIZED = "optimized"
    FAST_ROBUST = "fast-robust"

    @classmethod
    def default(cls) -> "StamperVariant":
        return cls.OPTIMIZED

    @classmethod
    def from_str(cls, value: str) -> "StamperVariant":
        """
        Parse a nickname case-insensitively.

        Accepts `fastrobust` and `fast_robust` as aliases of `fast-robust`.

        Raises:
            ValueError: If the name is unknown
        """
        name = value.strip().lower().replace("_", "-")
        if name == "fastrobust":
            name = cls.FAST_ROBUST.value
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(v.value for v in cls)
            raise ValueError(
                f"Unknown stamper type {value!r}, expected one of: {choices}"
            ) from None

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    StamperVariant.ORIGINAL: "Original: simple binary encoding",
    StamperVariant.OPTIMIZED: "Optimized: binary encoding with CRC16",
    StamperVariant.FAST_ROBUST: "Fast-Robust: BCH error correction",
}
