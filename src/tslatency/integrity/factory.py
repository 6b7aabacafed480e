"""
Scheme Factory
==============

Builds the integrity scheme for a variant and a region capacity.
"""

import logging

from tslatency.errors import PayloadTooLarge
from tslatency.integrity.base import IntegrityScheme
from tslatency.integrity.bch import BchScheme
from tslatency.integrity.checksum import ChecksumScheme
from tslatency.integrity.raw import RawScheme
from tslatency.models.variant import StamperVariant


logger = logging.getLogger(__name__)


def create_scheme(variant: StamperVariant, capacity: int) -> IntegrityScheme:
    """
    Create the scheme for `variant`, checking it fits the region.

    Args:
        variant: Stamper variant shared by both ends of the session
        capacity: Region capacity in bits

    Returns:
        Scheme whose codeword fits in `capacity` bits

    Raises:
        PayloadTooLarge: If the codeword needs more bits than available
    """
    variant = StamperVariant(variant)

    if variant is StamperVariant.ORIGINAL:
        scheme = RawScheme()
    elif variant is StamperVariant.OPTIMIZED:
        scheme = ChecksumScheme()
    else:
        scheme = BchScheme(capacity)

    if scheme.codeword_bits > capacity:
        raise PayloadTooLarge(scheme.codeword_bits, capacity)

    logger.debug(f"Created {scheme!r} for {variant.value}, capacity={capacity}")
    return scheme
