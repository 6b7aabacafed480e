"""
Elements Module
===============

The two frame transforms a pipeline hosts.

Components:
    - Stamper: writes the current time into each frame
    - Measurer: reads it back and reports the latency
    - FrameTransform: protocol both implement
"""

from tslatency.elements.transform import FrameTransform, Session, negotiate
from tslatency.elements.stamper import Stamper
from tslatency.elements.measurer import Measurer

__all__ = [
    "FrameTransform",
    "Session",
    "negotiate",
    "Stamper",
    "Measurer",
]
