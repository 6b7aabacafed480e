"""
Reason Codes
============

Fixed set of machine-readable reasons attached to measurements that are
not plain OK.

Rules:
    - One clear cause per code
    - FAILED measurements carry a decode reason
    - SUSPECT measurements carry a clock-anomaly reason
"""

from enum import Enum


class ReasonCode(str, Enum):
    """
    Machine-readable explanation for a non-OK measurement.

    Attributes:
        INTEGRITY_CHECK_FAILED: Checksum mismatch, measurement skipped
        UNCORRECTABLE_ERROR: More bit errors than the code can repair
        FUTURE_TIMESTAMP: Decoded stamp is ahead of the local clock
        LATENCY_EXCEEDS_MAXIMUM: Delta above the plausible maximum
    """

    # Decode failures
    INTEGRITY_CHECK_FAILED = "INTEGRITY_CHECK_FAILED"
    UNCORRECTABLE_ERROR = "UNCORRECTABLE_ERROR"

    # Clock anomalies
    FUTURE_TIMESTAMP = "FUTURE_TIMESTAMP"
    LATENCY_EXCEEDS_MAXIMUM = "LATENCY_EXCEEDS_MAXIMUM"
