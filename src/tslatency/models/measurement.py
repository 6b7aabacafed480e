"""
Measurement Model
=================

Per-frame result produced by the Measurer.

Measurements are ephemeral: created once per frame, handed to a reporter,
and never persisted by the core.

Status semantics:
    OK         timestamp decoded cleanly, delta computed
    CORRECTED  timestamp decoded after forward error correction
    SUSPECT    timestamp decoded but the delta is implausible (reported,
               not discarded, so clock anomalies stay visible)
    FAILED     no timestamp could be recovered; no delta
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tslatency.models.reason_codes import ReasonCode


class DecodeStatus(str, Enum):
    """Outcome of decoding one frame."""

    OK = "OK"
    CORRECTED = "CORRECTED"
    SUSPECT = "SUSPECT"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class Measurement:
    """
    Latency measurement for one frame.

    Attributes:
        sequence: Per-Measurer frame counter (diagnostics only)
        status: Decode outcome
        reason: Cause for SUSPECT/FAILED outcomes
        receive_time_ns: Clock reading when the frame was measured
        stamp_time_ns: Decoded timestamp, None when FAILED
        delta_ns: receive_time_ns - stamp_time_ns, None when FAILED
        corrected_bits: Bits repaired by forward error correction
        ambiguous_cells: Cells whose samples fell inside the tolerance band
    """

    sequence: int
    status: DecodeStatus
    receive_time_ns: int
    reason: Optional[ReasonCode] = None
    stamp_time_ns: Optional[int] = None
    delta_ns: Optional[int] = None
    corrected_bits: int = 0
    ambiguous_cells: int = 0

    @property
    def accepted(self) -> bool:
        """Whether the delta is trustworthy (OK or CORRECTED)."""
        return self.status in (DecodeStatus.OK, DecodeStatus.CORRECTED)

    @property
    def delta_us(self) -> Optional[float]:
        return None if self.delta_ns is None else self.delta_ns / 1_000

    @property
    def delta_ms(self) -> Optional[float]:
        return None if self.delta_ns is None else self.delta_ns / 1_000_000

    def to_dict(self) -> dict:
        """Export as a sink event."""
        return {
            "sequence": self.sequence,
            "decode_status": self.status.value,
            "reason": self.reason.value if self.reason else None,
            "stamp_time_ns": self.stamp_time_ns,
            "receive_time_ns": self.receive_time_ns,
            "delta_ns": self.delta_ns,
            "corrected_bits": self.corrected_bits,
            "ambiguous_cells": self.ambiguous_cells,
        }
