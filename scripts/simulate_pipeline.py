#!/usr/bin/env python3
"""
Pipeline Simulation Script
==========================

Standalone script to exercise a stamp -> lossy transport -> measure session.

This script:
    1. Renders synthetic BGR frames and converts them to I420 (OpenCV)
    2. Stamps each frame with a manual clock
    3. JPEG re-encodes the luma plane to emulate a lossy link
    4. Advances the clock by a simulated transport delay
    5. Measures each frame and logs rolling statistics
    6. Reports final summary

Prerequisites:
    - Install the package with the simulation extra: pip install -e ".[sim]"

Usage:
    python scripts/simulate_pipeline.py --frames 300
    python scripts/simulate_pipeline.py --variant original --quality 60
"""

import argparse
import logging
import sys

import cv2
import numpy as np

from tslatency import (
    ManualClock,
    MeasureConfig,
    Measurer,
    Stamper,
    StamperConfig,
    VideoFrame,
    VideoInfo,
)
from tslatency.observability import CompositeReporter, LatencyStatistics, LoggingReporter


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def render_frame(index: int, width: int, height: int) -> np.ndarray:
    """Moving gradient with a little noise, BGR."""
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    base = (xs[np.newaxis, :] + ys[:, np.newaxis] + index * 4) % 256
    noise = np.random.default_rng(index).normal(0, 6, size=(height, width))
    gray = np.clip(base + noise, 0, 255).astype(np.uint8)
    return cv2.merge([gray, np.roll(gray, index, axis=1), 255 - gray])


def jpeg_luma(frame: VideoFrame, quality: int) -> VideoFrame:
    """Round-trip the luma plane through JPEG; chroma passes through."""
    received = frame.copy()
    luma = received.planes[0][:, :, 0]
    ok, encoded = cv2.imencode(".jpg", luma, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise RuntimeError("JPEG encoding failed")
    luma[...] = cv2.imdecode(encoded, cv2.IMREAD_GRAYSCALE)
    return received


def run_simulation(
    frames: int,
    width: int,
    height: int,
    variant: str,
    quality: int,
    latency_ms: float,
    jitter_ms: float,
    report_interval: int,
) -> dict:
    """
    Run the simulation.

    Args:
        frames: Number of frames to push through
        width: Frame width (even)
        height: Frame height (even)
        variant: Stamper variant on both sides
        quality: JPEG quality for the luma plane, 0 disables the lossy step
        latency_ms: Mean simulated transport delay
        jitter_ms: Standard deviation of the delay
        report_interval: Frames between progress reports

    Returns:
        Final statistics dict
    """
    logger.info("=" * 60)
    logger.info("Latency Pipeline Simulation")
    logger.info("=" * 60)
    logger.info(f"Frames: {frames} at {width}x{height} I420")
    logger.info(f"Variant: {variant}")
    logger.info(f"JPEG quality: {quality or 'off'}")
    logger.info(f"Simulated delay: {latency_ms} ms +/- {jitter_ms} ms")
    logger.info("=" * 60)

    clock = ManualClock(start_ns=1_000_000_000)
    stats = LatencyStatistics()
    reporter = CompositeReporter([stats, LoggingReporter()])

    stamper = Stamper(StamperConfig(stamper_type=variant), clock=clock)
    measurer = Measurer(MeasureConfig(stamper_type=variant), clock=clock, reporter=reporter)

    info = VideoInfo("I420", width, height)
    stamper.validate_configuration(info)
    measurer.validate_configuration(info)

    rng = np.random.default_rng(0)
    frame_interval_ns = 33_333_333

    for index in range(frames):
        yuv = cv2.cvtColor(render_frame(index, width, height), cv2.COLOR_BGR2YUV_I420)
        frame = VideoFrame.from_buffer(yuv, info)

        stamper.apply(frame)
        received = jpeg_luma(frame, quality) if quality else frame

        delay_ms = max(0.0, rng.normal(latency_ms, jitter_ms))
        clock.advance(int(delay_ms * 1_000_000))
        measurer.apply(received)
        clock.advance(frame_interval_ns)

        if (index + 1) % report_interval == 0:
            snapshot = stats.snapshot()
            logger.info("-" * 40)
            logger.info(f"Progress Report (frame {index + 1})")
            logger.info(f"  Accepted in window: {snapshot.count}")
            logger.info(f"  Mean: {snapshot.mean_ms} ms")
            logger.info(f"  p95: {snapshot.p95_ms} ms")
            logger.info(f"  Status counts: {snapshot.status_counts}")

    # Final report
    snapshot = stats.snapshot()

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Frames measured: {snapshot.total_frames}")
    logger.info(f"Latency mean/min/max: {snapshot.mean_ms} / {snapshot.min_ms} / {snapshot.max_ms} ms")
    logger.info(f"Latency p50/p95: {snapshot.p50_ms} / {snapshot.p95_ms} ms")
    logger.info(f"Status counts: {snapshot.status_counts}")
    logger.info(f"Failure rate: {snapshot.failure_rate:.2%}")
    logger.info(f"Longest failure run: {snapshot.longest_failure_run}")
    logger.info("=" * 60)

    return snapshot.to_dict()


def main():
    parser = argparse.ArgumentParser(
        description="Simulate a stamp -> lossy transport -> measure pipeline"
    )
    parser.add_argument("--frames", type=int, default=300, help="Frames to simulate (default: 300)")
    parser.add_argument("--width", type=int, default=640, help="Frame width (default: 640)")
    parser.add_argument("--height", type=int, default=480, help="Frame height (default: 480)")
    parser.add_argument(
        "--variant",
        default="fast-robust",
        choices=["original", "optimized", "fast-robust"],
        help="Stamper variant (default: fast-robust)",
    )
    parser.add_argument("--quality", type=int, default=80, help="JPEG quality, 0 disables (default: 80)")
    parser.add_argument("--latency-ms", type=float, default=40.0, help="Mean delay (default: 40)")
    parser.add_argument("--jitter-ms", type=float, default=5.0, help="Delay std dev (default: 5)")
    parser.add_argument("--report-interval", type=int, default=100, help="Frames between reports (default: 100)")

    args = parser.parse_args()

    if args.width % 2 or args.height % 2:
        parser.error("I420 needs even frame dimensions")

    try:
        result = run_simulation(
            frames=args.frames,
            width=args.width,
            height=args.height,
            variant=args.variant,
            quality=args.quality,
            latency_ms=args.latency_ms,
            jitter_ms=args.jitter_ms,
            report_interval=args.report_interval,
        )
    except KeyboardInterrupt:
        logger.info("Simulation interrupted by user")
        sys.exit(130)

    # Exit non-zero if nothing was measured
    if result["count"] == 0:
        logger.error("SIMULATION FAILED: no accepted measurements")
        sys.exit(1)

    logger.info("SIMULATION PASSED")
    sys.exit(0)


if __name__ == "__main__":
    main()
