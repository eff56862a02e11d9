#!/usr/bin/env python3
"""
Headless Simulation Script
==========================

Runs the SmartAd console without the HTTP layer.

This script:
    1. Builds the console from config.yaml / environment
    2. Activates detection sampling
    3. Logs rotation and analytics stats every N seconds
    4. Reports a final summary

Usage:
    python scripts/run_simulation.py --duration 120
    python scripts/run_simulation.py --duration 30 --seed 7 --tick 0.1 --period 0.2
"""

import argparse
import asyncio
import logging
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from smartad_console.config import load_config, override_settings
from smartad_console.console import SmartAdConsole


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


async def run_simulation(
    console: SmartAdConsole,
    duration: float,
    report_interval: float,
) -> dict:
    """
    Run the console for a fixed duration.

    Args:
        console: Console to run
        duration: Run time in seconds
        report_interval: Seconds between progress reports

    Returns:
        Final summary dict
    """
    logger.info("=" * 60)
    logger.info("SmartAd Headless Simulation")
    logger.info("=" * 60)
    logger.info(f"Duration: {duration} seconds")
    logger.info(f"Catalog: {console.scheduler.catalog}")
    logger.info("=" * 60)

    shown = []
    console.on_ad_shown(shown.append)

    console.start()
    console.toggle_active()

    elapsed = 0.0
    try:
        while elapsed < duration:
            step = min(report_interval, duration - elapsed)
            await asyncio.sleep(step)
            elapsed += step

            rotation = console.rotation()
            stats = console.aggregator.summary()
            current = rotation.current_ad.id if rotation.current_ad else "-"
            logger.info(
                f"[{elapsed:.0f}s] state={rotation.state.value} ad={current} "
                f"remaining={rotation.seconds_remaining}s "
                f"detections={stats.total_detections} avg_age={stats.average_age}"
            )
    finally:
        console.stop()

    summary = console.aggregator.summary()
    return {
        "ads_shown": len(shown),
        "impressions": summary.impressions,
        "detections": summary.total_detections,
        "gender_distribution": summary.gender_distribution,
        "age_buckets": summary.age_buckets.model_dump(),
        "average_age": summary.average_age,
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the SmartAd console headless")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--duration", type=float, default=60, help="Run time in seconds")
    parser.add_argument("--report-interval", type=float, default=10, help="Seconds between reports")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--tick", type=float, default=None, help="Seconds per countdown tick")
    parser.add_argument("--period", type=float, default=None, help="Seconds between sensor polls")
    args = parser.parse_args()

    settings = override_settings(load_config(args.config), {
        "random": {"seed": args.seed},
        "rotation": {"tick_interval_seconds": args.tick},
        "sampler": {"period_seconds": args.period},
    })

    console = SmartAdConsole.from_settings(settings)
    result = asyncio.run(run_simulation(console, args.duration, args.report_interval))

    logger.info("=" * 60)
    logger.info("Final Summary")
    logger.info("=" * 60)
    for key, value in result.items():
        logger.info(f"{key}: {value}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
