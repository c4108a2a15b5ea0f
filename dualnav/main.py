#!/usr/bin/env python3
"""
Entry point: simulated walker → IMU holder → aggregator, with snapshots served over HTTP.
"""
from __future__ import annotations

import argparse
import os
import time

from common.logger import get_logger
from common.serve import SnapshotServer
from dualnav.aggregator import NavigationAggregator
from dualnav.config import LoopConfig
from dualnav.sensors import LatestSampleHolder
from sim import SimImuFeed, SimulatedPoseSource, WalkerProfile, WalkerSimulator

logger = get_logger("main")


class Session:
    """Wires the simulated sensors to the aggregator and runs for a fixed time."""

    def __init__(self, config: LoopConfig | None = None, turn_rate: float = 0.15, seed: int | None = None):
        self.config = config or LoopConfig.from_env()
        self.holder = LatestSampleHolder()
        self.walker = WalkerSimulator(WalkerProfile(turn_rate=turn_rate, gyro_bias=0.01), seed=seed)
        self.feed = SimImuFeed(self.walker, self.holder)
        self.pose_source = SimulatedPoseSource(self.feed.truth, noise_std=0.02, dropout=0.05, seed=seed)
        self.aggregator = NavigationAggregator(pose_source=self.pose_source, imu=self.holder, config=self.config)
        self.server: SnapshotServer | None = None

    def serve(self, host: str, port: int) -> None:
        self.server = SnapshotServer(self.aggregator.snapshot, self.aggregator.session_summary, host, port)
        self.server.start()

    def run(self, duration: float) -> str:
        self.feed.start()
        self.aggregator.start_tracking()
        logger.info(f"Walking for {duration:.1f}s")
        deadline = time.monotonic() + duration
        try:
            while time.monotonic() < deadline:
                time.sleep(min(1.0, max(0.0, deadline - time.monotonic())))
                state = self.aggregator.snapshot()
                logger.debug(
                    f"steps={state.step_count} dr={state.dr_distance:.2f}m "
                    f"slam={state.slam_distance:.2f}m drift={state.drift_error:.2f}m "
                    f"imu_events={self.holder.event_count}"
                )
        finally:
            self.aggregator.stop_tracking()
            self.feed.stop()
        logger.info(f"Walk finished after {self.holder.event_count} IMU events")
        return self.aggregator.session_summary()

    def close(self) -> None:
        if self.server is not None:
            self.server.shutdown()
            self.server = None
        self.aggregator.close()


def parse_args(argv=None, environ=None) -> argparse.Namespace:
    """Command-line options; each default comes from its ``DUALNAV_*`` variable."""
    env = os.environ if environ is None else environ
    seed_env = env.get("DUALNAV_SEED")

    parser = argparse.ArgumentParser(
        description="Simulated walk comparing dead reckoning against an external pose stream"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=float(env.get("DUALNAV_DURATION", "20")),
        help="Seconds to walk (env DUALNAV_DURATION, default: 20)",
    )
    parser.add_argument(
        "--plot",
        default=env.get("DUALNAV_PLOT"),
        help="Optional: write a top-down x-z plot of both paths to this file (env DUALNAV_PLOT)",
    )
    parser.add_argument(
        "--host",
        default=env.get("DUALNAV_HOST", "127.0.0.1"),
        help="Snapshot server host (env DUALNAV_HOST, default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(env.get("DUALNAV_PORT", "8765")),
        help="Snapshot server port, 0 disables it (env DUALNAV_PORT, default: 8765)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=int(seed_env) if seed_env else None,
        help="Seed for the simulated walker (env DUALNAV_SEED)",
    )
    args = parser.parse_args(argv)
    if args.duration < 0.0:
        parser.error("--duration must be non-negative")
    return args


def main(argv=None):
    args = parse_args(argv)

    session = Session(seed=args.seed)
    try:
        if args.port > 0:
            session.serve(args.host, args.port)
        print(session.run(args.duration))
        if args.plot:
            from dualnav.plot import plot_paths

            plot_paths(session.aggregator.snapshot(), args.plot)
            logger.info(f"Wrote path plot to {args.plot}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
