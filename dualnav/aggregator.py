"""
Dual-path navigation state: dead reckoning vs. an external pose source.

Two periodic tasks feed the aggregator independently (DR at 20 Hz, external
pose at ~30 Hz). Every accepted update builds a new immutable
``NavigationSnapshot`` and swaps it in, so readers never lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from common.interface import ImuSensor, PoseSource
from common.logger import get_logger
from common.realtime import PeriodicTask, monotonic_time
from common.types import NavigationSnapshot, Position, SensorSample
from dualnav.config import LoopConfig
from dualnav.dead_reckoning import DeadReckoning
from dualnav.path import Trajectory
from dualnav.summary import format_session_summary

logger = get_logger("aggregator")


@dataclass
class PoseFeedStats:
    frames: int = 0
    successful: int = 0
    failures: int = 0


class NavigationAggregator:
    """Owns both trajectories and the published navigation snapshot."""

    def __init__(
        self,
        engine: DeadReckoning | None = None,
        pose_source: PoseSource | None = None,
        imu: ImuSensor | None = None,
        config: LoopConfig | None = None,
    ):
        self.engine = engine or DeadReckoning()
        self.config = config or LoopConfig()
        self._pose_source = pose_source
        self._imu = imu

        # _lock guards trajectories, engine and the snapshot reference.
        # _lifecycle serializes start/stop/attach so tasks are never doubled.
        self._lock = threading.Lock()
        self._lifecycle = threading.RLock()

        self._dr_path = Trajectory()
        self._slam_path = Trajectory()
        self._tracking = False
        self._snapshot = NavigationSnapshot()

        self._dr_task: Optional[PeriodicTask] = None
        self._pose_task: Optional[PeriodicTask] = None
        self.pose_stats = PoseFeedStats()
        self._pose_window = PoseFeedStats()
        self._pose_log_at = monotonic_time()

    # -- Read side --------------------------------------------------------------

    def snapshot(self) -> NavigationSnapshot:
        return self._snapshot

    @property
    def is_tracking(self) -> bool:
        return self._tracking

    @property
    def pose_source(self) -> Optional[PoseSource]:
        return self._pose_source

    def session_summary(self) -> str:
        return format_session_summary(self._snapshot)

    # -- Lifecycle --------------------------------------------------------------

    def start_tracking(self) -> bool:
        with self._lifecycle:
            with self._lock:
                if self._tracking:
                    return False
                self._tracking = True
                self._publish(is_tracking=True)
            if self._imu is not None:
                self._dr_task = PeriodicTask("dr-loop", self.config.dr_period, self._dr_tick)
                self._dr_task.start()
            if self._pose_source is not None:
                self._start_pose_task()
            logger.info("Tracking started")
            return True

    def stop_tracking(self) -> bool:
        with self._lifecycle:
            with self._lock:
                if not self._tracking:
                    return False
                self._tracking = False
                self._publish(is_tracking=False)
            # Ticks already waiting on _lock see _tracking=False and do nothing.
            for task in (self._dr_task, self._pose_task):
                if task is not None:
                    task.cancel(join=True)
            self._dr_task = None
            self._pose_task = None
            logger.info("Tracking stopped")
            return True

    def attach_pose_source(self, source: PoseSource | None) -> None:
        """Swap the external pose source; starts polling right away when tracking."""
        with self._lifecycle:
            if self._pose_task is not None:
                self._pose_task.cancel(join=True)
                self._pose_task = None
            self._pose_source = source
            logger.debug(f"Pose source set: {source is not None}")
            if source is not None and self._tracking:
                self._start_pose_task()

    def reset_paths(self) -> None:
        with self._lock:
            self.engine.reset()
            if self._pose_source is not None:
                try:
                    self._pose_source.reset_tracking()
                except Exception:
                    logger.exception("Pose source failed to reset tracking")
            self._dr_path.clear()
            self._slam_path.clear()
            self._publish(
                dr_path=self._dr_path.view(),
                slam_path=self._slam_path.view(),
                dr_distance=0.0,
                slam_distance=0.0,
                drift_error=0.0,
                step_count=0,
            )
        logger.info("Paths reset")

    def close(self) -> None:
        self.stop_tracking()
        if self._pose_source is not None:
            try:
                self._pose_source.destroy()
            except Exception:
                logger.exception("Pose source failed to release resources")

    def __enter__(self) -> NavigationAggregator:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- Write side -------------------------------------------------------------

    def apply_dr_update(self, sample: SensorSample) -> bool:
        with self._lock:
            if not self._tracking:
                return False
            dr_position = self.engine.update(sample)
            self._dr_path.add_position(dr_position, sample.timestamp_ms or None)
            self._publish(
                dr_path=self._dr_path.view(),
                dr_distance=self._dr_path.total_distance(),
                step_count=self.engine.step_count(),
                drift_error=_drift(dr_position, self._slam_path.current_position()),
                current_sensor_data=sample,
            )
            return True

    def apply_slam_update(self, position: Optional[Position]) -> bool:
        with self._lock:
            if not self._tracking or position is None:
                # Tracking loss: the published snapshot stays as it is.
                return False
            self._slam_path.add_position(position)
            self._publish(
                slam_path=self._slam_path.view(),
                slam_distance=self._slam_path.total_distance(),
                drift_error=_drift(position, self._dr_path.current_position()),
            )
            return True

    def set_obstacle_points(self, points: Iterable[Position]) -> None:
        with self._lock:
            self._publish(obstacle_points=tuple(points))

    # -- Internals --------------------------------------------------------------

    def _publish(self, **changes) -> None:
        # Caller holds _lock.
        self._snapshot = replace(self._snapshot, version=self._snapshot.version + 1, **changes)

    def _start_pose_task(self) -> None:
        self._pose_log_at = monotonic_time()
        self._pose_task = PeriodicTask(
            "pose-loop",
            self.config.pose_period,
            self._pose_tick,
            start_delay=self.config.pose_start_delay,
        )
        self._pose_task.start()

    def _dr_tick(self) -> None:
        sample = self._imu.read() if self._imu is not None else None
        if sample is not None:
            self.apply_dr_update(sample)

    def _pose_tick(self) -> None:
        source = self._pose_source
        if source is None:
            return
        self.pose_stats.frames += 1
        self._pose_window.frames += 1
        try:
            position = source.update()
        except Exception as exc:
            self.pose_stats.failures += 1
            self._pose_window.failures += 1
            logger.warning(f"Pose source update failed: {exc}")
            position = None

        if position is not None and self.apply_slam_update(position):
            self.pose_stats.successful += 1
            self._pose_window.successful += 1

        now = monotonic_time()
        if now - self._pose_log_at > self.config.pose_log_interval:
            w = self._pose_window
            logger.info(
                f"Pose feed: {w.successful}/{w.frames} successful frames, {w.failures} failures, "
                f"status {_status(source)}"
            )
            self._pose_window = PoseFeedStats()
            self._pose_log_at = now


def _drift(current: Position, other: Optional[Position]) -> float:
    return current.distance_to(other) if other is not None else 0.0


def _status(source: PoseSource) -> str:
    try:
        return str(source.tracking_status)
    except Exception:
        logger.exception("Pose source failed to report tracking status")
        return "N/A"


__all__ = ["NavigationAggregator", "PoseFeedStats"]
