"""Human-readable session summary."""

from __future__ import annotations

from common.types import NavigationSnapshot

MIN_ACCURACY_DISTANCE = 0.1  # m


def accuracy_percent(drift_error: float, dr_distance: float) -> float:
    return (1.0 - drift_error / max(dr_distance, MIN_ACCURACY_DISTANCE)) * 100.0


def format_session_summary(state: NavigationSnapshot) -> str:
    lines = [
        "Dual-path Navigation Session Summary",
        "=" * 40,
        "Dead Reckoning:",
        f"  - Distance: {state.dr_distance:.2f} m",
        f"  - Steps: {state.step_count}",
        f"  - Points: {len(state.dr_path)}",
        "",
        "SLAM:",
        f"  - Distance: {state.slam_distance:.2f} m",
        f"  - Points: {len(state.slam_path)}",
        "",
        "Analysis:",
        f"  - Drift Error: {state.drift_error:.2f} m",
        f"  - Accuracy: {accuracy_percent(state.drift_error, state.dr_distance):.1f}%",
    ]
    return "\n".join(lines) + "\n"


__all__ = ["format_session_summary", "accuracy_percent"]
