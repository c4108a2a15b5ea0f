"""Top-down (x-z) plot of the dead-reckoning and external paths."""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from common.types import NavigationSnapshot  # noqa: E402


def _xz(path) -> np.ndarray:
    if len(path) == 0:
        return np.zeros((0, 2))
    return np.array([(p.x, p.z) for p in path])


def plot_paths(state: NavigationSnapshot, out_path: Path | str):
    """Render both trajectories to ``out_path`` and return the figure."""
    dr = _xz(state.dr_path)
    slam = _xz(state.slam_path)

    fig, ax = plt.subplots(figsize=(6, 6))
    if len(dr):
        ax.plot(dr[:, 0], dr[:, 1], "-", color="tab:red", label=f"DR ({state.step_count} steps)")
    if len(slam):
        ax.plot(slam[:, 0], slam[:, 1], "-", color="tab:blue", label="SLAM")
    if state.obstacle_points:
        obs = np.array([(p.x, p.z) for p in state.obstacle_points])
        ax.scatter(obs[:, 0], obs[:, 1], s=4, color="0.5", label="obstacles")
    ax.plot([0.0], [0.0], "k+", markersize=10)
    ax.set_xlabel("x (m)")
    ax.set_ylabel("z (m)")
    ax.set_aspect("equal", adjustable="datalim")
    ax.grid(True, linestyle=":")
    ax.set_title(f"Drift {state.drift_error:.2f} m")
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc="upper right")
    fig.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    return fig


__all__ = ["plot_paths"]
