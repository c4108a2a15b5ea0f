# sim/__init__.py

from .walker import SimImuFeed, SimulatedPoseSource, WalkerProfile, WalkerSimulator

__all__ = [
    'WalkerProfile',
    'WalkerSimulator',
    'SimulatedPoseSource',
    'SimImuFeed',
]
