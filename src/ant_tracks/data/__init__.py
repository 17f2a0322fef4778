"""Persistence of trajectories and points."""

from .records import (
    PointRecord,
    TrajectoryBackend,
    TrajectoryRecord,
    TrajectorySnapshot,
    TrajectoryStoreError,
)
from .database import TrajectoryDatabase

__all__ = [
    "PointRecord",
    "TrajectoryBackend",
    "TrajectoryDatabase",
    "TrajectoryRecord",
    "TrajectorySnapshot",
    "TrajectoryStoreError",
]
