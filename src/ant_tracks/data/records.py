"""
Persisted record types and the backend contract used by the data store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..core.points import Point
from ..core.trajectory import Trajectory


class TrajectoryStoreError(RuntimeError):
    """A read or write against the persisted trajectory source failed."""


@dataclass(frozen=True)
class TrajectoryRecord:
    trajectory_id: int
    move_type: Optional[str]  # raw text, parsed with MoveType.safe_value_of


@dataclass(frozen=True)
class PointRecord:
    """One row of the points table. Interaction columns are None unless flagged."""

    frame: int
    x: int
    y: int
    activity: Optional[str]
    is_interaction: bool = False
    interaction_type: Optional[str] = None
    met_trajectory_id: Optional[int] = None
    met_activity: Optional[str] = None


class TrajectoryBackend(Protocol):
    """Persistence collaborator. Every call is blocking and may raise TrajectoryStoreError."""

    def load_all_trajectories(self) -> List[TrajectoryRecord]:
        """Trajectory records ordered by identifier."""
        ...

    def load_points(self, trajectory_id: int) -> List[PointRecord]:
        """Point records of one trajectory ordered by frame."""
        ...

    def persist_trajectory(self, trajectory: Trajectory) -> None: ...

    def persist_point(self, point: Point, trajectory_id: int) -> None: ...

    def delete_point(self, trajectory_id: int, frame: int) -> None: ...

    def delete_trajectory(self, trajectory_id: int) -> None: ...

    def close(self) -> None: ...


@dataclass(frozen=True)
class TrajectorySnapshot:
    """A trajectory record together with all of its point records."""

    record: TrajectoryRecord
    points: Sequence[PointRecord]

    @property
    def is_orphan(self) -> bool:
        return len(self.points) == 0
