"""
Identifier-sorted collection of trajectories.
"""

from __future__ import annotations

import bisect
from typing import Iterable, Iterator, List, Optional, Union

from .trajectory import Trajectory


class TrajectoryCollection:
    """
    Trajectories kept sorted by identifier so lookups can use binary search.

    Identifiers are unique. Callers must not change a trajectory's ``id``
    while it is held in a collection.
    """

    def __init__(self, trajectories: Iterable[Trajectory] = ()):
        self._trajectories: List[Trajectory] = []
        self._ids: List[int] = []
        self.replace_all(trajectories)

    def _index_of(self, trajectory_id: int) -> Optional[int]:
        index = bisect.bisect_left(self._ids, trajectory_id)
        if index < len(self._ids) and self._ids[index] == trajectory_id:
            return index
        return None

    def find_by_id(self, trajectory_id: int) -> Optional[Trajectory]:
        index = self._index_of(trajectory_id)
        return self._trajectories[index] if index is not None else None

    def insert(self, trajectory: Trajectory) -> None:
        index = bisect.bisect_left(self._ids, trajectory.id)
        if index < len(self._ids) and self._ids[index] == trajectory.id:
            raise ValueError(f"Trajectory {trajectory.id} is already in the collection")
        self._ids.insert(index, trajectory.id)
        self._trajectories.insert(index, trajectory)

    def remove(self, trajectory: Union[Trajectory, int]) -> Optional[Trajectory]:
        """Remove a trajectory (or the one with the given id) and return it."""
        trajectory_id = trajectory.id if isinstance(trajectory, Trajectory) else trajectory
        index = self._index_of(trajectory_id)
        if index is None:
            return None
        del self._ids[index]
        return self._trajectories.pop(index)

    def replace_all(self, trajectories: Iterable[Trajectory]) -> None:
        ordered = sorted(trajectories, key=lambda t: t.id)
        ids = [t.id for t in ordered]
        for previous, current in zip(ids, ids[1:]):
            if previous == current:
                raise ValueError(f"Duplicate trajectory id {current}")
        self._trajectories = ordered
        self._ids = ids

    def ids(self) -> List[int]:
        return list(self._ids)

    def clear(self) -> None:
        self._trajectories.clear()
        self._ids.clear()

    def __iter__(self) -> Iterator[Trajectory]:
        return iter(list(self._trajectories))

    def __len__(self) -> int:
        return len(self._trajectories)

    def __contains__(self, trajectory_id: object) -> bool:
        if isinstance(trajectory_id, Trajectory):
            trajectory_id = trajectory_id.id
        if not isinstance(trajectory_id, int):
            return False
        return self._index_of(trajectory_id) is not None
