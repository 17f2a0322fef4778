"""
Live trajectory store backed by a persisted source.

``TrajectoryDataStore`` owns the in-memory trajectory collection and keeps it
in step with a backend. Views subscribe to ``data_changed`` rather than
polling; the signal fires once per completed refresh or local edit.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, Signal

from ..data.database import TrajectoryDatabase
from ..data.records import TrajectoryBackend
from .collection import TrajectoryCollection
from .linking import InteractionLinks, link_interactions
from .points import Point
from .reconcile import ReconcileReport, refresh_collection
from .trajectory import Trajectory, TrajectoryFrameError

logger = logging.getLogger(__name__)


class TrajectoryDataStore(QObject):
    """
    In-memory cache of all trajectories in a backend.

    Not thread safe: refreshes and edits must be issued from one thread.
    """

    data_changed = Signal()

    def __init__(self, backend: TrajectoryBackend, link: bool = True, parent=None):
        super().__init__(parent)
        self.backend = backend
        self.link_enabled = link
        self.trajectories = TrajectoryCollection()
        self.links = InteractionLinks()
        self.last_report: Optional[ReconcileReport] = None

    @classmethod
    def open(cls, db_path: Path, link: bool = True) -> "TrajectoryDataStore":
        """Open (creating if needed) a SQLite database and load its trajectories."""
        store = cls(TrajectoryDatabase(Path(db_path)), link=link)
        store.refresh()
        return store

    def refresh(self) -> ReconcileReport:
        """
        Reload every trajectory from the backend and merge it into memory.

        Raises TrajectoryStoreError if the backend cannot be read; the
        in-memory trajectories are unchanged in that case.
        """
        report = refresh_collection(self.trajectories, self.backend)
        self._relink()
        self.last_report = report
        self.data_changed.emit()
        return report

    def _relink(self) -> None:
        pruned = self.links.prune(self.trajectories)
        if pruned:
            logger.debug(f"Dropped {pruned} stale interaction links")
        if self.link_enabled:
            link_interactions(self.trajectories, self.links)

    def find_by_id(self, trajectory_id: int) -> Optional[Trajectory]:
        return self.trajectories.find_by_id(trajectory_id)

    def counterpart(self, trajectory_id: int, frame: int) -> Optional[Point]:
        """Return the interaction point linked to the one at (trajectory_id, frame)."""
        key = self.links.counterpart((trajectory_id, frame))
        if key is None:
            return None
        trajectory = self.trajectories.find_by_id(key[0])
        if trajectory is None:
            return None
        try:
            return trajectory.get(key[1])
        except TrajectoryFrameError:
            return None

    def persist_trajectory(self, trajectory: Trajectory) -> None:
        """Write ``trajectory`` and all its points, adding it to memory if new."""
        self.backend.persist_trajectory(trajectory)
        if self.trajectories.find_by_id(trajectory.id) is not trajectory:
            self.trajectories.remove(trajectory.id)
            self.trajectories.insert(trajectory)
        self._relink()
        self.data_changed.emit()

    def persist_point(self, point: Point, trajectory_id: int) -> None:
        self.backend.persist_point(point, trajectory_id)

    def delete_point(self, trajectory_id: int, frame: int) -> None:
        """Delete a point from the backend and clear its slot in memory."""
        self.backend.delete_point(trajectory_id, frame)
        trajectory = self.trajectories.find_by_id(trajectory_id)
        if trajectory is not None and trajectory.first_frame <= frame <= trajectory.last_frame:
            trajectory.set(frame, None)
        self.links.unlink((trajectory_id, frame))
        self.data_changed.emit()

    def delete_trajectory(self, trajectory: Trajectory) -> None:
        """Delete a trajectory from the backend and from memory."""
        self.backend.delete_trajectory(trajectory.id)
        self.trajectories.remove(trajectory.id)
        self.links.prune(self.trajectories)
        self.data_changed.emit()

    def close(self) -> None:
        self.backend.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
