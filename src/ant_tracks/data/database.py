import logging
import sqlite3
from pathlib import Path
from typing import List

from ..core.points import Point
from ..core.trajectory import Trajectory
from .records import PointRecord, TrajectoryRecord, TrajectoryStoreError

logger = logging.getLogger(__name__)


class TrajectoryDatabase:
    """SQLite storage for trajectories and their points."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self):
        """Create tables if not exist."""
        try:
            with self._connect() as conn:
                c = conn.cursor()

                c.execute("""
                    CREATE TABLE IF NOT EXISTS trajectories (
                        trajectory_id INTEGER PRIMARY KEY,
                        move_type TEXT NOT NULL DEFAULT 'Unknown'
                    )
                """)

                # One row per (trajectory, frame); interaction columns are
                # NULL unless is_interaction is set
                c.execute("""
                    CREATE TABLE IF NOT EXISTS points (
                        point_id INTEGER PRIMARY KEY AUTOINCREMENT,
                        trajectory_id INTEGER NOT NULL,
                        frame_number INTEGER NOT NULL,
                        frame_x INTEGER NOT NULL,
                        frame_y INTEGER NOT NULL,
                        activity TEXT NOT NULL DEFAULT 'NotCarrying',
                        is_interaction SMALLINT NOT NULL DEFAULT 0,
                        interaction_met_trajectory_id INTEGER,
                        interaction_type TEXT,
                        interaction_met_ant_activity TEXT,
                        UNIQUE (trajectory_id, frame_number)
                    )
                """)
                conn.commit()
        except sqlite3.Error as ex:
            raise TrajectoryStoreError(
                f"Could not open trajectory database {self.db_path}"
            ) from ex

    def load_all_trajectories(self) -> List[TrajectoryRecord]:
        try:
            with self._connect() as conn:
                c = conn.cursor()
                c.execute(
                    "SELECT trajectory_id, move_type FROM trajectories ORDER BY trajectory_id"
                )
                return [TrajectoryRecord(int(r[0]), r[1]) for r in c.fetchall()]
        except sqlite3.Error as ex:
            raise TrajectoryStoreError("Failed to load trajectories") from ex

    def load_points(self, trajectory_id: int) -> List[PointRecord]:
        try:
            with self._connect() as conn:
                c = conn.cursor()
                c.execute(
                    """
                    SELECT frame_number, frame_x, frame_y, activity, is_interaction,
                           interaction_type, interaction_met_trajectory_id,
                           interaction_met_ant_activity
                    FROM points
                    WHERE trajectory_id = ?
                    ORDER BY frame_number
                    """,
                    (trajectory_id,),
                )
                rows = c.fetchall()
        except sqlite3.Error as ex:
            raise TrajectoryStoreError(
                f"Failed to load points of trajectory {trajectory_id}"
            ) from ex

        records = []
        for (
            frame,
            x,
            y,
            activity,
            is_interaction,
            interaction_type,
            met_id,
            met_activity,
        ) in rows:
            records.append(
                PointRecord(
                    frame=int(frame),
                    x=int(x),
                    y=int(y),
                    activity=activity,
                    is_interaction=bool(is_interaction),
                    interaction_type=interaction_type,
                    met_trajectory_id=int(met_id) if met_id is not None else None,
                    met_activity=met_activity,
                )
            )
        return records

    def count_points(self) -> int:
        try:
            with self._connect() as conn:
                c = conn.cursor()
                c.execute("SELECT COUNT(*) FROM points")
                res = c.fetchone()
                return res[0] if res else 0
        except sqlite3.Error as ex:
            raise TrajectoryStoreError("Failed to count points") from ex

    def persist_trajectory(self, trajectory: Trajectory) -> None:
        """Create or update the trajectory row and every one of its points."""
        try:
            with self._connect() as conn:
                c = conn.cursor()
                c.execute(
                    """
                    INSERT INTO trajectories (trajectory_id, move_type) VALUES (?, ?)
                    ON CONFLICT (trajectory_id) DO UPDATE SET move_type = excluded.move_type
                    """,
                    (trajectory.id, trajectory.move_type.value),
                )
                c.executemany(
                    self._UPSERT_POINT,
                    [self._point_row(point, trajectory.id) for point in trajectory],
                )
                conn.commit()
        except sqlite3.Error as ex:
            raise TrajectoryStoreError(
                f"Failed to persist trajectory {trajectory.id}"
            ) from ex

    def persist_point(self, point: Point, trajectory_id: int) -> None:
        try:
            with self._connect() as conn:
                conn.execute(self._UPSERT_POINT, self._point_row(point, trajectory_id))
                conn.commit()
        except sqlite3.Error as ex:
            raise TrajectoryStoreError(
                f"Failed to persist point at frame {point.frame} "
                f"of trajectory {trajectory_id}"
            ) from ex

    def delete_point(self, trajectory_id: int, frame: int) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    "DELETE FROM points WHERE trajectory_id = ? AND frame_number = ?",
                    (trajectory_id, frame),
                )
                conn.commit()
        except sqlite3.Error as ex:
            raise TrajectoryStoreError(
                f"Failed to delete point at frame {frame} of trajectory {trajectory_id}"
            ) from ex

    def delete_trajectory(self, trajectory_id: int) -> None:
        """Delete a trajectory and all of its points."""
        try:
            with self._connect() as conn:
                c = conn.cursor()
                c.execute("DELETE FROM points WHERE trajectory_id = ?", (trajectory_id,))
                c.execute(
                    "DELETE FROM trajectories WHERE trajectory_id = ?", (trajectory_id,)
                )
                conn.commit()
        except sqlite3.Error as ex:
            raise TrajectoryStoreError(
                f"Failed to delete trajectory {trajectory_id}"
            ) from ex
        logger.debug(f"Deleted trajectory {trajectory_id} from {self.db_path}")

    def close(self):
        pass

    _UPSERT_POINT = """
        INSERT INTO points
        (trajectory_id, frame_number, frame_x, frame_y, activity, is_interaction,
         interaction_met_trajectory_id, interaction_type, interaction_met_ant_activity)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT (trajectory_id, frame_number) DO UPDATE SET
            frame_x = excluded.frame_x,
            frame_y = excluded.frame_y,
            activity = excluded.activity,
            is_interaction = excluded.is_interaction,
            interaction_met_trajectory_id = excluded.interaction_met_trajectory_id,
            interaction_type = excluded.interaction_type,
            interaction_met_ant_activity = excluded.interaction_met_ant_activity
    """

    @staticmethod
    def _point_row(point: Point, trajectory_id: int) -> tuple:
        if point.is_interaction:
            info = point.interaction
            return (
                trajectory_id,
                point.frame,
                point.x,
                point.y,
                point.activity.value,
                1,
                info.met_trajectory_id,
                info.type.value,
                info.met_activity.value,
            )
        return (
            trajectory_id,
            point.frame,
            point.x,
            point.y,
            point.activity.value,
            0,
            None,
            None,
            None,
        )
