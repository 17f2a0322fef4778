"""
Reconciliation of the live trajectory collection with a persisted snapshot.

A refresh happens in two phases. ``read_snapshot`` pulls every trajectory
record and its points from the backend and purges orphaned trajectories
(records without points). ``reconcile`` then merges that snapshot into the
collection entirely in memory, so a failed read never leaves the collection
half-updated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..data.records import (
    PointRecord,
    TrajectoryBackend,
    TrajectorySnapshot,
    TrajectoryStoreError,
)
from .collection import TrajectoryCollection
from .points import Activity, InteractionInfo, InteractionType, Point, PointKind
from .trajectory import MoveType, Trajectory

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """Summary of what one reconciliation pass changed."""

    created: List[int] = field(default_factory=list)
    updated: List[int] = field(default_factory=list)
    dropped: List[int] = field(default_factory=list)
    orphaned: List[int] = field(default_factory=list)
    points_added: int = 0
    promoted: int = 0
    demoted: int = 0

    def summary(self) -> str:
        return (
            f"{len(self.created)} created, {len(self.updated)} updated, "
            f"{len(self.dropped)} dropped, {len(self.orphaned)} orphaned; "
            f"{self.points_added} points added, {self.promoted} promoted, "
            f"{self.demoted} demoted"
        )


def interaction_info_from_record(record: PointRecord) -> InteractionInfo:
    return InteractionInfo(
        type=InteractionType.safe_value_of(record.interaction_type),
        met_trajectory_id=record.met_trajectory_id,
        met_activity=Activity.safe_value_of(record.met_activity),
    )


def point_from_record(record: PointRecord) -> Point:
    if record.is_interaction:
        return Point.interaction_point(
            record.x,
            record.y,
            frame=record.frame,
            activity=Activity.safe_value_of(record.activity),
            info=interaction_info_from_record(record),
        )
    return Point(
        record.x,
        record.y,
        frame=record.frame,
        activity=Activity.safe_value_of(record.activity),
    )


def trajectory_from_snapshot(snapshot: TrajectorySnapshot) -> Trajectory:
    """Build a new trajectory from a non-orphan snapshot, points in frame order."""
    points = sorted(snapshot.points, key=lambda r: r.frame)
    first = points[0].frame
    trajectory = Trajectory(
        first,
        first,
        snapshot.record.trajectory_id,
        MoveType.safe_value_of(snapshot.record.move_type),
    )
    for record in points:
        trajectory.set(record.frame, point_from_record(record))
    return trajectory


def read_snapshot(backend: TrajectoryBackend) -> List[TrajectorySnapshot]:
    """
    Load every trajectory with its points, purging orphans from the backend.

    Orphans are deleted from the backend and kept in the result, flagged by
    ``is_orphan``, so that reconcile can leave them out. Any backend failure
    propagates as TrajectoryStoreError.
    """
    snapshots: List[TrajectorySnapshot] = []
    orphans: List[int] = []
    for record in backend.load_all_trajectories():
        snapshot = TrajectorySnapshot(record, backend.load_points(record.trajectory_id))
        if snapshot.is_orphan:
            orphans.append(record.trajectory_id)
        snapshots.append(snapshot)

    for trajectory_id in orphans:
        logger.warning(
            f"Trajectory {trajectory_id} has no points and will be deleted"
        )
        backend.delete_trajectory(trajectory_id)
    return snapshots


def _merge_point(trajectory: Trajectory, record: PointRecord, report: ReconcileReport) -> None:
    existing = None
    if trajectory.first_frame <= record.frame <= trajectory.last_frame:
        existing = trajectory.get(record.frame)

    if existing is None:
        trajectory.set(record.frame, point_from_record(record))
        report.points_added += 1
        return

    existing.x = record.x
    existing.y = record.y
    existing.activity = Activity.safe_value_of(record.activity)

    if existing.kind is PointKind.INTERACTION:
        if record.is_interaction:
            existing.interaction = interaction_info_from_record(record)
        else:
            existing.demote()
            report.demoted += 1
            logger.debug(
                f"Demoted point at frame {record.frame} of trajectory {trajectory.id}"
            )
    elif record.is_interaction:
        existing.promote(interaction_info_from_record(record))
        report.promoted += 1
        logger.debug(
            f"Promoted point at frame {record.frame} of trajectory {trajectory.id}"
        )


def _rebased(trajectory: Trajectory, first_frame: int) -> Trajectory:
    """Copy ``trajectory`` into a new one starting at an earlier frame."""
    rebased = Trajectory(first_frame, first_frame, trajectory.id, trajectory.move_type)
    rebased.append(trajectory)
    return rebased


def reconcile(
    collection: TrajectoryCollection, snapshots: Sequence[TrajectorySnapshot]
) -> ReconcileReport:
    """
    Merge ``snapshots`` into ``collection`` in place.

    Existing trajectories keep any live points the snapshot does not mention;
    their fields and mentioned points are overwritten from the snapshot. A
    trajectory is only replaced by a copy holding the same point objects when
    a persisted point predates its first frame. Unknown identifiers become new
    trajectories. Afterwards the collection holds exactly the snapshot's
    non-orphan trajectories.
    """
    report = ReconcileReport()
    retained: List[Trajectory] = []
    seen = set()

    for snapshot in snapshots:
        trajectory_id = snapshot.record.trajectory_id
        if snapshot.is_orphan:
            report.orphaned.append(trajectory_id)
            continue
        seen.add(trajectory_id)

        existing = collection.find_by_id(trajectory_id)
        if existing is None:
            retained.append(trajectory_from_snapshot(snapshot))
            report.created.append(trajectory_id)
            continue

        existing.move_type = MoveType.safe_value_of(snapshot.record.move_type)
        earliest = min(record.frame for record in snapshot.points)
        if earliest < existing.first_frame:
            existing = _rebased(existing, earliest)
        for record in sorted(snapshot.points, key=lambda r: r.frame):
            _merge_point(existing, record, report)
        retained.append(existing)
        report.updated.append(trajectory_id)

    report.dropped = [tid for tid in collection.ids() if tid not in seen]
    collection.replace_all(retained)
    logger.info(f"Reconciled trajectories: {report.summary()}")
    return report


def refresh_collection(
    collection: TrajectoryCollection, backend: TrajectoryBackend
) -> ReconcileReport:
    """Read a full snapshot from ``backend`` and merge it into ``collection``."""
    try:
        snapshots = read_snapshot(backend)
    except TrajectoryStoreError:
        logger.error("Refresh aborted, trajectory collection left unchanged")
        raise
    return reconcile(collection, snapshots)
