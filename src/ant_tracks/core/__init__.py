"""Trajectory model, reconciliation and interaction linking."""

from .points import Activity, InteractionInfo, InteractionType, Point, PointKind
from .trajectory import MoveType, Trajectory, TrajectoryFrameError
from .collection import TrajectoryCollection
from .linking import InteractionLinks, link_interactions
from .reconcile import ReconcileReport, read_snapshot, reconcile, refresh_collection
from .datastore import TrajectoryDataStore

__all__ = [
    "Activity",
    "InteractionInfo",
    "InteractionLinks",
    "InteractionType",
    "MoveType",
    "Point",
    "PointKind",
    "ReconcileReport",
    "Trajectory",
    "TrajectoryCollection",
    "TrajectoryDataStore",
    "TrajectoryFrameError",
    "link_interactions",
    "read_snapshot",
    "reconcile",
    "refresh_collection",
]
