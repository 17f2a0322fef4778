"""
Linking of interaction points across trajectories.

Each interaction point names the trajectory of the ant it met; the meeting is
assumed to happen at the same frame in both trajectories. Linking resolves
those references into symmetric pairs. Pairs are stored as
``(trajectory_id, frame)`` keys rather than references between points, so
the link table is a derived view that can be pruned and rebuilt after every
refresh.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, Optional, Tuple

from .collection import TrajectoryCollection
from .points import Point
from .trajectory import TrajectoryFrameError

logger = logging.getLogger(__name__)

PointKey = Tuple[int, int]  # (trajectory_id, frame)


def _lookup(collection: TrajectoryCollection, key: PointKey) -> Optional[Point]:
    trajectory = collection.find_by_id(key[0])
    if trajectory is None:
        return None
    try:
        return trajectory.get(key[1])
    except TrajectoryFrameError:
        return None


class InteractionLinks:
    """Symmetric table of linked interaction points."""

    def __init__(self):
        self._pairs: Dict[PointKey, PointKey] = {}

    def link(self, a: PointKey, b: PointKey) -> None:
        self.unlink(a)
        self.unlink(b)
        self._pairs[a] = b
        self._pairs[b] = a

    def unlink(self, key: PointKey) -> None:
        other = self._pairs.pop(key, None)
        if other is not None:
            self._pairs.pop(other, None)

    def counterpart(self, key: PointKey) -> Optional[PointKey]:
        return self._pairs.get(key)

    def is_linked(self, key: PointKey) -> bool:
        return key in self._pairs

    def pairs(self) -> Iterator[Tuple[PointKey, PointKey]]:
        """Yield each linked pair once, lower key first."""
        for a, b in sorted(self._pairs.items()):
            if a < b:
                yield a, b

    def clear(self) -> None:
        self._pairs.clear()

    def prune(self, collection: TrajectoryCollection) -> int:
        """
        Drop pairs that no longer hold: an endpoint is gone or is no longer an
        interaction point, or neither side names the other's trajectory.
        Returns the number of pairs removed.
        """
        stale = []
        for a, b in self.pairs():
            point_a = _lookup(collection, a)
            point_b = _lookup(collection, b)
            if point_a is None or not point_a.is_interaction:
                stale.append(a)
            elif point_b is None or not point_b.is_interaction:
                stale.append(a)
            elif not (_names(point_a, b) or _names(point_b, a)):
                stale.append(a)
        for key in stale:
            self.unlink(key)
        return len(stale)

    def __len__(self) -> int:
        return len(self._pairs) // 2


def _names(point: Optional[Point], target: PointKey) -> bool:
    return (
        point is not None
        and point.is_interaction
        and point.interaction.met_trajectory_id == target[0]
    )


def _target_of(
    collection: TrajectoryCollection, key: PointKey, point: Point
) -> Optional[Tuple[PointKey, Point]]:
    target_id = point.interaction.met_trajectory_id
    if target_id is None:
        return None
    target_key = (target_id, key[1])
    if target_key == key:
        return None
    target = _lookup(collection, target_key)
    if target is None or not target.is_interaction:
        return None
    return target_key, target


def link_interactions(
    collection: TrajectoryCollection, links: InteractionLinks
) -> int:
    """
    Link every unlinked interaction point to its counterpart.

    The counterpart is the point at the same frame in the trajectory named by
    ``met_trajectory_id``; it must itself be an interaction point. Missing
    trajectories, empty or out-of-range frames and plain counterparts leave
    the point unlinked. Existing pairs are never changed.

    Pairs whose points name each other are linked first, in trajectory id
    then frame order. One-sided references are linked afterwards in the same
    order, and only to a counterpart that is still free. Returns the number
    of new pairs.
    """
    candidates = []
    for trajectory in collection:
        for frame, point in trajectory.items():
            key = (trajectory.id, frame)
            if not point.is_interaction or links.is_linked(key):
                continue
            found = _target_of(collection, key, point)
            if found is not None:
                target_key, target = found
                candidates.append((key, target_key, _names(target, key)))

    created = 0
    for mutual_pass in (True, False):
        for key, target_key, mutual in candidates:
            if mutual is not mutual_pass:
                continue
            if links.is_linked(key) or links.is_linked(target_key):
                continue
            links.link(key, target_key)
            created += 1

    if created:
        logger.info(f"Linked {created} interaction pairs ({len(links)} total)")
    return created
