"""
Frame-indexed trajectory container.

A trajectory covers a contiguous frame range ``[first_frame, last_frame]``
and stores one optional point per frame. Slot ``n`` of the backing list holds
the point for frame ``first_frame + n``; empty slots mean no observation was
recorded for that frame.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .points import Point

logger = logging.getLogger(__name__)


class MoveType(Enum):
    """Movement classification of a whole trajectory."""

    UNKNOWN = "Unknown"
    FORAGING = "Foraging"
    RETURNING = "Returning"
    PATROLLING = "Patrolling"
    STATIONARY = "Stationary"

    @classmethod
    def safe_value_of(cls, text: Optional[str]) -> "MoveType":
        """Parse persisted text, falling back to UNKNOWN."""
        try:
            return cls(text)
        except ValueError:
            logger.warning(f"Unrecognized move type {text!r}, using Unknown")
            return cls.UNKNOWN


class TrajectoryFrameError(IndexError):
    """Raised when a frame outside a trajectory's range is requested."""


class Trajectory:
    """
    Ordered, growable sequence of optional points for one ant.

    Iteration yields only the recorded points, in increasing frame order.
    """

    def __init__(
        self,
        first_frame: int,
        last_frame: int,
        trajectory_id: int,
        move_type: MoveType = MoveType.UNKNOWN,
    ):
        if first_frame > last_frame:
            raise ValueError(
                f"Trajectory {trajectory_id}: first frame {first_frame} "
                f"is after last frame {last_frame}"
            )
        self.id = trajectory_id
        self.move_type = move_type
        self._first_frame = first_frame
        self._last_frame = last_frame
        self._points: List[Optional[Point]] = []
        self._ensure_capacity(last_frame)

    @property
    def first_frame(self) -> int:
        return self._first_frame

    @property
    def last_frame(self) -> int:
        return self._last_frame

    @property
    def frame_range(self) -> Tuple[int, int]:
        return self._first_frame, self._last_frame

    def get(self, frame: int) -> Optional[Point]:
        """Return the point at ``frame``, or None if that slot is empty."""
        self._validate_frame(frame)
        return self._points[frame - self._first_frame]

    def set(self, frame: int, point: Optional[Point]) -> None:
        """
        Store ``point`` at ``frame``, extending the range past the last frame
        if needed. Passing None clears the slot.
        """
        if frame < self._first_frame:
            raise TrajectoryFrameError(
                f"Cannot set frame {frame}: trajectory {self.id} "
                f"does not begin until frame {self._first_frame}"
            )
        if frame > self._last_frame:
            self._ensure_capacity(frame)
            self._last_frame = frame
        if point is not None:
            point.frame = frame
        self._points[frame - self._first_frame] = point

    def append(self, other: "Trajectory") -> None:
        """
        Merge ``other`` into this trajectory.

        Frames where the two overlap take ``other``'s point; frames past this
        trajectory's end are copied over and the last frame becomes
        ``other.last_frame``. ``other`` is not modified. Frames between the two
        ranges, if they do not touch, are left empty.
        """
        if other.first_frame < self._first_frame:
            raise TrajectoryFrameError(
                f"Cannot append trajectory {other.id} starting at frame "
                f"{other.first_frame} to trajectory {self.id} starting at "
                f"frame {self._first_frame}"
            )
        if other.first_frame <= self._last_frame:
            for frame in range(
                other.first_frame, min(self._last_frame, other.last_frame) + 1
            ):
                self._points[frame - self._first_frame] = other.get(frame)

        self._ensure_capacity(other.last_frame)
        for frame in range(max(self._last_frame + 1, other.first_frame), other.last_frame + 1):
            self._points[frame - self._first_frame] = other.get(frame)
        self._last_frame = max(self._last_frame, other.last_frame)

    def items(self) -> Iterator[Tuple[int, Point]]:
        """Yield ``(frame, point)`` for every recorded point."""
        for offset, point in enumerate(self._points):
            if point is not None:
                yield self._first_frame + offset, point

    def to_array(self) -> np.ndarray:
        """Return recorded points as an (n, 3) int array of frame, x, y."""
        rows = [(frame, point.x, point.y) for frame, point in self.items()]
        if not rows:
            return np.zeros((0, 3), dtype=np.int64)
        return np.asarray(rows, dtype=np.int64)

    def path_length(self) -> float:
        """Total distance between consecutive recorded points, in pixels."""
        coords = self.to_array()[:, 1:]
        if len(coords) < 2:
            return 0.0
        return float(np.linalg.norm(np.diff(coords, axis=0), axis=1).sum())

    def __iter__(self) -> Iterator[Point]:
        return (point for point in self._points if point is not None)

    def __len__(self) -> int:
        return sum(1 for point in self._points if point is not None)

    def __repr__(self) -> str:
        return (
            f"Trajectory(id={self.id}, frames={self._first_frame}-{self._last_frame}, "
            f"move_type={self.move_type.value}, points={len(self)})"
        )

    def _ensure_capacity(self, frame: int) -> None:
        needed = frame - self._first_frame + 1
        if needed > len(self._points):
            self._points.extend([None] * (needed - len(self._points)))

    def _validate_frame(self, frame: int) -> None:
        if frame < self._first_frame:
            raise TrajectoryFrameError(
                f"Requested a trajectory point for frame {frame}, but trajectory "
                f"{self.id} does not begin until frame {self._first_frame}"
            )
        if frame > self._last_frame:
            raise TrajectoryFrameError(
                f"Requested a trajectory point for frame {frame}, but trajectory "
                f"{self.id} ends at frame {self._last_frame}"
            )
