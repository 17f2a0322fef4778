"""
Point records for ant trajectories.

A point is one frame's observation of an ant: its pixel position and what the
ant was carrying. Some points additionally describe an interaction with
another ant; those carry an ``InteractionInfo`` payload and are tagged
``PointKind.INTERACTION``. Promotion and demotion switch the tag in place so
the point keeps its position, frame and activity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Activity(Enum):
    """What an ant is carrying at a given frame."""

    NOT_CARRYING = "NotCarrying"
    CARRYING_FOOD = "CarryingFood"
    CARRYING_SOMETHING_ELSE = "CarryingSomethingElse"

    @classmethod
    def safe_value_of(cls, text: Optional[str]) -> "Activity":
        """Parse persisted text, falling back to NOT_CARRYING."""
        try:
            return cls(text)
        except ValueError:
            logger.warning(f"Unrecognized activity {text!r}, using NotCarrying")
            return cls.NOT_CARRYING


class InteractionType(Enum):
    """Which of the two ants took part in an interaction."""

    PERFORMED = "Performed"  # focal ant started it, met ant did not respond
    RECEIVED = "Received"  # met ant started it, focal ant did not respond
    TWO_WAY = "TwoWay"
    UNKNOWN = "Unknown"

    @property
    def label(self) -> str:
        return "2-Way" if self is InteractionType.TWO_WAY else self.value

    @classmethod
    def safe_value_of(cls, text: Optional[str]) -> "InteractionType":
        """Parse persisted text, falling back to UNKNOWN."""
        try:
            return cls(text)
        except ValueError:
            logger.warning(f"Unrecognized interaction type {text!r}, using Unknown")
            return cls.UNKNOWN


class PointKind(Enum):
    PLAIN = "plain"
    INTERACTION = "interaction"


@dataclass
class InteractionInfo:
    """Interaction payload attached to an interaction point."""

    type: InteractionType = InteractionType.UNKNOWN
    met_trajectory_id: Optional[int] = None
    met_activity: Activity = Activity.NOT_CARRYING


@dataclass(eq=False)
class Point:
    """
    A single observed position in a trajectory.

    Equality and hashing use ``(x, y)`` only, so two points at the same pixel
    compare equal regardless of frame, activity or kind.
    """

    x: int
    y: int
    frame: int = 0
    activity: Activity = Activity.NOT_CARRYING
    kind: PointKind = PointKind.PLAIN
    interaction: Optional[InteractionInfo] = field(default=None)

    def __post_init__(self):
        if self.kind is PointKind.INTERACTION and self.interaction is None:
            self.interaction = InteractionInfo()
        elif self.kind is PointKind.PLAIN:
            self.interaction = None

    @classmethod
    def interaction_point(
        cls,
        x: int,
        y: int,
        frame: int = 0,
        activity: Activity = Activity.NOT_CARRYING,
        info: Optional[InteractionInfo] = None,
    ) -> "Point":
        return cls(
            x,
            y,
            frame=frame,
            activity=activity,
            kind=PointKind.INTERACTION,
            interaction=info or InteractionInfo(),
        )

    @property
    def is_interaction(self) -> bool:
        return self.kind is PointKind.INTERACTION

    def promote(self, info: InteractionInfo) -> None:
        """Turn this point into an interaction point, keeping position and activity."""
        self.kind = PointKind.INTERACTION
        self.interaction = info

    def demote(self) -> None:
        """Drop the interaction payload, keeping position and activity."""
        self.kind = PointKind.PLAIN
        self.interaction = None

    def copy(self) -> "Point":
        info = None
        if self.interaction is not None:
            info = InteractionInfo(
                type=self.interaction.type,
                met_trajectory_id=self.interaction.met_trajectory_id,
                met_activity=self.interaction.met_activity,
            )
        return Point(
            self.x,
            self.y,
            frame=self.frame,
            activity=self.activity,
            kind=self.kind,
            interaction=info,
        )

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))
