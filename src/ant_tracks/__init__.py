"""
Ant Tracks

Frame-by-frame ant trajectories kept in sync with a SQLite record store.

Key Features:
- Frame-indexed trajectories with sparse points over a dense frame range
- Refresh that merges persisted changes into live trajectories
- Promotion and demotion of points to and from interaction points
- Symmetric linking of interaction points across trajectories
"""

__version__ = "1.0.0"

from .app.launcher import main, parse_arguments, setup_logging
from .config import TrackerConfig, load_config
from .core import Trajectory, TrajectoryCollection, TrajectoryDataStore

__all__ = [
    "TrackerConfig",
    "Trajectory",
    "TrajectoryCollection",
    "TrajectoryDataStore",
    "load_config",
    "main",
    "parse_arguments",
    "setup_logging",
]
