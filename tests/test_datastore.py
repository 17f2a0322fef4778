"""
Tests for the TrajectoryDataStore facade.

Tests cover:
- Opening a SQLite database and linking interactions on load
- One change notification per refresh
- Re-linking after promotions, demotions and deletions
- Write-through edits and failure propagation
"""

from pathlib import Path

import pytest

from ant_tracks.core.datastore import TrajectoryDataStore
from ant_tracks.core.points import InteractionInfo, InteractionType, Point, PointKind
from ant_tracks.core.trajectory import Trajectory
from ant_tracks.data.database import TrajectoryDatabase
from ant_tracks.data.records import TrajectoryStoreError
from tests.helpers.fake_backend import FakeBackend


def _seed(path: Path) -> TrajectoryDatabase:
    db = TrajectoryDatabase(path)
    a = Trajectory(0, 0, 1)
    a.set(0, Point(0, 0))
    a.set(3, Point.interaction_point(5, 5, info=InteractionInfo(InteractionType.PERFORMED, 2)))
    b = Trajectory(2, 2, 2)
    b.set(2, Point(9, 9))
    b.set(3, Point.interaction_point(6, 6, info=InteractionInfo(InteractionType.RECEIVED, 1)))
    db.persist_trajectory(a)
    db.persist_trajectory(b)
    return db


class TestOpen:
    def test_open_loads_and_links(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore.open(db_path)

        assert store.trajectories.ids() == [1, 2]
        assert store.counterpart(1, 3) is store.find_by_id(2).get(3)
        assert store.counterpart(2, 3) is store.find_by_id(1).get(3)
        assert store.counterpart(1, 0) is None
        assert sorted(store.last_report.created) == [1, 2]

    def test_open_without_linking(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore.open(db_path, link=False)
        assert len(store.links) == 0

    def test_open_new_database_is_empty(self, db_path):
        store = TrajectoryDataStore.open(db_path)
        assert len(store.trajectories) == 0


class TestRefresh:
    def test_single_notification_per_refresh(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore(TrajectoryDatabase(db_path))
        calls = []
        store.data_changed.connect(lambda: calls.append(1))

        store.refresh()
        assert calls == [1]
        store.refresh()
        assert calls == [1, 1]

    def test_no_notification_on_failed_refresh(self):
        backend = FakeBackend()
        backend.add_trajectory(1)
        backend.add_point(1, 0, 1, 1)
        store = TrajectoryDataStore(backend)
        store.refresh()
        calls = []
        store.data_changed.connect(lambda: calls.append(1))

        backend.fail_on_points_of = 1
        with pytest.raises(TrajectoryStoreError):
            store.refresh()
        assert calls == []
        assert store.trajectories.ids() == [1]

    def test_demotion_unlinks_and_promotion_relinks(self, db_path):
        db = _seed(db_path)
        store = TrajectoryDataStore(db)
        store.refresh()
        assert len(store.links) == 1

        point = store.find_by_id(2).get(3).copy()
        point.demote()
        db.persist_point(point, 2)
        store.refresh()
        assert store.find_by_id(2).get(3).kind is PointKind.PLAIN
        assert store.counterpart(1, 3) is None

        point.promote(InteractionInfo(InteractionType.TWO_WAY, 1))
        db.persist_point(point, 2)
        store.refresh()
        assert store.counterpart(1, 3) is store.find_by_id(2).get(3)

    def test_links_survive_repeated_refresh(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore.open(db_path)
        before = list(store.links.pairs())
        store.refresh()
        assert list(store.links.pairs()) == before


class TestEdits:
    def test_persist_new_trajectory_adds_to_memory(self, db_path):
        store = TrajectoryDataStore.open(db_path)
        calls = []
        store.data_changed.connect(lambda: calls.append(1))

        trajectory = Trajectory(4, 4, 8)
        trajectory.set(4, Point(1, 2))
        store.persist_trajectory(trajectory)

        assert store.find_by_id(8) is trajectory
        assert calls == [1]
        store.refresh()
        assert store.find_by_id(8) is trajectory

    def test_replacing_trajectory_drops_stale_link(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore.open(db_path)
        assert store.counterpart(1, 3) is store.find_by_id(2).get(3)

        replacement = Trajectory(3, 3, 2)
        replacement.set(3, Point(6, 6))
        store.persist_trajectory(replacement)

        assert store.find_by_id(2) is replacement
        assert store.counterpart(1, 3) is None
        assert len(store.links) == 0

    def test_replacing_trajectory_links_new_interaction(self, db_path):
        db = TrajectoryDatabase(db_path)
        a = Trajectory(3, 3, 1)
        a.set(3, Point.interaction_point(5, 5, info=InteractionInfo(InteractionType.PERFORMED, 2)))
        b = Trajectory(3, 3, 2)
        b.set(3, Point(6, 6))
        db.persist_trajectory(a)
        db.persist_trajectory(b)
        store = TrajectoryDataStore.open(db_path)
        assert store.counterpart(1, 3) is None

        replacement = Trajectory(3, 3, 2)
        replacement.set(
            3, Point.interaction_point(6, 6, info=InteractionInfo(InteractionType.RECEIVED, 1))
        )
        store.persist_trajectory(replacement)

        linked = store.counterpart(1, 3)
        assert linked is replacement.get(3)
        assert linked.is_interaction

    def test_delete_point(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore.open(db_path)

        store.delete_point(2, 3)
        assert store.find_by_id(2).get(3) is None
        assert store.counterpart(1, 3) is None
        store.refresh()
        assert store.find_by_id(2).get(3) is None

    def test_delete_trajectory(self, db_path):
        _seed(db_path)
        store = TrajectoryDataStore.open(db_path)

        store.delete_trajectory(store.find_by_id(1))
        assert store.trajectories.ids() == [2]
        assert len(store.links) == 0
        store.refresh()
        assert store.trajectories.ids() == [2]

    def test_write_failure_propagates(self):
        class FailingBackend(FakeBackend):
            def persist_point(self, point, trajectory_id):
                raise TrajectoryStoreError("disk full")

        store = TrajectoryDataStore(FailingBackend())
        with pytest.raises(TrajectoryStoreError):
            store.persist_point(Point(0, 0), 1)

    def test_context_manager_closes_backend(self):
        backend = FakeBackend()
        with TrajectoryDataStore(backend):
            pass
        assert backend.closed
