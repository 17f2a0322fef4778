import random

import pytest

from ant_tracks.core.collection import TrajectoryCollection
from ant_tracks.core.trajectory import Trajectory


def _trajectory(trajectory_id):
    return Trajectory(0, 0, trajectory_id)


class TestTrajectoryCollection:
    """Test suite for identifier-sorted lookup."""

    def test_find_by_id_after_random_inserts_and_removes(self):
        rng = random.Random(7)
        collection = TrajectoryCollection()
        present = set()

        for _ in range(200):
            tid = rng.randint(0, 60)
            if tid in present:
                removed = collection.remove(tid)
                assert removed is not None and removed.id == tid
                present.discard(tid)
            else:
                collection.insert(_trajectory(tid))
                present.add(tid)

        assert collection.ids() == sorted(present)
        for tid in range(-5, 70):
            found = collection.find_by_id(tid)
            if tid in present:
                assert found is not None and found.id == tid
            else:
                assert found is None

    def test_first_and_past_end_lookups(self):
        collection = TrajectoryCollection([_trajectory(i) for i in (5, 1, 3)])
        assert collection.find_by_id(1).id == 1
        assert collection.find_by_id(5).id == 5
        assert collection.find_by_id(0) is None
        assert collection.find_by_id(6) is None

    def test_empty_collection(self):
        collection = TrajectoryCollection()
        assert collection.find_by_id(0) is None
        assert len(collection) == 0
        assert collection.remove(3) is None

    def test_duplicate_insert_rejected(self):
        collection = TrajectoryCollection([_trajectory(2)])
        with pytest.raises(ValueError):
            collection.insert(_trajectory(2))
        with pytest.raises(ValueError):
            collection.replace_all([_trajectory(1), _trajectory(1)])

    def test_replace_all_sorts(self):
        collection = TrajectoryCollection([_trajectory(9)])
        collection.replace_all([_trajectory(4), _trajectory(2), _trajectory(8)])
        assert [t.id for t in collection] == [2, 4, 8]
        assert 9 not in collection
        assert 4 in collection

    def test_remove_by_trajectory(self):
        t = _trajectory(3)
        collection = TrajectoryCollection([t, _trajectory(1)])
        assert collection.remove(t) is t
        assert collection.ids() == [1]
