import sys
import os

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sequencer.core.data_types import SequencePoint


def test_from_json_reads_all_fields():
    p = SequencePoint()
    assert p.from_json({"point": [1, 2.5, -3], "duration": 10, "timeToTarget": 20})
    assert p == SequencePoint([1.0, 2.5, -3.0], 10, 20)
    assert all(isinstance(c, float) for c in p.point)


def test_to_json_uses_file_keys():
    p = SequencePoint([0.5, 1.0], 7, 9)
    assert p.to_json() == {"point": [0.5, 1.0], "duration": 7, "timeToTarget": 9}

    q = SequencePoint()
    assert q.from_json(p.to_json())
    assert q == p


def test_integral_floats_accepted_for_timing():
    p = SequencePoint()
    assert p.from_json({"point": [], "duration": 100.0, "timeToTarget": 3})
    assert p.duration == 100
    assert isinstance(p.duration, int)


def test_from_json_rejects_bad_fields():
    bad = [
        {"duration": 1, "timeToTarget": 1},
        {"point": [1, 2], "timeToTarget": 1},
        {"point": [1, 2], "duration": 1},
        {"point": "1,2", "duration": 1, "timeToTarget": 1},
        {"point": [1, "2"], "duration": 1, "timeToTarget": 1},
        {"point": [1, True], "duration": 1, "timeToTarget": 1},
        {"point": [1, 2], "duration": 1.5, "timeToTarget": 1},
        {"point": [1, 2], "duration": True, "timeToTarget": 1},
        {"point": [1, 2], "duration": 1, "timeToTarget": None},
    ]
    for obj in bad:
        assert not SequencePoint().from_json(obj), obj
    assert not SequencePoint().from_json([1, 2, 3])


def test_from_json_rejects_non_finite_and_huge_numbers():
    bad = [
        {"point": [float("nan"), 1, 1], "duration": 1, "timeToTarget": 1},
        {"point": [float("inf"), 1, 1], "duration": 1, "timeToTarget": 1},
        {"point": [10 ** 400, 1, 1], "duration": 1, "timeToTarget": 1},
        {"point": [1, 1, 1], "duration": float("nan"), "timeToTarget": 1},
        {"point": [1, 1, 1], "duration": 1, "timeToTarget": float("-inf")},
    ]
    for obj in bad:
        assert not SequencePoint().from_json(obj), obj


def test_equality_and_copy():
    a = SequencePoint([1.0, 2.0], 3, 4)
    b = a.copy()
    assert a == b
    b.point[0] = 9.0
    assert a != b
    assert a.point[0] == 1.0
    assert SequencePoint([1.0], 3, 4) != SequencePoint([1.0], 3, 5)
