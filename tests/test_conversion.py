import numpy as np
import pytest

from AdvLinalg import FeatureUnavailable, MovedValueError, vector
from AdvLinalg.vectors import MutVector, Vector


def test_array_is_taken_over_without_copy():
    arr = np.arange(3)
    v = Vector(arr)
    assert np.shares_memory(v._read(), arr)
    assert arr.flags.writeable

    m = MutVector(arr)
    m[0] = 10
    assert arr[0] == 10


def test_read_only_array_is_copied_for_mutable_vector():
    arr = np.arange(3)
    arr.flags.writeable = False
    m = MutVector(arr)
    m[0] = 5
    assert arr[0] == 0


def test_owned_vectors_are_moved():
    v = Vector([1, 2, 3])
    data = v._region.buffer.data
    w = Vector(v)
    assert np.shares_memory(w._read(), data)
    with pytest.raises(MovedValueError):
        v.tolist()

    m = MutVector(w)
    m[0] = 7
    assert m.tolist() == [7, 2, 3]
    back = Vector(m)
    assert back == vector(7, 2, 3)
    with pytest.raises(MovedValueError):
        m[0] = 1


def test_borrowed_views_are_copied():
    owner = MutVector([1, 2, 3])
    s = owner.slice(1, 3)
    v = Vector(s)
    assert v == vector(2, 3)
    assert not np.shares_memory(v._read(), owner._read())
    assert s.tolist() == [2, 3]
    assert s.to_vector() == v


def test_moves_only_removes_copies(moves_only):
    owner = Vector([1, 2, 3])
    with owner.slice() as s:
        with pytest.raises(FeatureUnavailable):
            MutVector(s)
        with pytest.raises(FeatureUnavailable):
            s.to_vector()
    assert MutVector(owner).tolist() == [1, 2, 3]


def test_copy_is_independent():
    m = MutVector([1, 2])
    c = m.copy()
    c[0] = 9
    assert m.tolist() == [1, 2]
    assert type(c) is MutVector
    assert type(Vector([1]).copy()) is Vector


def test_from_iterables():
    assert Vector(range(3)) == vector(0, 1, 2)
    assert Vector(x * 2 for x in range(3)) == vector(0, 2, 4)
    assert MutVector((1.0, 2.0)).dtype == np.float64
