import itertools

import pytest

from AdvLinalg import BorrowConflict, FeatureUnavailable, SizeMismatch, vector
from AdvLinalg.config import FeatureSet
from AdvLinalg.dispatch import Kind, Operator, Reuse, dispatch_table, select_reuse
from AdvLinalg.vectors import MutVector, MutVectorSlice, Vector, VectorSlice

from .conftest import make

PAIRS = list(itertools.product(Kind, Kind))


def test_scenario():
    lhs = vector(1, 2, 3)
    rhs = vector(3, 2, 1)
    assert lhs + rhs == vector(4, 4, 4)
    assert lhs * rhs == 10
    assert lhs - rhs == vector(-2, 0, 2)
    assert lhs.add(rhs) == vector(4, 4, 4)
    assert lhs.sub(rhs) == vector(-2, 0, 2)
    assert lhs.dot(rhs) == 10


def test_full_table():
    table = dispatch_table(FeatureSet.FULL)
    assert len(table) == 48
    assert table[Operator.ADD, Kind.OWNED, Kind.BORROWED] is Reuse.NONE
    assert table[Operator.SUB, Kind.MUT_BORROWED, Kind.OWNED] is Reuse.LEFT
    assert table[Operator.ADD, Kind.BORROWED, Kind.MUT_OWNED] is Reuse.RIGHT
    assert table[Operator.ADD, Kind.MUT_OWNED, Kind.MUT_BORROWED] is Reuse.LEFT


def test_reduced_table():
    table = dispatch_table(FeatureSet.NO_ALLOC)
    assert set(table) == {
        (op, Kind.MUT_BORROWED, rhs)
        for op in Operator
        for rhs in (Kind.BORROWED, Kind.MUT_BORROWED)
    }
    assert set(table.values()) == {Reuse.LEFT}


def test_select_reuse_prefers_left():
    assert select_reuse(Kind.MUT_OWNED, Kind.MUT_OWNED) is Reuse.LEFT
    assert select_reuse(Kind.OWNED, Kind.MUT_BORROWED) is Reuse.RIGHT
    assert select_reuse(Kind.BORROWED, Kind.OWNED) is Reuse.NONE


@pytest.mark.parametrize("lhs_kind, rhs_kind", PAIRS)
@pytest.mark.parametrize(
    "op, expected",
    [(Operator.ADD, [4, 4, 4]), (Operator.SUB, [-2, 0, 2])],
)
def test_elementwise_pairings(op, expected, lhs_kind, rhs_kind):
    lhs = make(lhs_kind, [1, 2, 3])
    rhs = make(rhs_kind, [3, 2, 1])
    result = lhs + rhs if op is Operator.ADD else lhs - rhs
    assert result.tolist() == expected

    reuse = select_reuse(lhs_kind, rhs_kind)
    if reuse is Reuse.NONE:
        assert type(result) is Vector
        assert lhs.tolist() == [1, 2, 3]
        assert rhs.tolist() == [3, 2, 1]
    elif reuse is Reuse.LEFT:
        assert result is lhs
        assert rhs.tolist() == [3, 2, 1]
    else:
        assert result is rhs
        assert lhs.tolist() == [1, 2, 3]


@pytest.mark.parametrize("lhs_kind, rhs_kind", PAIRS)
def test_dot_pairings_have_no_side_effects(lhs_kind, rhs_kind):
    lhs = make(lhs_kind, [1, 2, 3])
    rhs = make(rhs_kind, [3, 2, 1])
    assert lhs * rhs == 10
    assert rhs * lhs == 10
    assert lhs.tolist() == [1, 2, 3]
    assert rhs.tolist() == [3, 2, 1]


@pytest.mark.parametrize("lhs_kind, rhs_kind", PAIRS)
def test_size_mismatch_leaves_operands_unchanged(lhs_kind, rhs_kind):
    lhs = make(lhs_kind, [1, 2, 3])
    rhs = make(rhs_kind, [1, 2])
    for op in (lambda a, b: a + b, lambda a, b: a - b, lambda a, b: a * b):
        with pytest.raises(SizeMismatch):
            op(lhs, rhs)
    assert lhs.tolist() == [1, 2, 3]
    assert rhs.tolist() == [1, 2]


def test_properties():
    a = vector(1, 5, -2)
    b = vector(4, 0, 3)
    c = vector(7, 7, 1)
    assert a + b == b + a
    assert (a + b) + c == a + (b + c)
    assert (a - b) + b == a
    assert a * b == b * a


def test_dot_of_floats_and_empty():
    assert vector(0.5, 1.5) * vector(2.0, 2.0) == 4.0
    assert vector() * vector() == 0


def test_repeated_reuse_keeps_one_buffer():
    buffer = MutVector([0, 0, 0, 1])
    data = buffer._region.buffer.data

    result = buffer + vector(0, 0, 1, 0)
    result = result + vector(0, 1, 0, 0)
    result = result + vector(1, 0, 0, 0)

    assert result is buffer
    assert buffer == vector(1, 1, 1, 1)
    assert buffer._region.buffer.data is data


def test_in_place_operators():
    buffer = MutVector([1, 1])
    alias = buffer
    buffer += vector(1, 2)
    buffer -= vector(0, 1)
    assert buffer is alias
    assert buffer.tolist() == [2, 2]


def test_right_reuse_through_slice():
    owner = MutVector([10, 20, 30])
    with owner.slice_mut(0, 2) as s:
        assert vector(1, 2) - s is s
    assert owner.tolist() == [-9, -18, 30]


def test_operand_cannot_alias_target():
    v = MutVector([1, 2, 3])
    with pytest.raises(BorrowConflict):
        v + v
    with pytest.raises(BorrowConflict):
        v + v.slice()
    assert v.tolist() == [1, 2, 3]


def test_immutable_self_operations():
    v = vector(1, 2)
    assert v + v == vector(2, 4)
    assert v * v == 5


def test_unsupported_operand():
    with pytest.raises(TypeError):
        vector(1, 2) + [1, 2]
    with pytest.raises(TypeError):
        vector(1, 2).add(3)


def test_in_place_casting_error_writes_nothing():
    v = MutVector([1, 2])
    with pytest.raises(TypeError):
        v + vector(0.5, 0.5)
    assert v.tolist() == [1, 2]


def test_reduced_build(no_alloc):
    data = [1, 2, 3]
    target = MutVectorSlice(data)
    assert target + VectorSlice([3, 2, 1]) is target
    assert target.tolist() == [4, 4, 4]
    assert target - MutVectorSlice([1, 1, 1]) is target
    assert target * VectorSlice([1, 1, 1]) == 9

    with pytest.raises(TypeError):
        VectorSlice([1]) + VectorSlice([1])
    with pytest.raises(TypeError):
        VectorSlice([1]) + MutVectorSlice([1])
    with pytest.raises(TypeError):
        VectorSlice([1]).dot(MutVectorSlice([1]))


def test_reduced_build_does_not_allocate(no_alloc):
    with pytest.raises(FeatureUnavailable):
        Vector([1, 2])
    with pytest.raises(FeatureUnavailable):
        MutVector([1, 2])
    with pytest.raises(FeatureUnavailable):
        VectorSlice([1, 2]).map(lambda x: x)
    with pytest.raises(FeatureUnavailable):
        VectorSlice([1, 2]).combine(VectorSlice([1, 2]), lambda a, b: a)
    assert isinstance(vector(1, 2), VectorSlice)
    assert MutVectorSlice([1, 2]).map_mut(lambda x: x + 1).tolist() == [2, 3]
