import numpy as np
import pytest

from entropic.core.state import State3
from entropic.core.trail import TrailBuffer


def _state(i: int) -> State3:
    return State3(float(i), float(i) * 2, float(i) * 3)


def test_push_until_full_keeps_order():
    trail = TrailBuffer(4)
    for i in range(3):
        trail.push(_state(i))
    assert len(trail) == 3
    assert list(trail) == [_state(0), _state(1), _state(2)]
    assert trail.oldest() == _state(0)
    assert trail.latest() == _state(2)


@pytest.mark.parametrize("k", [1, 3, 10, 250])
def test_overflow_keeps_last_capacity_states(k):
    capacity = 100
    trail = TrailBuffer(capacity)
    total = capacity + k
    for i in range(total):
        trail.push(_state(i))
    assert len(trail) == capacity
    assert list(trail) == [_state(i) for i in range(total - capacity, total)]


def test_as_array_is_chronological_copy():
    trail = TrailBuffer(3)
    for i in range(5):
        trail.push(_state(i))
    arr = trail.as_array()
    assert arr.shape == (3, 3)
    np.testing.assert_array_equal(arr[:, 0], [2.0, 3.0, 4.0])
    arr[0, 0] = -1.0
    assert trail.oldest() == _state(2)


def test_clear_empties_and_allows_reuse():
    trail = TrailBuffer(2)
    trail.push(_state(1))
    trail.push(_state(2))
    trail.clear()
    assert len(trail) == 0
    assert trail.latest() is None
    assert trail.as_array().shape == (0, 3)
    trail.push(_state(7))
    assert list(trail) == [_state(7)]


def test_zero_capacity_records_nothing():
    trail = TrailBuffer(0)
    trail.push(_state(1))
    assert len(trail) == 0
    assert list(trail) == []


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        TrailBuffer(-1)
