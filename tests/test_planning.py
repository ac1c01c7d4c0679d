import pytest
from hypothesis import given
from hypothesis.strategies import integers

from bridgeflow.application.planning import plan_chunks, shrink_end
from bridgeflow.domain.models import BlockRange


def test_plan_chunks_last_shorter():
    chunks = plan_chunks(100, 1_049, 400)
    assert [(c.start, c.end) for c in chunks] == [(100, 499), (500, 899), (900, 1_049)]


def test_plan_chunks_single_block():
    assert [(c.start, c.end) for c in plan_chunks(5, 5, 3_000)] == [(5, 5)]


def test_plan_chunks_rejects_bad_step():
    with pytest.raises(ValueError):
        plan_chunks(0, 10, 0)


@given(start=integers(0, 50_000), length=integers(1, 50_000), step=integers(1, 5_000))
def test_plan_chunks_covers_range(start: int, length: int, step: int):
    end = start + length - 1
    chunks = plan_chunks(start, end, step)
    assert chunks[0].start == start
    assert chunks[-1].end == end
    for a, b in zip(chunks, chunks[1:]):
        assert b.start == a.end + 1
    assert all(1 <= c.span() <= step for c in chunks)


def test_shrink_end_halves_from_start():
    assert shrink_end(0, 2_999) == 1_500
    assert shrink_end(751, 2_999) == 1_875
    assert shrink_end(10, 60) == 35


@given(start=integers(0, 10**9), span=integers(51, 10**6))
def test_shrink_end_strictly_shrinks(start: int, span: int):
    end = start + span - 1
    new_end = shrink_end(start, end)
    assert start <= new_end < end


def test_block_range_validation():
    assert BlockRange(3, 7).span() == 5
    with pytest.raises(ValueError):
        BlockRange(7, 3)
    with pytest.raises(ValueError):
        BlockRange(-1, 3)
