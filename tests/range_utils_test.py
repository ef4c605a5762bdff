from pytest import mark, raises
from ranges import Range

from range_reader.range_utils import (
    covered_by_prefix,
    interval_range,
    range_termini,
)

termini_test_triples = [(0, 3, (0, 2)), (1, 4, (1, 3))]


@mark.parametrize("start,stop,expected", termini_test_triples)
def test_range_termini(start, stop, expected):
    rng = Range(start, stop)
    assert range_termini(rng) == expected


def test_empty_range_termini():
    with raises(ValueError, match="Empty range has no termini"):
        range_termini(Range(0, 0))


@mark.parametrize("offset,length", [(0, 0), (0, 10), (900, 50)])
def test_interval_range(offset, length):
    rng = interval_range(offset=offset, length=length)
    assert rng == Range(offset, offset + length)


def test_interval_range_negative():
    with raises(ValueError, match="negative offset"):
        interval_range(offset=-1, length=10)


@mark.parametrize("offset,length", [(0.5, 3), (0, 2.0), ("0", 3)])
def test_interval_range_not_discrete(offset, length):
    with raises(TypeError, match="Ranges must be discrete"):
        interval_range(offset=offset, length=length)


@mark.parametrize(
    "start,stop,prefix_length,expected",
    [
        (0, 50, 100, True),
        (0, 99, 100, True),
        (0, 100, 100, False),
        (50, 100, 100, False),
        (90, 110, 100, False),
        (0, 1, 0, False),
        (10, 10, 100, True),
    ],
)
def test_covered_by_prefix(start, stop, prefix_length, expected):
    assert covered_by_prefix(Range(start, stop), prefix_length) is expected
