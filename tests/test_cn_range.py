import pytest

from csrbatch.errors import MalformedRangeExpression, NumericOverflowInRange, RangeError
from csrbatch.names.cn_range import expand, parse_range


def test_expand_basic():
    names = expand("YDL0001-YDL0010")
    assert len(names) == 10
    assert names[0] == "YDL0001"
    assert names[-1] == "YDL0010"


def test_expand_reversed_endpoints_is_ascending():
    assert expand("YDL0010-YDL0001") == expand("YDL0001-YDL0010")


def test_expand_single_value():
    assert expand("YDL0005-YDL0005") == ["YDL0005"]


@pytest.mark.parametrize("a,b", [(0, 0), (7, 42), (99, 3), (120, 130)])
def test_expand_count_and_order(a, b):
    names = expand(f"DEV{a:04d}-DEV{b:04d}")
    assert len(names) == abs(a - b) + 1
    nums = [int(n[len("DEV"):]) for n in names]
    assert nums == list(range(min(a, b), max(a, b) + 1))


def test_width_comes_from_first_number():
    # second endpoint is shorter, padding still follows the first
    assert expand("A001-A3") == ["A001", "A002", "A003"]
    # numbers wider than the pad width are not truncated
    assert expand("A8-A0011") == ["A8", "A9", "A10", "A11"]


def test_first_prefix_wins():
    assert expand("ABC01-xyz03") == ["ABC01", "ABC02", "ABC03"]


def test_prefix_case_preserved():
    assert expand("ydl1-YDL2") == ["ydl1", "ydl2"]


@pytest.mark.parametrize(
    "expr",
    [
        "",
        "YDL0001-",
        "YDL0001",
        "0001-0010",
        "YDL-YDL0010",
        "YDL0001-YDL",
        "YDL0001_YDL0010",
        " YDL0001-YDL0010",
        "YDL0001-YDL0010 ",
        "YDL0001--YDL0010",
        "YD-L0001-YDL0010",
        "YDL0001-YDL0010-YDL0011",
        "ÄDL0001-ÄDL0002",
        "YDL٠١-YDL٠٢",
    ],
)
def test_malformed(expr):
    with pytest.raises(MalformedRangeExpression):
        expand(expr)


def test_overflow():
    with pytest.raises(NumericOverflowInRange):
        expand("A4294967296-A4294967296")
    # boundary itself is fine
    assert expand("A4294967295-A4294967295") == ["A4294967295"]


def test_range_errors_are_value_errors():
    with pytest.raises(ValueError):
        expand("nope")
    with pytest.raises(RangeError):
        expand("nope")


def test_parse_range_parts():
    assert parse_range("AB12-CD345") == ("AB", "12", "CD", "345")
