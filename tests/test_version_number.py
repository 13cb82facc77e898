import pytest

from mobilegen.version_number import (
    VersionNumber,
    VersionNumberError,
    VersionTriple,
    parse_version_number,
    parse_version_triple,
)


def test_parse_plain_triple_has_no_extra():
    number = parse_version_number("1.2.3")
    assert number == VersionNumber(VersionTriple(1, 2, 3), None)


def test_parse_with_extra_components():
    number = parse_version_number("1.2.3.4.5")
    assert number.triple == VersionTriple(1, 2, 3)
    assert number.extra == [4, 5]


@pytest.mark.parametrize("text", ["1.2.3", "10.0.7", "1.2.3.4", "3.0.0.1.2.3"])
def test_display_round_trip(text):
    assert str(parse_version_number(text)) == text


def test_short_triple_pads_with_zero():
    assert parse_version_triple("1.2") == VersionTriple(1, 2, 0)


def test_push_extra_creates_and_extends():
    number = VersionNumber(VersionTriple(1, 0, 0))
    number.push_extra(7)
    number.push_extra(8)
    assert number.extra == [7, 8]
    assert parse_version_number(str(number)) == number


def test_invalid_extra_is_rejected():
    with pytest.raises(VersionNumberError, match="extra version"):
        parse_version_number("1.2.3.x")


def test_extra_out_of_u32_range_is_rejected():
    with pytest.raises(VersionNumberError, match="too large"):
        parse_version_number("1.2.3.4294967296")


@pytest.mark.parametrize("text", ["", "a.b", "1..3", "-1.0.0"])
def test_invalid_triple_is_rejected(text):
    with pytest.raises(VersionNumberError, match="version triple"):
        parse_version_number(text)


def test_ordering_missing_extra_sorts_first():
    plain = parse_version_number("1.2.3")
    extended = parse_version_number("1.2.3.0")
    higher = parse_version_number("1.2.4")
    assert sorted([higher, extended, plain]) == [plain, extended, higher]