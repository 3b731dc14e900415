import pytest

from pgvalue.flags import Flag, has_flag, should_quote_array


def test_has_flag_single():
    assert has_flag(Flag.QUOTE, Flag.QUOTE) is True
    assert has_flag(0, Flag.QUOTE) is False
    assert has_flag(Flag.ARRAY, Flag.QUOTE) is False


def test_has_flag_combined():
    flags = Flag.QUOTE | Flag.ARRAY
    assert has_flag(flags, Flag.QUOTE)
    assert has_flag(flags, Flag.ARRAY)
    assert not has_flag(flags, Flag.SUBARRAY)
    assert has_flag(flags, Flag.QUOTE | Flag.ARRAY)


def test_has_flag_requires_all_bits():
    assert has_flag(Flag.QUOTE, Flag.QUOTE | Flag.ARRAY) is False


def test_has_flag_accepts_plain_int():
    assert has_flag(int(Flag.QUOTE | Flag.SUBARRAY), Flag.SUBARRAY) is True


@pytest.mark.parametrize(
    "flags, expected",
    [
        (0, False),
        (Flag.QUOTE, True),
        (Flag.QUOTE | Flag.ARRAY, True),
        (Flag.QUOTE | Flag.SUBARRAY, False),
        (Flag.ARRAY | Flag.SUBARRAY, False),
        (Flag.ARRAY, False),
    ],
)
def test_should_quote_array(flags, expected):
    assert should_quote_array(flags) is expected