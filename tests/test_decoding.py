"""Tests for base-N share decoding."""

import pytest

from shamir_reconstruct.crypto.decoding import Point, Share, decode, decode_share
from shamir_reconstruct.errors import InvalidEncoding, ReconstructionError


class TestDecode:
    def test_positional_values(self) -> None:
        assert decode("111", 2) == 7
        assert decode("1001", 2) == 9
        assert decode("ff", 16) == 255
        assert decode("213", 4) == 39
        assert decode("z", 36) == 35

    def test_uppercase_digits(self) -> None:
        assert decode("FF", 16) == 255
        assert decode("aBc", 16) == 0xABC

    def test_whitespace_is_trimmed(self) -> None:
        assert decode("  1001\n", 2) == 9

    def test_leading_zeros(self) -> None:
        assert decode("000", 10) == 0
        assert decode("0012", 3) == 5

    def test_exact_beyond_float_precision(self) -> None:
        value = 2**200 + 1
        assert decode(format(value, "x"), 16) == value
        assert decode(str(2**53 + 1), 10) == 2**53 + 1

    def test_very_long_decimal_string(self) -> None:
        assert decode("9" * 5000, 10) == 10**5000 - 1

    @pytest.mark.parametrize("base", [0, 1, 37, 100, -2])
    def test_base_out_of_range(self, base: int) -> None:
        with pytest.raises(InvalidEncoding, match="outside"):
            decode("1", base)

    def test_non_integer_base(self) -> None:
        with pytest.raises(InvalidEncoding, match="integer"):
            decode("1", "10")

    def test_digit_not_in_base(self) -> None:
        with pytest.raises(InvalidEncoding, match="not valid in base 2"):
            decode("102", 2)
        with pytest.raises(InvalidEncoding):
            decode("g", 16)

    @pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
    def test_empty_value(self, raw: str) -> None:
        with pytest.raises(InvalidEncoding, match="empty"):
            decode(raw, 10)

    @pytest.mark.parametrize("raw", ["-5", "+5", "0x1f", "1_000", "1 0"])
    def test_rejects_non_digit_syntax(self, raw: str) -> None:
        with pytest.raises(InvalidEncoding):
            decode(raw, 16)

    def test_failure_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode("2", 2)
        assert issubclass(InvalidEncoding, ReconstructionError)


class TestShare:
    def test_from_record(self) -> None:
        share = Share.from_record("2", {"base": "2", "value": "111"})
        assert share == Share(index=2, base=2, raw_value="111")

    def test_from_record_accepts_int_base(self) -> None:
        share = Share.from_record("6", {"base": 4, "value": "213"})
        assert share.base == 4

    def test_bad_key(self) -> None:
        with pytest.raises(InvalidEncoding, match="x-coordinate"):
            Share.from_record("one", {"base": "10", "value": "1"})

    def test_missing_fields(self) -> None:
        with pytest.raises(InvalidEncoding, match="'base' and 'value'"):
            Share.from_record("1", {"value": "1"})

    def test_bad_base(self) -> None:
        with pytest.raises(InvalidEncoding, match="base"):
            Share.from_record("1", {"base": "ten", "value": "1"})

    @pytest.mark.parametrize("value", [None, True, False, 1.5, ["1"], {"v": "1"}])
    def test_value_must_be_a_string(self, value) -> None:
        with pytest.raises(InvalidEncoding, match="share 1: value must be a string"):
            Share.from_record("1", {"base": "36", "value": value})

    def test_integer_value_is_accepted(self) -> None:
        share = Share.from_record("1", {"base": "10", "value": 1234})
        assert share.raw_value == "1234"

    @pytest.mark.parametrize("key", ["1_0", "0x1", "1.0", "", " ", "+"])
    def test_key_must_be_plain_decimal(self, key: str) -> None:
        with pytest.raises(InvalidEncoding, match="x-coordinate"):
            Share.from_record(key, {"base": "10", "value": "1"})

    def test_signed_key(self) -> None:
        assert Share.from_record(" -3 ", {"base": "10", "value": "1"}).index == -3

    @pytest.mark.parametrize("base", ["1_6", True, None, "16.0"])
    def test_base_must_be_plain_decimal(self, base) -> None:
        with pytest.raises(InvalidEncoding, match="base"):
            Share.from_record("1", {"base": base, "value": "1"})

    def test_entry_not_an_object(self) -> None:
        with pytest.raises(InvalidEncoding, match="object"):
            Share.from_record("1", "111")

    def test_decode_share(self) -> None:
        point = decode_share(Share(index=3, base=10, raw_value="12"))
        assert point == Point(x=3, y=12)

    def test_decode_share_names_the_share(self) -> None:
        with pytest.raises(InvalidEncoding, match="share 4"):
            decode_share(Share(index=4, base=8, raw_value="9"))
