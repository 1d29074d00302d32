"""Tests for the decimal metric codec."""

import numpy as np
import pytest

from gas_snapshot.codec import as_metric, decode, encode
from gas_snapshot.exceptions import ParseError


class TestEncode:
    """Tests for encoding metrics."""

    def test_encode_zero(self):
        assert encode(0) == "0"

    def test_encode_plain_value(self):
        assert encode(50000) == "50000"

    def test_encode_uint256_max(self):
        value = 2**256 - 1
        assert encode(value) == str(value)

    def test_encode_numpy_integer(self):
        assert encode(np.uint64(12345)) == "12345"

    def test_encode_negative_rejected(self):
        with pytest.raises(ValueError):
            encode(-1)

    def test_encode_float_rejected(self):
        with pytest.raises(TypeError):
            encode(1.0)

    def test_encode_very_large_value_has_no_leading_zeros(self):
        """Values spanning several conversion chunks keep inner zeros only."""
        value = 10**2500 + 7
        text = encode(value)
        assert len(text) == 2501
        assert text[0] == "1"
        assert text[1:-1] == "0" * 2499
        assert text[-1] == "7"


class TestDecode:
    """Tests for decoding metrics."""

    def test_decode_plain_value(self):
        assert decode("50000") == 50000

    def test_decode_leading_zeros(self):
        assert decode("007") == 7

    @pytest.mark.parametrize("text", ["", "+5", "-5", "12a", " 12", "1.5", "1e3", "١٢"])
    def test_decode_malformed(self, text):
        with pytest.raises(ParseError):
            decode(text)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode("abc")

    def test_parse_error_carries_text(self):
        with pytest.raises(ParseError) as exc_info:
            decode("-12")
        assert exc_info.value.text == "-12"

    def test_roundtrip_beyond_int_str_digit_limit(self):
        """Magnitudes past the default 4300-digit limit are not truncated."""
        value = 3**12000 + 1
        assert decode(encode(value)) == value

    @pytest.mark.parametrize("value", [0, 1, 9, 10, 999, 2**64, 2**256 - 1])
    def test_roundtrip(self, value):
        assert decode(encode(value)) == value


class TestAsMetric:
    """Tests for metric coercion."""

    def test_int_passthrough(self):
        assert as_metric(42) == 42
        assert type(as_metric(np.int32(42))) is int

    def test_zero_dim_array(self):
        assert as_metric(np.array(17, dtype=np.int64)) == 17

    def test_multi_element_array_rejected(self):
        with pytest.raises(TypeError):
            as_metric(np.array([1, 2]))

    def test_float_array_rejected(self):
        with pytest.raises(TypeError):
            as_metric(np.array(1.5))

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            as_metric(True)

    def test_negative_numpy_rejected(self):
        with pytest.raises(ValueError):
            as_metric(np.int64(-3))
