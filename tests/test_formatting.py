"""
Unit tests for byte-size formatting.
"""
import pytest
from schemalens.formatting import format_size, KB, MB, GB


class TestFormatSize:
    """Test unit selection and rounding."""

    @pytest.mark.parametrize("num_bytes, expected", [
        (0, "0 B"),
        (1, "1 B"),
        (1023, "1023 B"),
        (1024, "1.00 KB"),
        (1536, "1.50 KB"),
        (1048575, "1024.00 KB"),
        (1048576, "1.00 MB"),
        (GB - 1, "1024.00 MB"),
        (GB, "1.00 GB"),
        (5 * GB + GB // 4, "5.25 GB"),
    ])
    def test_boundaries(self, num_bytes, expected):
        """Test each unit boundary resolves to the expected unit."""
        assert format_size(num_bytes) == expected

    def test_unit_constants_are_binary(self):
        assert KB == 1024
        assert MB == 1024 ** 2
        assert GB == 1024 ** 3

    def test_round_half_even_on_exact_binary_value(self):
        """Test that exact halves round to even (1.125 KB -> 1.12 KB)."""
        # 1152 / 1024 == 1.125 exactly
        assert format_size(1152) == "1.12 KB"
        # 1.375 exactly -> 1.38
        assert format_size(1408) == "1.38 KB"

    def test_none_and_negative_are_zero(self):
        assert format_size(None) == "0 B"
        assert format_size(-5) == "0 B"
