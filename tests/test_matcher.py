"""Tests for pattern compilation and line classification."""

import re

import pytest

from heatlog.classified import Matched, Unmatched
from heatlog.errors import ConfigurationError
from heatlog.matcher import U64_MAX, classify, compile_pattern, parse_u64


class TestCompilePattern:
    """Test compile_pattern()."""

    def test_valid_pattern(self):
        pattern = compile_pattern(r'took (\d+)ms')
        assert isinstance(pattern, re.Pattern)
        assert pattern.groups == 1

    def test_invalid_pattern_raises_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            compile_pattern(r'took (\d+ms')
        assert 'Invalid regex pattern' in str(exc_info.value)

    def test_pattern_without_group_is_accepted(self):
        pattern = compile_pattern(r'took \d+ms')
        assert pattern.groups == 0


class TestParseU64:
    """Test strict base-10 parsing."""

    @pytest.mark.parametrize(
        'text,expected',
        [
            ('0', 0),
            ('42', 42),
            ('007', 7),
            (str(U64_MAX), U64_MAX),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_u64(text) == expected

    @pytest.mark.parametrize(
        'text',
        ['', '-1', '+5', ' 5', '5 ', '1_000', '0x10', '1.5', 'abc', '٣٤', str(U64_MAX + 1)],
    )
    def test_rejected(self, text):
        assert parse_u64(text) is None


class TestClassify:
    """Test classify() on single lines."""

    def setup_method(self):
        self.pattern = compile_pattern(r'took (\d+)ms')

    def test_matched_line(self):
        result = classify(self.pattern, 'request took 42ms')
        assert result == Matched('request took 42ms', (13, 15), 42)
        assert result.matched_text == '42'

    def test_no_match(self):
        line = 'nothing to see here'
        assert classify(self.pattern, line) == Unmatched(line)

    def test_pattern_without_group(self):
        pattern = compile_pattern(r'took \d+ms')
        line = 'request took 42ms'
        assert classify(pattern, line) == Unmatched(line)

    def test_non_numeric_group_is_unmatched(self):
        pattern = compile_pattern(r'user=(\w+)')
        line = 'login user=alice'
        assert classify(pattern, line) == Unmatched(line)

    def test_group_that_did_not_participate(self):
        pattern = compile_pattern(r'(?:a=(\d+)|b=done)')
        line = 'b=done'
        assert classify(pattern, line) == Unmatched(line)

    def test_empty_group_is_unmatched(self):
        pattern = compile_pattern(r'x(\d*)y')
        assert classify(pattern, 'xy') == Unmatched('xy')

    def test_overflow_is_unmatched(self):
        pattern = compile_pattern(r'(\d+)')
        line = f'size {U64_MAX + 1}'
        assert classify(pattern, line) == Unmatched(line)

    def test_u64_max_is_matched(self):
        pattern = compile_pattern(r'(\d+)')
        result = classify(pattern, f'size {U64_MAX}')
        assert isinstance(result, Matched)
        assert result.value == U64_MAX

    def test_non_ascii_digits_are_unmatched(self):
        pattern = compile_pattern(r'n=(\w+)')
        line = 'n=٣٤'
        assert classify(pattern, line) == Unmatched(line)

    def test_signed_value_is_unmatched(self):
        pattern = compile_pattern(r'v=(\S+)')
        assert classify(pattern, 'v=+5') == Unmatched('v=+5')

    def test_leftmost_match_wins(self):
        pattern = compile_pattern(r'(\d+)')
        result = classify(pattern, 'a 7 b 9')
        assert result.value == 7
        assert result.span == (2, 3)

    def test_only_first_group_counts(self):
        pattern = compile_pattern(r'(\w+)=(\d+)')
        line = 'latency=15'
        # First group is non-numeric, second group is never consulted
        assert classify(pattern, line) == Unmatched(line)

    def test_unmatched_text_is_identical(self):
        line = '  trailing spaces and\ttabs  '
        result = classify(self.pattern, line)
        assert isinstance(result, Unmatched)
        assert result.text is line

    def test_byte_span_for_non_ascii_prefix(self):
        pattern = compile_pattern(r'took (\d+)')
        result = classify(pattern, 'é took 5ms')
        assert result.span == (7, 8)
        assert result.byte_span == (8, 9)
        assert 'é took 5ms'.encode('utf-8')[8:9] == b'5'


class TestMatchedModel:
    """Test the Matched invariants."""

    def test_out_of_bounds_span_rejected(self):
        with pytest.raises(ValueError):
            Matched('abc', (1, 5), 1)

    def test_reversed_span_rejected(self):
        with pytest.raises(ValueError):
            Matched('abc', (2, 1), 1)

    def test_structural_equality(self):
        assert Matched('v=1', (2, 3), 1) == Matched('v=1', (2, 3), 1)
        assert Unmatched('x') == Unmatched('x')
        assert Unmatched('x') != Matched('x', (0, 0), 0)

    def test_no_ordering(self):
        with pytest.raises(TypeError):
            Matched('v=1', (2, 3), 1) < Matched('v=2', (2, 3), 2)
