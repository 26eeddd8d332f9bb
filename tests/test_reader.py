"""Tests for reading input lines."""

import io

import pytest

from heatlog.errors import InputDecodeError
from heatlog.reader import read_lines, read_sources


class TestReadLines:
    """Test read_lines() on in-memory streams."""

    @pytest.mark.parametrize(
        'data,expected',
        [
            (b'', []),
            (b'\n', ['']),
            (b'a', ['a']),
            (b'a\n', ['a']),
            (b'a\nb\r\nc', ['a', 'b', 'c']),
            (b'a\n\nb\n', ['a', '', 'b']),
            (b'keep\r\r\n', ['keep\r']),
            ('café took 5ms\n'.encode('utf-8'), ['café took 5ms']),
        ],
    )
    def test_splitting(self, data, expected):
        assert read_lines(io.BytesIO(data)) == expected

    def test_invalid_utf8_reports_line(self):
        with pytest.raises(InputDecodeError) as exc_info:
            read_lines(io.BytesIO(b'ok\n\xff\xfe bad\nlater\n'), source='app.log')
        assert exc_info.value.line_number == 2
        assert exc_info.value.source == 'app.log'
        assert 'app.log:2' in str(exc_info.value)


class TestReadSources:
    """Test read_sources() with files."""

    def test_files_are_concatenated_in_order(self, tmp_path):
        first = tmp_path / 'first.log'
        second = tmp_path / 'second.log'
        first.write_bytes(b'one\ntwo\n')
        second.write_bytes(b'three\n')
        assert read_sources([str(first), str(second)]) == ['one', 'two', 'three']

    def test_invalid_file_names_source(self, tmp_path):
        bad = tmp_path / 'bad.log'
        bad.write_bytes(b'\xc3\x28\n')
        with pytest.raises(InputDecodeError) as exc_info:
            read_sources([str(bad)])
        assert exc_info.value.source == str(bad)
        assert exc_info.value.line_number == 1


class TestReadStdin:
    """Test read_sources() on standard input."""

    def test_dash_reads_stdin_bytes(self, monkeypatch):
        monkeypatch.setattr('sys.stdin', io.TextIOWrapper(io.BytesIO(b'a took 1ms\r\nb\n')))
        assert read_sources(['-']) == ['a took 1ms', 'b']

    def test_no_paths_reads_stdin(self, monkeypatch):
        monkeypatch.setattr('sys.stdin', io.TextIOWrapper(io.BytesIO(b'only\n')))
        assert read_sources([]) == ['only']

    def test_stdin_decode_error_names_stdin(self, monkeypatch):
        monkeypatch.setattr('sys.stdin', io.TextIOWrapper(io.BytesIO(b'\xff\n')))
        with pytest.raises(InputDecodeError) as exc_info:
            read_sources(['-'])
        assert exc_info.value.source == '<stdin>'
