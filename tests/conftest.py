"""Pytest configuration and shared fixtures for heatlog tests.

The auto-use fixture keeps tests independent of the environment they run in:
any HEATLOG_* variable set by the developer's shell is removed for the
duration of each test.
"""

import os

import pytest

from heatlog.classified import Matched, Unmatched


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Remove HEATLOG_* variables so defaults apply unless a test sets them."""
    for key in list(os.environ):
        if key.startswith('HEATLOG_'):
            monkeypatch.delenv(key, raising=False)
    yield


def matched(value: int, prefix: str = 'v=', suffix: str = '') -> Matched:
    """Build a Matched line whose span covers the printed value."""
    text = f'{prefix}{value}{suffix}'
    start = len(prefix)
    return Matched(text, (start, start + len(str(value))), value)


@pytest.fixture
def timing_lines() -> list[str]:
    """100 request lines taking 1..100ms, with a line without a value after every tenth."""
    lines = []
    for i in range(1, 101):
        lines.append(f'GET /api/{i} took {i}ms')
        if i % 10 == 0:
            lines.append(f'heartbeat {i}')
    return lines


@pytest.fixture
def mixed_lines() -> list:
    """The [M(5), U, M(10), U, M(1)] sequence used by ordering tests."""
    return [matched(5), Unmatched('hello'), matched(10), Unmatched('world'), matched(1)]
