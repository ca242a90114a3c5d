"""
Pytest configuration and shared fixtures
"""

import json

import pytest

PREFIX = ")]}'\n"


class FakeTransport:
    """In-memory transport that records every request"""

    def __init__(self, body=None, error=None):
        self.body = body
        self.error = error
        self.calls = []

    def get(self, url, headers):
        self.calls.append((url, dict(headers)))
        if self.error is not None:
            raise self.error
        return self.body


def gviz_body(rows):
    """Wrap source rows the way the export endpoint does"""
    return PREFIX + json.dumps({"version": "0.6", "table": {"cols": [], "rows": rows}})


@pytest.fixture
def sample_rows():
    """Source rows with a numeric id, a name, and some empty cells"""
    return [
        {"c": [{"v": 1.0, "f": "1"}, {"v": "Alice"}]},
        {"c": [{"v": 2.0, "f": "2"}, {"v": "Bob"}, None]},
        {"c": [{"v": 3.7, "f": "3.7"}, None]},
        {"c": [None, {"v": "Dana"}]},
    ]


@pytest.fixture
def sample_body(sample_rows):
    return gviz_body(sample_rows)


@pytest.fixture
def transport(sample_body):
    return FakeTransport(sample_body)
