# tests/utils/call_counter.py
"""
Call Counter Utility

Counts named operations so tests can assert how many times the
materializer or the remote call was hit.
"""


class CallCounter:
    """Named call counter with an ordered log of (name, arg) events."""

    def __init__(self):
        self.calls = {}
        self.events = []

    def inc(self, name: str, arg=None):
        """Increment call count for a named operation."""
        self.calls[name] = self.calls.get(name, 0) + 1
        self.events.append((name, arg))

    def count(self, name: str) -> int:
        return self.calls.get(name, 0)

    def assert_exact(self, name: str, expected: int):
        """Assert exact number of calls."""
        actual = self.count(name)
        assert actual == expected, (
            f"{name} called {actual} times (expected exactly: {expected})"
        )
