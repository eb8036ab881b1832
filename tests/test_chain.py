"""Tests for first-error chaining."""

from __future__ import annotations

from httpreq.chain import ErrorChain, chained


class _Builder(ErrorChain):
    def __init__(self):
        self.calls = []

    @chained
    def step(self, value):
        self.calls.append(value)

    @chained
    def fail(self, exc):
        self._fail(exc)


def test_chained_call_returns_builder():
    builder = _Builder()

    assert builder.step(1) is builder
    assert builder.calls == [1]
    assert builder.error is None


def test_first_error_is_kept():
    builder = _Builder()
    first = ValueError("first")

    builder.fail(first)
    builder._fail(ValueError("second"))

    assert builder.error is first


def test_calls_after_error_are_noops():
    builder = _Builder()
    error = RuntimeError("boom")

    result = builder.step(1).fail(error).step(2).fail(ValueError("later")).step(3)

    assert result is builder
    assert builder.calls == [1]
    assert builder.error is error


def test_chained_preserves_metadata():
    assert _Builder.step.__name__ == "step"
