"""Tests for the cancellable request context."""

import threading
import time

import pytest

from gini_api.context import Cancelled, Context, ContextError, DeadlineExceeded


class TestContext:
    """Deadline and cancel behaviour."""

    def test_background_never_done(self):
        ctx = Context.background()

        assert ctx.done is False
        assert ctx.error is None
        assert ctx.remaining() is None
        assert ctx.timeout(30) == 30

    def test_cancel(self):
        ctx = Context.background()
        ctx.cancel()

        assert ctx.done is True
        assert isinstance(ctx.error, Cancelled)
        with pytest.raises(Cancelled):
            ctx.raise_if_done()

    def test_deadline(self):
        ctx = Context.with_timeout(0.05)
        time.sleep(0.1)

        assert ctx.done is True
        assert isinstance(ctx.error, DeadlineExceeded)
        assert ctx.remaining() == 0.0

    def test_context_errors_share_base(self):
        assert issubclass(Cancelled, ContextError)
        assert issubclass(DeadlineExceeded, ContextError)

    def test_timeout_bounded_by_deadline(self):
        ctx = Context.with_timeout(2)

        assert ctx.timeout(30) <= 2
        assert ctx.timeout(1) == 1

    def test_wait_returns_early_on_cancel(self):
        ctx = Context.background()
        threading.Timer(0.05, ctx.cancel).start()

        start = time.monotonic()
        done = ctx.wait(5)

        assert done is True
        assert time.monotonic() - start < 2

    def test_wait_stops_at_deadline(self):
        ctx = Context.with_timeout(0.05)

        start = time.monotonic()
        done = ctx.wait(5)

        assert done is True
        assert time.monotonic() - start < 2

    def test_wait_full_pause_when_live(self):
        ctx = Context.background()
        assert ctx.wait(0.01) is False

    def test_done_callback_runs_on_cancel(self):
        ctx = Context.background()
        fired = threading.Event()

        ctx.add_done_callback(fired.set)
        ctx.cancel()

        assert fired.is_set()

    def test_done_callback_after_cancel_runs_immediately(self):
        ctx = Context.background()
        ctx.cancel()
        fired = threading.Event()

        ctx.add_done_callback(fired.set)

        assert fired.is_set()

    def test_removed_callback_not_run(self):
        ctx = Context.background()
        fired = threading.Event()

        ctx.add_done_callback(fired.set)
        ctx.remove_done_callback(fired.set)
        ctx.cancel()

        assert not fired.is_set()
