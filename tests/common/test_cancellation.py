"""Tests for wishfill/common/cancellation.py"""

from unittest.mock import MagicMock

import pytest

from wishfill.common.cancellation import CancellationToken
from wishfill.errors import ExtractionCancelled


class TestCancellationToken:
    def test_starts_active(self):
        token = CancellationToken()
        assert token.cancelled is False
        token.raise_if_cancelled()

    def test_cancel_sets_flag(self):
        token = CancellationToken()
        token.cancel()
        assert token.cancelled is True
        with pytest.raises(ExtractionCancelled):
            token.raise_if_cancelled()

    def test_callbacks_run_once(self):
        token = CancellationToken()
        callback = MagicMock()
        token.register(callback)

        token.cancel()
        token.cancel()

        callback.assert_called_once()

    def test_unregistered_callback_not_run(self):
        token = CancellationToken()
        callback = MagicMock()
        token.register(callback)
        token.unregister(callback)

        token.cancel()

        callback.assert_not_called()

    def test_register_after_cancel_runs_immediately(self):
        token = CancellationToken()
        token.cancel()
        callback = MagicMock()

        token.register(callback)

        callback.assert_called_once()

    def test_failing_callback_does_not_stop_others(self):
        token = CancellationToken()
        failing = MagicMock(side_effect=OSError("already closed"))
        other = MagicMock()
        token.register(failing)
        token.register(other)

        token.cancel()

        other.assert_called_once()
