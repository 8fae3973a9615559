"""
Unit tests for the Redis sync lease.

Tests cover:
- acquire uses SET NX EX and returns a token
- acquire returns None while another holder owns the lease
- release runs the compare-and-delete script with the caller's token

Version: 1.0.0
"""
from unittest.mock import MagicMock

import pytest

from inventory_sync.utils.sync_lock import SYNC_LOCK_KEY, acquire_sync_lock, release_sync_lock


@pytest.fixture
def mock_redis():
    return MagicMock()


@pytest.mark.unit
class TestAcquire:

    def test_acquired(self, mock_redis):
        mock_redis.set.return_value = True

        token = acquire_sync_lock(holder="task-1", ttl=60, client=mock_redis)

        assert token.startswith("task-1:")
        mock_redis.set.assert_called_once_with(SYNC_LOCK_KEY, token, nx=True, ex=60)

    def test_held_elsewhere(self, mock_redis):
        mock_redis.set.return_value = None
        mock_redis.get.return_value = "other:abc"

        assert acquire_sync_lock(holder="task-2", ttl=60, client=mock_redis) is None

    def test_default_ttl_from_settings(self, mock_redis):
        from inventory_sync.core.config import settings

        mock_redis.set.return_value = True
        acquire_sync_lock(client=mock_redis)

        assert mock_redis.set.call_args.kwargs["ex"] == settings.sync_lock_ttl_seconds


@pytest.mark.unit
class TestRelease:

    def test_release_owned(self, mock_redis):
        mock_redis.eval.return_value = 1

        assert release_sync_lock("task-1:xyz", client=mock_redis) is True
        args = mock_redis.eval.call_args.args
        assert args[1:] == (1, SYNC_LOCK_KEY, "task-1:xyz")

    def test_release_not_owned(self, mock_redis):
        mock_redis.eval.return_value = 0
        assert release_sync_lock("stale", client=mock_redis) is False
