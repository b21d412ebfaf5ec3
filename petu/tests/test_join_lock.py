"""
Test the Redis lock that serializes joins per event.
"""
import pytest

from petu.core.exceptions import JoinBusyError
from petu.services.joins import _locked


class TestRedisLock:
    """Test Redis lock behaviour the join service relies on."""

    def test_redis_lock_blocking(self, fake_redis):
        """Test that a lock cannot be acquired twice."""
        lock1 = fake_redis.lock("event_lock:1", timeout=10)
        lock2 = fake_redis.lock("event_lock:1", timeout=10)

        assert lock1.acquire(blocking=False) is True
        assert lock2.acquire(blocking=False) is False

        lock1.release()

        assert lock2.acquire(blocking=False) is True
        lock2.release()

    def test_locks_are_per_event(self, fake_redis):
        lock1 = fake_redis.lock("event_lock:1", timeout=10)
        lock2 = fake_redis.lock("event_lock:2", timeout=10)

        assert lock1.acquire(blocking=False) is True
        assert lock2.acquire(blocking=False) is True

        lock1.release()
        lock2.release()


class TestLockedJoin:
    def test_runs_and_releases(self, redis_client):
        assert _locked(5, lambda a, b: a + b, 2, 3) == 5

        # the lock is free again afterwards
        lock = redis_client.lock("event_lock:5", timeout=1)
        assert lock.acquire(blocking=False) is True
        lock.release()

    def test_releases_on_error(self, redis_client):
        def boom():
            raise RuntimeError("storage down")

        with pytest.raises(RuntimeError):
            _locked(6, boom)

        lock = redis_client.lock("event_lock:6", timeout=1)
        assert lock.acquire(blocking=False) is True
        lock.release()

    def test_busy_when_held(self, redis_client, monkeypatch):
        monkeypatch.setattr("petu.services.joins.settings.JOIN_LOCK_BLOCKING_TIMEOUT", 0.1)
        held = redis_client.lock("event_lock:7", timeout=10)
        assert held.acquire(blocking=False) is True

        try:
            with pytest.raises(JoinBusyError):
                _locked(7, lambda: None)
        finally:
            held.release()
