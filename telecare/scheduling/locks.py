"""Per-doctor serialization of the booking check-then-insert sequence."""

import logging
import threading
from contextlib import contextmanager
from functools import lru_cache
from typing import Dict, Iterator, Optional

import redis
from redis.exceptions import LockError, RedisError

from telecare.core.config import settings
from telecare.core.exceptions import ConflictError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class LocalBookingLock:
    """One ``threading.Lock`` per doctor, shared by every session of the process."""

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self._locks: Dict[int, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, doctor_id: int) -> threading.Lock:
        with self._guard:
            if doctor_id not in self._locks:
                self._locks[doctor_id] = threading.Lock()
            return self._locks[doctor_id]

    @contextmanager
    def hold(self, doctor_id: int) -> Iterator[None]:
        lock = self._lock_for(doctor_id)
        if not lock.acquire(timeout=self.timeout):
            raise ConflictError(f"Doctor {doctor_id} is busy with another booking, try again")
        try:
            yield
        finally:
            lock.release()


class RedisBookingLock:
    """Distributed lock for deployments running several API processes."""

    key_prefix = "telecare:booking:doctor:"

    def __init__(self, client: Optional[redis.Redis] = None, timeout: float = 10.0):
        self.timeout = timeout
        self.client = client or redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            decode_responses=True,
        )

    @contextmanager
    def hold(self, doctor_id: int) -> Iterator[None]:
        lock = self.client.lock(
            f"{self.key_prefix}{doctor_id}",
            timeout=self.timeout,
            blocking_timeout=self.timeout,
        )
        try:
            acquired = lock.acquire()
        except RedisError as e:
            raise UpstreamUnavailable(f"Booking lock unavailable: {e}") from e
        if not acquired:
            raise ConflictError(f"Doctor {doctor_id} is busy with another booking, try again")
        try:
            yield
        finally:
            try:
                lock.release()
            except LockError as e:
                # Expired while held; the unique index still guards the insert
                logger.warning(f"Booking lock for doctor {doctor_id} expired before release: {e}")


@lru_cache(maxsize=1)
def get_booking_lock():
    if settings.BOOKING_LOCK_BACKEND == "redis":
        return RedisBookingLock(timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS)
    return LocalBookingLock(timeout=settings.BOOKING_LOCK_TIMEOUT_SECONDS)
