"""
Time-boxed cache of resolved permission states.

Keyed by (user_id, organization_id). Entries expire after the staleness
window and can be dropped explicitly with invalidate(). Every invalidate
bumps a generation counter; a computation that started under an older
generation returns its result without storing it, so a slow read can
never overwrite a newer invalidation.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.models.permission_state import EffectivePermissionState

logger = logging.getLogger(__name__)

CacheKey = tuple[str, int | None]


@dataclass
class _CacheEntry:
    state: EffectivePermissionState
    stored_at: float


class DecisionCache:
    def __init__(self, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, _CacheEntry] = {}
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get(self, user_id: str, organization_id: int | None) -> EffectivePermissionState | None:
        key = (user_id, organization_id)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return entry.state

    def put(
        self,
        user_id: str,
        organization_id: int | None,
        state: EffectivePermissionState,
        generation: int,
    ) -> bool:
        """
        Store a state computed under the given generation.

        Returns:
            False when an invalidation happened since the computation
            started; nothing is stored in that case.
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._entries[(user_id, organization_id)] = _CacheEntry(state=state, stored_at=self._clock())
            return True

    def get_or_compute(
        self,
        user_id: str,
        organization_id: int | None,
        compute: Callable[[], EffectivePermissionState],
    ) -> EffectivePermissionState:
        """
        Return the cached state or compute and store a fresh one.

        Exceptions from compute propagate and leave no entry behind.
        """
        cached = self.get(user_id, organization_id)
        if cached is not None:
            return cached

        generation = self.generation
        state = compute()
        if not self.put(user_id, organization_id, state, generation):
            logger.debug("Discarded stale permission state for user %s in org %s", user_id, organization_id)
        return state

    def invalidate(self, user_id: str | None = None, organization_id: int | None = None) -> int:
        """
        Drop matching entries; None matches anything.

        invalidate() clears everything, invalidate(user_id=u) every
        organization for u, invalidate(organization_id=o) every user in o.

        Returns:
            Number of entries removed
        """
        with self._lock:
            self._generation += 1
            keys = [
                key
                for key in self._entries
                if (user_id is None or key[0] == user_id)
                and (organization_id is None or key[1] == organization_id)
            ]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
