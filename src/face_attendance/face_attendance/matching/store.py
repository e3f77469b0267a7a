from __future__ import annotations

import logging
import threading
import time
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.locks import StripedLocks
from .model import EnrolledDescriptor
from .repository import DescriptorRepository

logger = logging.getLogger(__name__)


class DescriptorStore:
    """In-memory snapshot of enrolled descriptors over a repository.

    Readers get an immutable tuple and never block. Enrollment writes are
    serialized per identity; publishing the new snapshot is a pointer swap.
    """

    def __init__(
        self,
        repository: DescriptorRepository,
        *,
        refresh_seconds: float = 60.0,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._repository = repository
        self._refresh_seconds = float(refresh_seconds)
        self._monotonic = monotonic
        self._snapshot: dict[int, EnrolledDescriptor] = {}
        self._loaded_at: Optional[float] = None
        self._identity_locks = StripedLocks()
        self._publish_lock = threading.Lock()

    def _publish(self, mutate: Callable[[dict[int, EnrolledDescriptor]], None]) -> None:
        with self._publish_lock:
            fresh = dict(self._snapshot)
            mutate(fresh)
            self._snapshot = fresh

    def load_now(self) -> None:
        # A concurrent enroll publishes after this swap, never before it.
        with self._publish_lock:
            snapshot = {d.identity_id: d for d in self._repository.list_all()}
            self._snapshot = snapshot
            self._loaded_at = self._monotonic()
        logger.info("Loaded %d enrolled descriptors", len(snapshot))

    def ensure_fresh(self) -> None:
        if self._loaded_at is None or self._monotonic() - self._loaded_at > self._refresh_seconds:
            self.load_now()

    def snapshot(self) -> Sequence[EnrolledDescriptor]:
        self.ensure_fresh()
        return tuple(self._snapshot.values())

    def get(self, identity_id: int) -> Optional[EnrolledDescriptor]:
        self.ensure_fresh()
        return self._snapshot.get(int(identity_id))

    def enroll(self, identity_id: int, vector: Sequence[float], *, enrolled_at: datetime) -> EnrolledDescriptor:
        """Create or replace the identity's descriptor (re-enrollment never appends)."""
        descriptor = EnrolledDescriptor(
            identity_id=int(identity_id),
            vector=tuple(float(v) for v in vector),
            enrolled_at=enrolled_at,
        )
        with self._identity_locks.for_key(identity_id):
            self._repository.upsert(descriptor)

            def _put(entries: dict[int, EnrolledDescriptor]) -> None:
                entries[descriptor.identity_id] = descriptor

            self._publish(_put)
        return descriptor

    def remove(self, identity_id: int) -> bool:
        with self._identity_locks.for_key(identity_id):
            removed = self._repository.delete(int(identity_id))

            def _drop(entries: dict[int, EnrolledDescriptor]) -> None:
                entries.pop(int(identity_id), None)

            self._publish(_drop)
        return removed
