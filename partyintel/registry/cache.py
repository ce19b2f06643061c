from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from partyintel.core.models import ValidatorRecord
from partyintel.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_STALE_RETRY_SECONDS = 30


@dataclass(frozen=True)
class CacheSnapshot:
    records: Tuple[ValidatorRecord, ...]
    fetched_at: datetime
    fetched_monotonic: float


def dedupe_records(records: Iterable[ValidatorRecord]) -> Tuple[Tuple[ValidatorRecord, ...], int]:
    """Keep the first record seen for each validator party id.

    Returns the surviving records in source order and the number dropped.
    """
    seen: Dict[str, ValidatorRecord] = {}
    dropped = 0
    for r in records:
        if r.validator_party_id in seen:
            dropped += 1
            continue
        seen[r.validator_party_id] = r
    return tuple(seen.values()), dropped


class ValidatorCache:
    """
    Process-local cache of the validator license list.

    - A snapshot younger than `ttl_seconds` is served without touching upstream.
    - Concurrent callers that find the snapshot stale share one in-flight fetch.
    - Snapshots are replaced wholesale; readers never see a partial list.
    - With `serve_stale_on_error`, a failed refresh hands out the stale snapshot
      and holds off the next upstream attempt for `stale_retry_seconds`.
    """

    def __init__(
        self,
        fetch: Callable[[], Sequence[ValidatorRecord]],
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        serve_stale_on_error: bool = False,
        stale_retry_seconds: float = DEFAULT_STALE_RETRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.serve_stale_on_error = serve_stale_on_error
        self.stale_retry_seconds = min(stale_retry_seconds, ttl_seconds)
        self._fetch = fetch
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[CacheSnapshot] = None
        self._inflight: Optional[Future] = None
        # Monotonic deadline before which a stale snapshot is served without retrying.
        self._retry_after: Optional[float] = None

    @property
    def snapshot(self) -> Optional[CacheSnapshot]:
        """The current snapshot, fresh or not, without triggering a fetch."""
        return self._snapshot

    def _is_fresh(self, snap: Optional[CacheSnapshot]) -> bool:
        if snap is None:
            return False
        now = self._clock()
        if now - snap.fetched_monotonic < self.ttl_seconds:
            return True
        retry_after = self._retry_after
        return retry_after is not None and now < retry_after

    def get_validators(self) -> List[ValidatorRecord]:
        return list(self.get_snapshot().records)

    def get_snapshot(self) -> CacheSnapshot:
        snap = self._snapshot
        if self._is_fresh(snap):
            return snap  # type: ignore[return-value]

        with self._lock:
            snap = self._snapshot
            if self._is_fresh(snap):
                return snap  # type: ignore[return-value]
            fut = self._inflight
            leader = fut is None
            if leader:
                fut = Future()
                self._inflight = fut

        if leader:
            self._refresh(fut, stale=snap)
        return fut.result()

    def invalidate(self) -> None:
        with self._lock:
            self._snapshot = None
            self._retry_after = None

    def _refresh(self, fut: Future, *, stale: Optional[CacheSnapshot]) -> None:
        started = self._clock()
        try:
            records, dropped = dedupe_records(self._fetch())
        except UpstreamUnavailable as exc:
            if stale is not None and self.serve_stale_on_error:
                age = (datetime.now(timezone.utc) - stale.fetched_at).total_seconds()
                with self._lock:
                    self._retry_after = self._clock() + self.stale_retry_seconds
                logger.warning(
                    "Validator refresh failed (%s); serving stale snapshot aged %.0fs, next retry in %.0fs",
                    exc,
                    age,
                    self.stale_retry_seconds,
                )
                fut.set_result(stale)
            else:
                logger.error("Validator refresh failed: %s", exc)
                fut.set_exception(exc)
        except Exception as exc:
            logger.exception("Unexpected error refreshing validators")
            fut.set_exception(exc)
        else:
            if dropped:
                logger.warning("Dropped %d duplicate validator party ids (first seen wins)", dropped)
            new = CacheSnapshot(
                records=records,
                fetched_at=datetime.now(timezone.utc),
                fetched_monotonic=self._clock(),
            )
            with self._lock:
                self._snapshot = new
                self._retry_after = None
            logger.info(
                "Refreshed validator cache: %d records in %.2fs",
                len(records),
                self._clock() - started,
            )
            fut.set_result(new)
        finally:
            with self._lock:
                self._inflight = None
