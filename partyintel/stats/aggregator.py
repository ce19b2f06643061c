"""
Network-wide summary statistics over the validator license list.

Everything is recomputed from the current cache snapshot on each call; nothing
is persisted between requests.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from typing import Optional, Sequence

from partyintel.core.models import ValidatorRecord
from partyintel.core.party import display_name
from partyintel.registry.cache import ValidatorCache
from partyintel.stats.schemas import NetworkStats, SponsorStat, VersionStat
from partyintel.utils.timestamps import local_midnight, parse_iso_timestamp, to_iso_utc

TOP_SPONSORS = 20
TOP_VERSIONS = 10
UNKNOWN_VERSION = "unknown"


def _round(record: ValidatorRecord) -> int:
    raw = record.faucet_state.last_received_round if record.faucet_state else None
    try:
        return max(0, int(raw or 0))
    except (TypeError, ValueError):
        return 0


def _has_contact(record: ValidatorRecord) -> bool:
    contact = record.metadata.contact_point if record.metadata else None
    return bool(contact and contact.strip())


def compute_stats(
    records: Sequence[ValidatorRecord],
    *,
    now: Optional[datetime] = None,
    fetched_at: Optional[datetime] = None,
) -> NetworkStats:
    """
    Summarise `records`.

    `now` fixes the reference time for the "active today" window (local
    midnight of `now`) and `lastUpdated`; it defaults to the current time.
    """
    current = now if now is not None else datetime.now().astimezone()
    midnight = local_midnight(current)

    # Counter keeps first-seen order, and sorted() is stable, so ties stay in discovery order.
    sponsors = Counter(r.sponsor_party_id for r in records)
    versions = Counter((r.version or UNKNOWN_VERSION) for r in records)

    sponsor_stats = [
        SponsorStat(sponsor=s, sponsor_name=display_name(s), validator_count=n)
        for s, n in sorted(sponsors.items(), key=lambda kv: kv[1], reverse=True)
    ]
    version_stats = [
        VersionStat(version=v, count=n)
        for v, n in sorted(versions.items(), key=lambda kv: kv[1], reverse=True)
    ]

    active_today = 0
    for r in records:
        ts = parse_iso_timestamp(r.last_active_at)
        if ts is not None and ts >= midnight:
            active_today += 1

    return NetworkStats(
        total_validators=len(records),
        total_sponsors=len(sponsors),
        active_today=active_today,
        with_contact=sum(1 for r in records if _has_contact(r)),
        latest_round=max((_round(r) for r in records), default=0),
        sponsor_stats=sponsor_stats[:TOP_SPONSORS],
        version_stats=version_stats[:TOP_VERSIONS],
        last_updated=to_iso_utc(current),
        snapshot_fetched_at=to_iso_utc(fetched_at) if fetched_at else None,
    )


class StatsService:
    """Stats over the shared validator cache (same freshness window as lookups)."""

    def __init__(self, cache: ValidatorCache) -> None:
        self.cache = cache

    def compute(self, *, now: Optional[datetime] = None) -> NetworkStats:
        snap = self.cache.get_snapshot()
        return compute_stats(snap.records, now=now, fetched_at=snap.fetched_at)
