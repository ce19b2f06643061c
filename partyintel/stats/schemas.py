from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from partyintel.core.models import CamelModel


class SponsorStat(CamelModel):
    sponsor: str
    sponsor_name: str
    validator_count: int


class VersionStat(CamelModel):
    version: str
    count: int


class NetworkStats(CamelModel):
    total_validators: int
    total_sponsors: int
    active_today: int
    with_contact: int
    latest_round: int
    sponsor_stats: List[SponsorStat] = Field(default_factory=list)
    version_stats: List[VersionStat] = Field(default_factory=list)

    last_updated: str
    # When the underlying validator list was fetched from upstream.
    snapshot_fetched_at: Optional[str] = None
