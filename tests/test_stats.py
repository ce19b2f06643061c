from __future__ import annotations

from datetime import datetime, timedelta, timezone

from partyintel.core.models import ValidatorRecord
from partyintel.registry.cache import ValidatorCache
from partyintel.stats.aggregator import StatsService, compute_stats
from partyintel.utils.timestamps import local_midnight, parse_iso_timestamp

NOW = datetime(2025, 6, 10, 15, 30, tzinfo=timezone.utc)


def _records(license_factory, *items):
    return [ValidatorRecord.from_license(license_factory(*i[:2], **i[2])) for i in items]


def test_active_today_counts_since_local_midnight(license_factory):
    records = _records(
        license_factory,
        ("a::1", "s::1", {"last_active_at": "2025-06-10T09:00:00.123456Z"}),
        ("b::2", "s::1", {"last_active_at": "2025-06-09T23:59:59Z"}),
    )
    stats = compute_stats(records, now=NOW)
    assert stats.active_today == 1


def test_active_today_relative_to_wall_clock(license_factory):
    now = datetime.now(timezone.utc)
    today = now.isoformat().replace("+00:00", "Z")
    yesterday = (now - timedelta(days=1, hours=2)).isoformat().replace("+00:00", "Z")
    records = _records(
        license_factory,
        ("a::1", "s::1", {"last_active_at": today}),
        ("b::2", "s::1", {"last_active_at": yesterday}),
    )
    assert compute_stats(records).active_today == 1


def test_unparseable_last_active_is_not_active(license_factory):
    records = _records(license_factory, ("a::1", "s::1", {"last_active_at": "yesterday-ish"}))
    assert compute_stats(records, now=NOW).active_today == 0


def test_sponsor_and_version_histograms(license_factory):
    records = _records(
        license_factory,
        ("a::1", "Small::1", {"version": "0.4.0"}),
        ("b::2", "Big::1", {"version": "0.4.1"}),
        ("c::3", "Big::1", {"version": "0.4.1"}),
        ("d::4", "Mid::1", {"version": None}),
        ("e::5", "Mid::1", {"version": ""}),
    )
    stats = compute_stats(records, now=NOW)

    assert stats.total_validators == 5
    assert stats.total_sponsors == 3
    # Ties (Big/Mid both 2) keep discovery order.
    assert [(s.sponsor, s.sponsor_name, s.validator_count) for s in stats.sponsor_stats] == [
        ("Big::1", "Big", 2),
        ("Mid::1", "Mid", 2),
        ("Small::1", "Small", 1),
    ]
    assert [(v.version, v.count) for v in stats.version_stats] == [
        ("0.4.1", 2),
        ("unknown", 2),
        ("0.4.0", 1),
    ]
    assert sum(s.validator_count for s in stats.sponsor_stats) == stats.total_validators
    assert sum(v.count for v in stats.version_stats) == stats.total_validators


def test_top_lists_are_capped(license_factory):
    items = [(f"v{i}::x", f"S{i}::1", {"version": f"0.{i}"}) for i in range(30)]
    stats = compute_stats(_records(license_factory, *items), now=NOW)
    assert stats.total_sponsors == 30
    assert len(stats.sponsor_stats) == 20
    assert len(stats.version_stats) == 10


def test_with_contact_ignores_blank(license_factory):
    records = _records(
        license_factory,
        ("a::1", "s::1", {"contact": "ops@a.io"}),
        ("b::2", "s::1", {"contact": "   "}),
        ("c::3", "s::1", {}),
    )
    assert compute_stats(records, now=NOW).with_contact == 1


def test_latest_round_is_max_parsed_integer(license_factory):
    records = _records(
        license_factory,
        ("a::1", "s::1", {"last_round": "120"}),
        ("b::2", "s::1", {"last_round": "98765"}),
        ("c::3", "s::1", {"last_round": "not-a-number"}),
        ("d::4", "s::1", {"last_round": "-5"}),
        ("e::5", "s::1", {}),
    )
    assert compute_stats(records, now=NOW).latest_round == 98765


def test_latest_round_defaults_to_zero(license_factory):
    records = _records(license_factory, ("a::1", "s::1", {"last_round": "-7"}))
    assert compute_stats(records, now=NOW).latest_round == 0
    assert compute_stats([], now=NOW).latest_round == 0


def test_empty_network(license_factory):
    stats = compute_stats([], now=NOW)
    assert stats.total_validators == 0
    assert stats.total_sponsors == 0
    assert stats.sponsor_stats == []
    assert stats.last_updated == "2025-06-10T15:30:00Z"


def test_stats_service_uses_shared_cache(fake_client_factory, license_factory):
    client = fake_client_factory([license_factory("a::1", "s::1"), license_factory("b::2", "s::1")])
    cache = ValidatorCache(client.fetch_validator_licenses)
    service = StatsService(cache)

    first = service.compute(now=NOW)
    cache.get_validators()
    second = service.compute(now=NOW)

    assert client.fetch_calls == 1
    assert first.total_validators == second.total_validators == 2
    assert first.snapshot_fetched_at is not None


def test_parse_iso_timestamp_variants():
    assert parse_iso_timestamp("2025-06-10T09:00:00Z") == datetime(2025, 6, 10, 9, tzinfo=timezone.utc)
    nano = parse_iso_timestamp("2025-06-10T09:00:00.123456789Z")
    assert nano.microsecond == 123456
    short = parse_iso_timestamp("2025-06-10T09:00:00.5+00:00")
    assert short.microsecond == 500000
    assert parse_iso_timestamp("") is None
    assert parse_iso_timestamp("garbage") is None


def test_local_midnight_keeps_timezone():
    tz = timezone(timedelta(hours=-5))
    m = local_midnight(datetime(2025, 6, 10, 3, 0, tzinfo=tz))
    assert m == datetime(2025, 6, 10, 0, 0, tzinfo=tz)
